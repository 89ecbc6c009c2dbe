"""WAV container reader — fixed 44-byte RIFF header + raw PCM payload.

Layout (all multi-byte integers little-endian):
  [0:4]   chunk_id        "RIFF"
  [4:8]   chunk_size      uint32
  [8:12]  format          "WAVE"
  [12:16] subchunk1_id    "fmt "
  [16:20] subchunk1_size  uint32
  [20:22] audio_format    uint16   1 = PCM
  [22:24] num_channels    uint16
  [24:28] sample_rate     uint32
  [28:32] byte_rate       uint32
  [32:34] block_align     uint16
  [34:36] bits_per_sample uint16
  [36:40] subchunk2_id    "data"
  [40:44] subchunk2_size  uint32 — PCM payload byte count
  ── 44 bytes total ──

No field is validated: a malformed header yields garbage metadata rather than
an error.  Only a short read is fatal.
"""

import logging
import struct
from dataclasses import asdict, dataclass
from typing import BinaryIO

from .profiles import HEADER_LEN, PCM_BITS, PCM_CHANNELS, PCM_FORMAT, TAG_LEN

logger = logging.getLogger(__name__)

# Field:  chunk_id chunk_size format sub1_id sub1_size fmt ch rate brate align bits sub2_id sub2_size
# Sizes:     4        4         4      4        4       2  2   4     4     2    2     4       4     = 44
_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")
assert _STRUCT.size == HEADER_LEN, f"Header struct size mismatch: {_STRUCT.size}"


class TruncatedStreamError(EOFError):
    """The stream ended before the header or the PCM payload was complete."""

    def __init__(self, what: str, expected: int, got: int):
        self.what     = what
        self.expected = expected
        self.got      = got
        super().__init__(f"Truncated {what}: expected {expected} bytes, got {got}")


@dataclass(frozen=True)
class WavHeader:
    """Parsed representation of the 44-byte WAV header."""

    chunk_id:        str
    chunk_size:      int
    format:          str
    subchunk1_id:    str
    subchunk1_size:  int
    audio_format:    int
    num_channels:    int
    sample_rate:     int
    byte_rate:       int
    block_align:     int
    bits_per_sample: int
    subchunk2_id:    str
    subchunk2_size:  int

    # ── derived helpers ───────────────────────────────────────────────────────

    @property
    def is_pcm16_stereo(self) -> bool:
        return (
            self.audio_format == PCM_FORMAT
            and self.num_channels == PCM_CHANNELS
            and self.bits_per_sample == PCM_BITS
        )

    @property
    def duration_s(self) -> float:
        if self.byte_rate == 0:
            return 0.0
        return self.subchunk2_size / self.byte_rate

    def to_dict(self) -> dict:
        return asdict(self)

    # ── pack / unpack ─────────────────────────────────────────────────────────

    def pack(self) -> bytes:
        """Serialise to a 44-byte bytes object."""
        return _STRUCT.pack(
            _tag(self.chunk_id),
            self.chunk_size,
            _tag(self.format),
            _tag(self.subchunk1_id),
            self.subchunk1_size,
            self.audio_format,
            self.num_channels,
            self.sample_rate,
            self.byte_rate,
            self.block_align,
            self.bits_per_sample,
            _tag(self.subchunk2_id),
            self.subchunk2_size,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "WavHeader":
        """Deserialise from the first 44 bytes of *data*.

        Raises TruncatedStreamError if *data* is shorter than the header.
        """
        if len(data) < HEADER_LEN:
            raise TruncatedStreamError("header", HEADER_LEN, len(data))

        (
            chunk_id,
            chunk_size,
            fmt,
            subchunk1_id,
            subchunk1_size,
            audio_format,
            num_channels,
            sample_rate,
            byte_rate,
            block_align,
            bits_per_sample,
            subchunk2_id,
            subchunk2_size,
        ) = _STRUCT.unpack(data[:HEADER_LEN])

        return cls(
            chunk_id=chunk_id.decode("ascii", errors="replace"),
            chunk_size=chunk_size,
            format=fmt.decode("ascii", errors="replace"),
            subchunk1_id=subchunk1_id.decode("ascii", errors="replace"),
            subchunk1_size=subchunk1_size,
            audio_format=audio_format,
            num_channels=num_channels,
            sample_rate=sample_rate,
            byte_rate=byte_rate,
            block_align=block_align,
            bits_per_sample=bits_per_sample,
            subchunk2_id=subchunk2_id.decode("ascii", errors="replace"),
            subchunk2_size=subchunk2_size,
        )

    def __repr__(self) -> str:
        return (
            f"WavHeader({self.chunk_id}/{self.format} fmt={self.audio_format} "
            f"{self.num_channels}ch {self.sample_rate}Hz {self.bits_per_sample}bit "
            f"data={self.subchunk2_size}B)"
        )


def _tag(value: str) -> bytes:
    raw = value.encode("ascii")
    if len(raw) != TAG_LEN:
        raise ValueError(f"WAV tag must be 4 ASCII chars, got {value!r}")
    return raw


# ── stream readers ────────────────────────────────────────────────────────────

def _read_exact(stream: BinaryIO, n: int) -> bytes:
    """Read *n* bytes, looping over short reads; stops early only at EOF."""
    chunks = []
    remaining = n
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_header(stream: BinaryIO) -> WavHeader:
    """Read and parse the 44-byte header from the current stream position."""
    data = _read_exact(stream, HEADER_LEN)
    header = WavHeader.unpack(data)
    if not header.is_pcm16_stereo:
        logger.warning(
            "Header is not 16-bit stereo PCM (%r); decoding as if it were", header
        )
    return header


def read_payload(stream: BinaryIO, header: WavHeader) -> bytes:
    """Read exactly ``header.subchunk2_size`` PCM bytes following the header."""
    data = _read_exact(stream, header.subchunk2_size)
    if len(data) < header.subchunk2_size:
        raise TruncatedStreamError("payload", header.subchunk2_size, len(data))
    return data


def read_wav(stream: BinaryIO) -> tuple[WavHeader, bytes]:
    """Read header then payload.  Returns (header, pcm_bytes)."""
    header  = read_header(stream)
    payload = read_payload(stream, header)
    logger.debug("Read %r, %d payload bytes", header, len(payload))
    return header, payload
