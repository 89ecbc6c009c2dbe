"""AFSK WAV decoder — decode result type, failure codes and checksum events."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional

from .wav import WavHeader


class FailureCode(str, Enum):
    """Reason a decode attempt did not produce text."""

    OK        = "ok"
    TRUNCATED = "truncated"     # stream ended inside the header or the PCM payload


class StreamState(str, Enum):
    """Where the payload state machine stopped."""

    SEARCHING = "searching"     # waiting for the 0x42 0x03 marker
    READING   = "reading"       # collecting 30-byte blocks + checksum
    DONE      = "done"          # payload budget consumed


@dataclass(frozen=True)
class ChecksumEvent:
    """Outcome of one 30-byte block's checksum comparison."""

    block:    int       # 0-based block index
    computed: int       # sum(block) mod 256
    received: int       # 31st byte as transmitted

    @property
    def ok(self) -> bool:
        return self.computed == self.received


@dataclass
class DecodeResult:
    """Full decode outcome returned by :func:`afsk.decode_stream`.

    On success  : ``success=True``,  ``text`` is the recovered message (may be
                  empty if no marker was found).
    On failure  : ``success=False``, ``failure`` explains why, ``text`` is None.

    A checksum mismatch is not a failure: the block is kept and the mismatch
    is reported in ``checksum_events``.
    """

    success:          bool
    text:             Optional[str]         = None
    failure:          Optional[FailureCode] = None
    detail:           Optional[str]         = None
    header:           Optional[WavHeader]   = None

    # Diagnostics — always populated (0 / empty if unavailable)
    stream_state:     StreamState           = StreamState.SEARCHING
    runs_dropped:     int                   = 0    # signal runs too short to classify
    bits_decoded:     int                   = 0    # bits emitted by the slicer
    frames_decoded:   int                   = 0    # 11-bit frames with valid start/stop bits
    frames_rejected:  int                   = 0    # 11-bit frames discarded
    blocks_decoded:   int                   = 0    # 30-byte blocks appended to text
    payload_bytes:    int                   = 0    # data + checksum bytes consumed
    checksum_events:  list[ChecksumEvent]   = field(default_factory=list)

    @property
    def checksum_errors(self) -> int:
        return sum(1 for ev in self.checksum_events if not ev.ok)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["failure"]         = self.failure.value if self.failure else None
        d["stream_state"]    = self.stream_state.value
        d["checksum_errors"] = self.checksum_errors
        for ev, raw in zip(self.checksum_events, d["checksum_events"]):
            raw["ok"] = ev.ok
        return d

    # Human-readable summary for logging / CLI output
    def summary(self) -> str:
        if self.success:
            chars = len(self.text) if self.text else 0
            return (
                f"[OK] {chars} chars decoded  state={self.stream_state.value}  "
                f"blocks={self.blocks_decoded} payload={self.payload_bytes}B "
                f"checksum_err={self.checksum_errors} "
                f"frames={self.frames_decoded}/{self.frames_decoded + self.frames_rejected}"
            )
        return f"[FAIL:{self.failure.value}]  {self.detail or ''}".rstrip()

    def __repr__(self) -> str:
        return f"DecodeResult({self.summary()})"
