"""Shared fixtures: synthetic AFSK signals and WAV buffers.

The signal is an ideal square wave: every bit is one half-wave whose sign
alternates with the previous one.  At 44.1 kHz the decoder's thresholds are
(min_one=13, min_zero=27), so 14-sample runs read as 1 and 28-sample runs as 0.
"""
from __future__ import annotations

import numpy as np
import pytest

from afsk.profiles import MARKER, BLOCK_SIZE
from afsk.wav import WavHeader

SR        = 44_100
ONE_RUN   = 14
ZERO_RUN  = 28
SEED_RUN  = 20     # leading half-wave, only seeds the slicer
TAIL_RUN  = 20     # closes the last bit; never emitted itself
AMP       = 8_000


def frame_bits(value: int) -> list[int]:
    """11-bit frame for *value*: start 0, data LSB first, two stop 1s."""
    return [0] + [(value >> i) & 1 for i in range(8)] + [1, 1]


def bytes_to_bits(data: bytes) -> list[int]:
    bits: list[int] = []
    for b in data:
        bits.extend(frame_bits(b))
    return bits


def bits_to_mono(bits, one_run: int = ONE_RUN, zero_run: int = ZERO_RUN) -> np.ndarray:
    runs = [SEED_RUN] + [zero_run if b == 0 else one_run for b in bits] + [TAIL_RUN]
    out  = []
    sign = 1
    for n in runs:
        out.append(np.full(n, sign * AMP, dtype=np.int16))
        sign = -sign
    return np.concatenate(out)


def payload_for(text: str, *, checksum: int | None = None) -> bytes:
    """Marker + one 30-byte block of *text* (space-padded) + its checksum."""
    block = text.ljust(BLOCK_SIZE)[:BLOCK_SIZE].encode('ascii')
    csum  = sum(block) % 256 if checksum is None else checksum
    return MARKER + block + bytes([csum])


def stereo_pcm(left: np.ndarray, right: np.ndarray | None = None) -> bytes:
    right = left if right is None else right
    return np.column_stack([left, right]).astype('<i2').tobytes()


def wav_bytes(pcm: bytes, sample_rate: int = SR, data_size: int | None = None) -> bytes:
    header = WavHeader(
        chunk_id='RIFF',
        chunk_size=36 + len(pcm),
        format='WAVE',
        subchunk1_id='fmt ',
        subchunk1_size=16,
        audio_format=1,
        num_channels=2,
        sample_rate=sample_rate,
        byte_rate=sample_rate * 4,
        block_align=4,
        bits_per_sample=16,
        subchunk2_id='data',
        subchunk2_size=len(pcm) if data_size is None else data_size,
    )
    return header.pack() + pcm


@pytest.fixture
def afsk_wav():
    """Build a WAV buffer carrying *data* as framed AFSK bytes."""
    def _build(data: bytes, sample_rate: int = SR) -> bytes:
        return wav_bytes(stereo_pcm(bits_to_mono(bytes_to_bits(data))), sample_rate)
    return _build
