"""AFSK WAV decoder — DSP helpers: PCM unpacking, mono downmix, signal state.

Signal model assumed
--------------------
The encoder keys the line with half-waves of two durations.  Only the sign of
each sample matters: a half-wave is a run of same-sign samples, and its length
in samples decides the bit (see :mod:`afsk.modem.slicer`).

All operations are vectorised over the whole recording.
"""

from enum import IntEnum

import numpy as np
from numpy.typing import NDArray

from ..profiles import ONE_SIGNAL_TIME, SIGNAL_TOLERANCE


class SignalState(IntEnum):
    """Sign of one mono sample.  Values match ``np.sign``."""

    NEGATIVE = -1
    ZERO     = 0
    POSITIVE = 1


# ── PCM unpacking ─────────────────────────────────────────────────────────────

def pcm_to_samples(payload: bytes) -> NDArray[np.int16]:
    """Interpret *payload* as little-endian signed 16-bit samples.

    A trailing odd byte, if any, is ignored.
    """
    n_bytes = len(payload) - (len(payload) % 2)
    return np.frombuffer(payload[:n_bytes], dtype="<i2").astype(np.int16)


def to_mono(samples: NDArray[np.int16]) -> NDArray[np.int16]:
    """Average interleaved L/R pairs: ``floor((L + R) / 2)``.

    Returns an array of length ``len(samples) // 2``; an unpaired trailing
    sample is dropped.
    """
    n_pairs = len(samples) // 2
    pairs   = np.asarray(samples[:n_pairs * 2], dtype=np.int32).reshape(n_pairs, 2)
    # int32 sum cannot overflow; floor_divide rounds toward -inf
    return np.floor_divide(pairs[:, 0] + pairs[:, 1], 2).astype(np.int16)


# ── signal state ──────────────────────────────────────────────────────────────

def signal_state(value: int) -> SignalState:
    if value > 0:
        return SignalState.POSITIVE
    if value < 0:
        return SignalState.NEGATIVE
    return SignalState.ZERO


def signal_states(mono: NDArray[np.integer]) -> NDArray[np.int8]:
    """Per-sample :class:`SignalState` values as an int8 array."""
    return np.sign(np.asarray(mono)).astype(np.int8)


# ── run-length thresholds ─────────────────────────────────────────────────────

def signal_lengths(
    sample_rate: int,
    one_signal_time: float = ONE_SIGNAL_TIME,
    tolerance: int = SIGNAL_TOLERANCE,
) -> tuple[int, int]:
    """Minimum run lengths (in samples) for a "1" and for a "0".

    At 44 100 Hz with the defaults: 44100 × 0.00032 = 14.11 → (13, 27).

    Returns:
        (min_one, min_zero) — fractional values are truncated toward zero.
    """
    nominal  = sample_rate * one_signal_time
    min_one  = int(nominal - tolerance)
    min_zero = int(nominal * 2 - tolerance)
    return min_one, min_zero
