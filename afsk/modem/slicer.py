"""AFSK WAV decoder — run-length bit slicer.

Walks the mono signal left to right and measures every run of same-sign
samples.  A run is *closed* by the state transition that ends it:

  run length ≥ min_zero  → bit 0
  run length ≥ min_one   → bit 1
  otherwise              → dropped (noise / jitter below tolerance)

The first run only seeds the running state and never emits a bit; the last
run is never closed and never emits either.  A ZERO sample is a state like
any other, so a positive → zero → negative crossing closes two runs.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .dsp import signal_states


@dataclass
class SliceResult:
    """Bits recovered from one signal plus run statistics."""

    bits:          NDArray[np.uint8]
    runs_closed:   int = 0     # runs ended by a transition (excluding the seed run)
    runs_dropped:  int = 0     # closed runs shorter than min_one


def classify_run(length: int, min_one: int, min_zero: int) -> int | None:
    """Bit value for a single closed run, or None if it is too short."""
    if length >= min_zero:
        return 0
    if length >= min_one:
        return 1
    return None


def run_lengths(mono: NDArray[np.integer]) -> NDArray[np.intp]:
    """Lengths of all closed runs after the seed run, in signal order."""
    states = signal_states(mono)
    if len(states) < 2:
        return np.array([], dtype=np.intp)

    # Index of the first sample of every run after the first
    starts = np.flatnonzero(states[1:] != states[:-1]) + 1
    bounds = np.concatenate([[0], starts])
    # bounds[i] → bounds[i+1] is a closed run; [0] is the seed run
    return np.diff(bounds)[1:]


def demodulate(
    mono: NDArray[np.integer],
    min_one: int,
    min_zero: int,
) -> SliceResult:
    """Convert a mono signal to a raw bit stream.

    Args:
        mono:     1-D integer samples.
        min_one:  Minimum run length for a "1" (see :func:`~afsk.modem.dsp.signal_lengths`).
        min_zero: Minimum run length for a "0".

    Returns:
        :class:`SliceResult` with ``bits`` as a uint8 array of 0/1 values.
    """
    lengths = run_lengths(mono)

    # -1 marks "too short"; zero threshold applied last so it wins
    coded = np.full(len(lengths), -1, dtype=np.int8)
    coded[lengths >= min_one]  = 1
    coded[lengths >= min_zero] = 0

    keep = coded >= 0
    return SliceResult(
        bits=coded[keep].astype(np.uint8),
        runs_closed=len(lengths),
        runs_dropped=int(np.count_nonzero(~keep)),
    )
