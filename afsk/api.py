"""AFSK WAV decoder — high-level decode API.

decode_stream(stream)        -> DecodeResult
decode_file(path)            -> DecodeResult
decode_samples(mono, rate)   -> DecodeResult
get_decoded_message(stream)  -> str   (decoded text or FAILURE_MESSAGE)

Full pipeline
=============

  byte stream
    → 44-byte header + subchunk2_size PCM bytes      (wav.read_wav)
    → int16 interleaved stereo → floor-average mono  (dsp.pcm_to_samples, dsp.to_mono)
    → run-length thresholds from the sample rate     (dsp.signal_lengths)
    → same-sign run lengths → bit stream             (slicer.demodulate)
    → back-to-back 11-bit frames → bytes             (framing.frames_to_bytes)
    → marker search, 30+1 byte blocks → text         (framing.PayloadAssembler)
    → DecodeResult

Only a truncated stream is a failure.  Bad frames, short runs and checksum
mismatches are absorbed and counted in the result's diagnostics.
"""

import logging
import os
from typing import BinaryIO

import numpy as np
from numpy.typing import NDArray

from .diagnostics import DecodeResult, FailureCode, StreamState
from .framing import PayloadAssembler, frames_to_bytes
from .modem.dsp import pcm_to_samples, signal_lengths, to_mono
from .modem.slicer import demodulate
from .profiles import FAILURE_MESSAGE, ONE_SIGNAL_TIME, SIGNAL_TOLERANCE
from .wav import TruncatedStreamError, read_wav

logger = logging.getLogger(__name__)


def decode_samples(
    mono: NDArray[np.integer],
    sample_rate: int,
    *,
    one_signal_time: float = ONE_SIGNAL_TIME,
    tolerance: int = SIGNAL_TOLERANCE,
) -> DecodeResult:
    """Decode an already-downmixed mono signal.

    Args:
        mono:            1-D integer samples.
        sample_rate:     Samples per second of *mono*.
        one_signal_time: Nominal duration of a "1" half-wave, seconds.
        tolerance:       Samples subtracted from both minimum run lengths.

    Returns:
        :class:`DecodeResult` with ``success=True``.
    """
    min_one, min_zero = signal_lengths(sample_rate, one_signal_time, tolerance)
    logger.debug(
        "Run-length thresholds at %d Hz: one>=%d zero>=%d",
        sample_rate, min_one, min_zero,
    )

    sliced            = demodulate(mono, min_one, min_zero)
    values, rejected  = frames_to_bytes(sliced.bits)

    assembler = PayloadAssembler()
    for value in values:
        if assembler.feed(value) is StreamState.DONE:
            break

    text = assembler.text
    logger.info("Decoded message: %s", text)

    return DecodeResult(
        success=True,
        text=text,
        failure=FailureCode.OK,
        stream_state=assembler.state,
        runs_dropped=sliced.runs_dropped,
        bits_decoded=len(sliced.bits),
        frames_decoded=len(values),
        frames_rejected=rejected,
        blocks_decoded=assembler.blocks_decoded,
        payload_bytes=assembler.payload_bytes,
        checksum_events=assembler.events,
    )


def decode_stream(
    stream: BinaryIO,
    *,
    one_signal_time: float = ONE_SIGNAL_TIME,
    tolerance: int = SIGNAL_TOLERANCE,
) -> DecodeResult:
    """Decode a WAV byte stream.  *stream* is closed before returning.

    Returns:
        :class:`DecodeResult` — check ``.success`` before using ``.text``.
    """
    with stream:
        try:
            header, payload = read_wav(stream)
        except TruncatedStreamError as exc:
            logger.warning("Cannot decode stream: %s", exc)
            return DecodeResult(
                success=False,
                failure=FailureCode.TRUNCATED,
                detail=str(exc),
            )

    mono   = to_mono(pcm_to_samples(payload))
    result = decode_samples(
        mono,
        header.sample_rate,
        one_signal_time=one_signal_time,
        tolerance=tolerance,
    )
    result.header = header
    return result


def decode_file(path: str | os.PathLike, **kwargs) -> DecodeResult:
    """Open *path* in binary mode and :func:`decode_stream` it."""
    return decode_stream(open(path, "rb"), **kwargs)


def get_decoded_message(stream: BinaryIO) -> str:
    """Decoded text, or :data:`~afsk.profiles.FAILURE_MESSAGE` if the stream
    could not be read.  Never raises for a truncated stream."""
    result = decode_stream(stream)
    if result.success:
        return result.text
    return FAILURE_MESSAGE
