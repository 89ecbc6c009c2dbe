"""AFSK WAV decoder — recover ASCII text from AFSK-keyed 16-bit stereo WAV.

Public API:
    decode_stream(stream, *, one_signal_time=..., tolerance=...) -> DecodeResult
    decode_file(path, **kwargs)                                  -> DecodeResult
    get_decoded_message(stream)                                  -> str
"""

from .api import decode_file, decode_samples, decode_stream, get_decoded_message
from .diagnostics import ChecksumEvent, DecodeResult, FailureCode, StreamState
from .profiles import FAILURE_MESSAGE
from .wav import TruncatedStreamError, WavHeader

__version__ = "1.0.0"
__all__ = [
    "decode_stream", "decode_file", "decode_samples", "get_decoded_message",
    "DecodeResult", "FailureCode", "StreamState", "ChecksumEvent",
    "WavHeader", "TruncatedStreamError", "FAILURE_MESSAGE",
]
