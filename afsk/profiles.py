"""AFSK WAV decoder — all protocol constants, keyed in one place.

Nothing here is computed at runtime.  Change a value here and it propagates
everywhere; per-call overrides go through the keyword arguments of
:mod:`afsk.api`.
"""

# ── WAV container ─────────────────────────────────────────────────────────────
# The header may have a different size in general; every supported recording
# uses the canonical 44-byte RIFF/WAVE layout.
HEADER_LEN      = 44
TAG_LEN         = 4
PCM_FORMAT      = 1
PCM_CHANNELS    = 2
PCM_BITS        = 16

# ── Bit timing ────────────────────────────────────────────────────────────────
# A "1" is one half-wave of ONE_SIGNAL_TIME seconds, a "0" is twice as long.
# Real recordings are not ideal rectangles, so both minimums are relaxed by
# SIGNAL_TOLERANCE samples.
ONE_SIGNAL_TIME  = 0.000320   # seconds
SIGNAL_TOLERANCE = 1          # samples

# ── Byte framing ──────────────────────────────────────────────────────────────
# [0] start bit = 0 | [1:9] data bits, LSB first | [9] stop = 1 | [10] stop = 1
FRAME_BITS       = 11
START_BIT_POS    = 0
START_BIT_VALUE  = 0
DATA_BIT_LO      = 1
DATA_BIT_HI      = 9          # exclusive
STOP_BIT_POS_1   = 9
STOP_BIT_POS_2   = 10
STOP_BIT_VALUE   = 1

# ── Stream framing ────────────────────────────────────────────────────────────
MARKER           = bytes([0x42, 0x03])
BLOCK_SIZE       = 30         # tone-data bytes per block
CHECKSUM_LEN     = 1          # one mod-256 checksum byte follows every block
CHECKSUM_MODULO  = 256
PAYLOAD_BUDGET   = 1984       # total payload bytes (64 × 31)

# ── Caller-facing failure text ────────────────────────────────────────────────
FAILURE_MESSAGE  = "(ノಠ益ಠ)ノ彡┻━┻ Something goes wrong..."
