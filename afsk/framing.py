"""AFSK WAV decoder — byte framing and payload assembly.

Byte frame (11 bits, in arrival order):
  [0]     start bit  = 0
  [1:9]   data bits, LSB first
  [9]     stop bit   = 1
  [10]    stop bit   = 1

Frames are cut from the bit stream back to back with no realignment: a frame
with a bad start or stop bit is dropped and the next 11 bits are tried.

Payload (carried by framed bytes):
  0x42 0x03                         stream marker
  { 30 data bytes | 1 checksum } ×  until PAYLOAD_BUDGET bytes are consumed
  checksum = sum(data bytes) mod 256
"""

import logging

import numpy as np
from numpy.typing import NDArray

from .diagnostics import ChecksumEvent, StreamState
from .profiles import (
    FRAME_BITS,
    START_BIT_POS, START_BIT_VALUE,
    STOP_BIT_POS_1, STOP_BIT_POS_2, STOP_BIT_VALUE,
    DATA_BIT_LO, DATA_BIT_HI,
    MARKER, BLOCK_SIZE, CHECKSUM_LEN, CHECKSUM_MODULO, PAYLOAD_BUDGET,
)

logger = logging.getLogger(__name__)

# Place value of each data bit, LSB first
_DATA_WEIGHTS = 1 << np.arange(DATA_BIT_HI - DATA_BIT_LO)


# ── bit frames ────────────────────────────────────────────────────────────────

def decode_frame(bits) -> int | None:
    """Decode one 11-bit frame.

    Returns:
        The data byte (0–255) if bit 0 is 0 and bits 9 and 10 are 1,
        otherwise None.
    """
    if len(bits) != FRAME_BITS:
        raise ValueError(f"frame must be {FRAME_BITS} bits, got {len(bits)}")
    if (
        bits[START_BIT_POS] != START_BIT_VALUE
        or bits[STOP_BIT_POS_1] != STOP_BIT_VALUE
        or bits[STOP_BIT_POS_2] != STOP_BIT_VALUE
    ):
        return None
    value = 0
    for i, bit in enumerate(bits[DATA_BIT_LO:DATA_BIT_HI]):
        if bit:
            value |= 1 << i
    return value


def frames_to_bytes(bits: NDArray[np.uint8]) -> tuple[list[int], int]:
    """Cut *bits* into consecutive 11-bit frames and decode each.

    Trailing bits that don't fill a frame are discarded.

    Returns:
        (values, rejected) — decoded bytes in order, and the number of frames
        dropped for a bad start/stop bit.
    """
    bits     = np.asarray(bits, dtype=np.uint8)
    n_frames = len(bits) // FRAME_BITS
    frames   = bits[:n_frames * FRAME_BITS].reshape(n_frames, FRAME_BITS)

    valid = (
        (frames[:, START_BIT_POS]  == START_BIT_VALUE)
        & (frames[:, STOP_BIT_POS_1] == STOP_BIT_VALUE)
        & (frames[:, STOP_BIT_POS_2] == STOP_BIT_VALUE)
    )
    data   = frames[valid, DATA_BIT_LO:DATA_BIT_HI].astype(np.intp)
    values = data @ _DATA_WEIGHTS

    return [int(v) for v in values], int(n_frames - np.count_nonzero(valid))


# ── payload ───────────────────────────────────────────────────────────────────

def checksum(block: bytes) -> int:
    return sum(block) % CHECKSUM_MODULO


class PayloadAssembler:
    """Byte-at-a-time state machine: marker search → blocks → done.

    One instance per decode; feed it framed bytes with :meth:`feed`.
    """

    def __init__(self, budget: int = PAYLOAD_BUDGET):
        self.budget        = budget
        self.state         = StreamState.SEARCHING
        self.payload_bytes = 0
        self.events: list[ChecksumEvent] = []

        self._marker = bytearray()
        self._block  = bytearray()
        self._text: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self._text)

    @property
    def blocks_decoded(self) -> int:
        return len(self.events)

    def feed(self, value: int) -> StreamState:
        """Consume one framed byte and return the resulting state."""
        if self.state is StreamState.SEARCHING:
            self._search(value)
        elif self.state is StreamState.READING:
            self._read(value)
        return self.state

    def _search(self, value: int) -> None:
        if value == MARKER[0]:
            self._marker[:] = bytes([value])
        elif value == MARKER[1] and self._marker == MARKER[:1]:
            self._marker.clear()
            self.state = StreamState.READING
            logger.debug("Stream marker found")
        else:
            self._marker.clear()

    def _read(self, value: int) -> None:
        if len(self._block) < BLOCK_SIZE:
            self._block.append(value)
            return

        event = ChecksumEvent(
            block=len(self.events),
            computed=checksum(self._block),
            received=value,
        )
        self.events.append(event)
        if event.ok:
            logger.info(
                "Block %d checksum is correct: %d", event.block, event.computed
            )
        else:
            # Kept regardless: some recordings carry blocks whose 31st byte
            # never matches the data sum.
            logger.warning(
                "Block %d checksum mismatch: computed %d, received %d",
                event.block, event.computed, event.received,
            )

        self._text.append(bytes(self._block).decode("latin-1"))
        self._block.clear()
        self.payload_bytes += BLOCK_SIZE + CHECKSUM_LEN

        if self.payload_bytes >= self.budget:
            self.state = StreamState.DONE
            logger.debug("Payload budget of %d bytes consumed", self.budget)
