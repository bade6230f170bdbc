"""Receive ring buffer and baud-rate divisor for an 8N1 serial link."""

from __future__ import annotations

F_CPU = 16_000_000
BAUD_RATE = 9600
RX_BUFFER_SIZE = 64


def baud_divisor(f_cpu: float = F_CPU, baud: float = BAUD_RATE) -> int:
    """Return the 16-bit baud-rate register value for a clock and baud rate."""
    if baud <= 0:
        raise ValueError("baud rate must be positive")
    value = int(f_cpu / (baud * 16.0) - 1.0)
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"baud divisor {value} does not fit in 16 bits")
    return value


class RxRingBuffer:
    """Fixed-size ring buffer of received bytes.

    Writes never check for overflow: pushing ``size`` bytes without reading
    makes the head catch up with the tail and the buffer reads as empty.
    """

    def __init__(self, size: int = RX_BUFFER_SIZE) -> None:
        if size < 1:
            raise ValueError("buffer size must be at least 1")
        self._data = bytearray(size)
        self._head = 0
        self._tail = 0

    def push(self, byte: int) -> None:
        """Store one received byte."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"not a byte: {byte!r}")
        self._data[self._head] = byte
        self._head = (self._head + 1) % len(self._data)

    def get(self) -> int:
        """Remove and return the oldest byte; raise IndexError when empty."""
        if self.is_empty():
            raise IndexError("receive buffer is empty")
        byte = self._data[self._tail]
        self._tail = (self._tail + 1) % len(self._data)
        return byte

    def clear(self) -> None:
        """Discard everything not yet read."""
        self._tail = self._head

    def is_empty(self) -> bool:
        return self._tail == self._head

    def __len__(self) -> int:
        return (self._head - self._tail) % len(self._data)