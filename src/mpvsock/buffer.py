"""Growable byte buffer that hands out newline-delimited lines."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger("mpvsock.buffer")

LINE_DELIM = b"\n"
READ_SIZE = 4096


class ByteSource(Protocol):
    """Anything with socket-style ``recv``."""

    def recv(self, bufsize: int) -> bytes: ...


class ResponseBuffer:
    """Accumulates bytes from the channel and yields complete lines.

    ``position`` marks the start of unconsumed data. Consumed lines stay in
    the buffer until ``shift()`` compacts it, so callers should shift once
    per read cycle after draining every complete line.
    """

    def __init__(self):
        self._buffer = bytearray()
        self.position = 0
        self.eof = False

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def pending(self) -> bytes:
        """Bytes that have been read but not yet consumed."""
        return bytes(self._buffer[self.position:])

    def feed(self, data: bytes) -> None:
        """Append bytes directly."""
        self._buffer += data

    def read_nonblocking(self, source: ByteSource) -> int:
        """Read everything currently available without blocking.

        Returns the number of bytes appended. "Would block" ends the read
        quietly; a zero-length read marks the buffer as at EOF.
        """
        total = 0
        while True:
            try:
                chunk = source.recv(READ_SIZE)
            except BlockingIOError:
                break
            if not chunk:
                self.eof = True
                break
            self._buffer += chunk
            total += len(chunk)
        return total

    def read_blocking(self, source: ByteSource) -> int:
        """Read byte by byte until a line delimiter or "would block"."""
        total = 0
        while True:
            try:
                byte = source.recv(1)
            except BlockingIOError:
                break
            if not byte:
                self.eof = True
                break
            self._buffer += byte
            total += 1
            if byte == LINE_DELIM:
                break
        return total

    def has_line(self) -> bool:
        return self._buffer.find(LINE_DELIM, self.position) >= 0

    def consume_line(self) -> bytes | None:
        """Return the next complete line without its delimiter, or None."""
        end = self._buffer.find(LINE_DELIM, self.position)
        if end < 0:
            return None

        line = bytes(self._buffer[self.position:end])
        self.position = end + 1

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Consumed line: {line.decode('utf-8', errors='backslashreplace')}")

        return line

    def shift(self) -> None:
        """Drop consumed bytes and reset the cursor."""
        if self.position:
            logger.debug(f"Shifting buffer by {self.position} bytes")
        del self._buffer[:self.position]
        self.position = 0
