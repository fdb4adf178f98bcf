"""Tests for the response byte buffer."""

from __future__ import annotations

import errno

import pytest

from mpvsock.buffer import ResponseBuffer


class ChunkSource:
    """recv() source that hands out fixed chunks, then would block."""

    def __init__(self, *chunks: bytes, eof: bool = False, error: OSError | None = None):
        self.chunks = list(chunks)
        self.eof = eof
        self.error = error

    def recv(self, bufsize: int) -> bytes:
        if self.chunks:
            chunk = self.chunks.pop(0)
            if len(chunk) > bufsize:
                self.chunks.insert(0, chunk[bufsize:])
                chunk = chunk[:bufsize]
            return chunk
        if self.error is not None:
            raise self.error
        if self.eof:
            return b""
        raise BlockingIOError(errno.EAGAIN, "would block")


def drain(buffer: ResponseBuffer) -> list[bytes]:
    lines = []
    while (line := buffer.consume_line()) is not None:
        lines.append(line)
    return lines


class TestConsumeLine:
    def test_empty_buffer(self):
        """Nothing buffered yields nothing."""
        buffer = ResponseBuffer()
        assert buffer.consume_line() is None
        assert buffer.position == 0

    def test_partial_line_is_left_untouched(self):
        """A line without delimiter stays buffered."""
        buffer = ResponseBuffer()
        buffer.feed(b'{"event":"idle"')

        assert buffer.consume_line() is None
        assert buffer.position == 0
        assert buffer.pending == b'{"event":"idle"'

    def test_complete_line(self):
        """A complete line is returned without its delimiter."""
        buffer = ResponseBuffer()
        buffer.feed(b'{"event":"idle"}\n')

        assert buffer.consume_line() == b'{"event":"idle"}'
        assert buffer.position == len(buffer)
        assert buffer.consume_line() is None

    def test_multiple_lines_in_order(self):
        """Lines come out in the order they were written."""
        buffer = ResponseBuffer()
        buffer.feed(b"one\ntwo\nthree\npartial")

        assert drain(buffer) == [b"one", b"two", b"three"]
        assert buffer.pending == b"partial"

    def test_empty_line(self):
        """Consecutive delimiters produce an empty line."""
        buffer = ResponseBuffer()
        buffer.feed(b"\n\n")

        assert drain(buffer) == [b"", b""]

    def test_has_line(self):
        buffer = ResponseBuffer()
        buffer.feed(b"abc")
        assert not buffer.has_line()
        buffer.feed(b"\n")
        assert buffer.has_line()

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 5, 7, 16, 1000])
    def test_chunking_does_not_change_lines(self, chunk_size):
        """However the stream is split, the same lines come out."""
        stream = b'{"a":1}\n{"event":"seek"}\n\n{"error":"success","request_id":3}\ntail'
        buffer = ResponseBuffer()
        lines = []

        for start in range(0, len(stream), chunk_size):
            buffer.feed(stream[start:start + chunk_size])
            lines.extend(drain(buffer))
            buffer.shift()

        assert lines == [b'{"a":1}', b'{"event":"seek"}', b"", b'{"error":"success","request_id":3}']
        assert buffer.pending == b"tail"


class TestShift:
    def test_shift_drops_consumed_bytes(self):
        """Shift compacts the buffer and resets the cursor."""
        buffer = ResponseBuffer()
        buffer.feed(b"first\nsecond")
        buffer.consume_line()

        buffer.shift()

        assert buffer.position == 0
        assert len(buffer) == len(b"second")
        assert buffer.pending == b"second"

    def test_shift_does_not_affect_later_lines(self):
        """Lines read after a shift are the same as without it."""
        shifted = ResponseBuffer()
        plain = ResponseBuffer()
        for buffer in (shifted, plain):
            buffer.feed(b"a\nb\nc")
            buffer.consume_line()

        shifted.shift()
        shifted.shift()
        for buffer in (shifted, plain):
            buffer.feed(b"\nd\n")

        assert drain(shifted) == drain(plain) == [b"b", b"c", b"d"]

    def test_shift_on_empty_buffer(self):
        buffer = ResponseBuffer()
        buffer.shift()
        assert buffer.position == 0
        assert len(buffer) == 0


class TestReadNonblocking:
    def test_reads_until_would_block(self):
        """All available chunks are appended."""
        buffer = ResponseBuffer()
        source = ChunkSource(b"one\n", b"two", b"\n")

        assert buffer.read_nonblocking(source) == 8
        assert drain(buffer) == [b"one", b"two"]
        assert not buffer.eof

    def test_would_block_is_not_an_error(self):
        buffer = ResponseBuffer()
        assert buffer.read_nonblocking(ChunkSource()) == 0

    def test_eof_is_recorded(self):
        """A zero-length read marks the buffer as at EOF."""
        buffer = ResponseBuffer()
        buffer.read_nonblocking(ChunkSource(b"last\n", eof=True))

        assert buffer.eof
        assert drain(buffer) == [b"last"]

    def test_other_errors_propagate(self):
        """I/O errors other than would-block are raised."""
        buffer = ResponseBuffer()
        source = ChunkSource(b"x", error=ConnectionResetError(errno.ECONNRESET, "reset"))

        with pytest.raises(ConnectionResetError):
            buffer.read_nonblocking(source)

    def test_large_read_is_split_by_recv_size(self):
        buffer = ResponseBuffer()
        payload = b"x" * 10000 + b"\n"

        buffer.read_nonblocking(ChunkSource(payload))

        assert buffer.consume_line() == b"x" * 10000


class TestReadBlocking:
    def test_stops_at_delimiter(self):
        """Reading byte by byte stops after one line."""
        buffer = ResponseBuffer()
        source = ChunkSource(b"ab\ncd\n")

        assert buffer.read_blocking(source) == 3
        assert buffer.consume_line() == b"ab"
        assert buffer.consume_line() is None

    def test_stops_on_would_block(self):
        buffer = ResponseBuffer()
        buffer.read_blocking(ChunkSource(b"abc"))

        assert buffer.pending == b"abc"
        assert buffer.consume_line() is None

    def test_other_errors_propagate(self):
        buffer = ResponseBuffer()
        with pytest.raises(OSError):
            buffer.read_blocking(ChunkSource(error=OSError(errno.EIO, "io")))
