"""Request/response orchestration over a transport."""

from __future__ import annotations

import logging
import os
from typing import Any, Sequence, TypeVar

from ..buffer import ResponseBuffer
from ..errors import (
    ChannelClosedError,
    DataParseError,
    NonblockingError,
    ReceiveIOError,
    RequestIdMismatchError,
    ResultError,
    SendError,
    UnexpectedResultError,
)
from ..protocol.commands import Command, CommandArgs
from ..protocol.messages import (
    NO_REQUEST_ID,
    Event,
    Result,
    ResultFailure,
    frame_command,
    parse_response,
)
from .transport import DEFAULT_PLAYER, Transport

logger = logging.getLogger("mpvsock.link")

T = TypeVar("T")

FIRST_REQUEST_ID = 1
MAX_REQUEST_ID = 2**63 - 1


class MpvLink:
    """Client side of the mpv JSON IPC protocol.

    Only one request is ever outstanding. While waiting for its result,
    any events that arrive are appended to ``events`` in arrival order;
    the caller inspects and clears them between commands.
    """

    def __init__(self, transport: Transport, wait_timeout: float | None = None):
        try:
            transport.set_nonblocking(True)
        except NonblockingError:
            transport.close()
            raise

        self.transport = transport
        self.wait_timeout = wait_timeout
        self._next_id = FIRST_REQUEST_ID
        self._buffer = ResponseBuffer()
        self._events: list[Event] = []

    @classmethod
    def connect(cls, socket_path: str | os.PathLike, **kwargs: Any) -> MpvLink:
        return cls(Transport.connect(socket_path), **kwargs)

    @classmethod
    def spawn_server(
        cls,
        socket_path: str | os.PathLike,
        player: Sequence[str] = DEFAULT_PLAYER,
        extra_args: Sequence[str] = (),
        **kwargs: Any,
    ) -> MpvLink:
        return cls(Transport.spawn_server(socket_path, player, extra_args), **kwargs)

    @classmethod
    def spawn_client(
        cls,
        player: Sequence[str] = DEFAULT_PLAYER,
        extra_args: Sequence[str] = (),
        **kwargs: Any,
    ) -> MpvLink:
        return cls(Transport.spawn_client(player, extra_args), **kwargs)

    # Lifecycle

    @property
    def is_closed(self) -> bool:
        return self.transport.is_closed

    @property
    def at_eof(self) -> bool:
        """True once mpv has closed its end of the socket."""
        return self._buffer.eof

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> MpvLink:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Events

    @property
    def events(self) -> list[Event]:
        """Events queued so far, oldest first."""
        return self._events

    def clear_events(self) -> None:
        self._events.clear()

    def drain_events(self) -> list[Event]:
        """Return the queued events and empty the queue."""
        events, self._events = self._events, []
        return events

    def poll_events(self) -> list[Event]:
        """Queue every event that can be read without blocking.

        Must not be called while a command is outstanding: a result showing
        up here raises ``UnexpectedResultError``.
        """
        try:
            while True:
                response = self._next_response()
                if response is None:
                    break
                if isinstance(response, Result):
                    raise UnexpectedResultError(response)
                self._queue_event(response)
        finally:
            self._buffer.shift()

        return self._events

    def wait_events(self, timeout: float | None = None) -> list[Event]:
        """Block until something is readable, then ``poll_events()``.

        Raises ``TimeoutError`` if nothing arrived within ``timeout`` seconds.
        """
        if not self._buffer.has_line() and not self._buffer.eof:
            self._wait_read(timeout)
        return self.poll_events()

    # Commands

    def run_command(self, command: Command[T]) -> T:
        """Send ``command`` and wait for its result.

        Raises ``SendError``/``ReceiveError`` for transport or protocol
        failures, ``ResultError`` when mpv rejected the command and
        ``DataParseError`` when the reply data has the wrong shape.
        """
        request_id = self._allocate_id()
        self._send_command(command, request_id)

        result = self._next_result()
        logger.debug(f"Received result: {result}")

        if result.request_id != request_id:
            raise RequestIdMismatchError(expected=request_id, found=result.request_id or 0)

        if isinstance(result, ResultFailure):
            raise ResultError(result.code, result.request_id)

        try:
            return command.parse_data(result.data)
        except (ValueError, TypeError, KeyError) as e:
            raise DataParseError(str(e)) from e

    def run_command_raw(self, command: CommandArgs, correlate: bool = True) -> int:
        """Send ``command`` without waiting for a reply.

        Returns the request id used, or ``NO_REQUEST_ID`` when
        ``correlate`` is false. Reading the reply is up to the caller.
        """
        request_id = self._allocate_id() if correlate else NO_REQUEST_ID
        self._send_command(command, request_id)
        return request_id

    # Internals

    def _allocate_id(self) -> int:
        current = self._next_id
        self._next_id = current + 1 if current < MAX_REQUEST_ID else FIRST_REQUEST_ID
        return current

    def _send_command(self, command: CommandArgs, request_id: int) -> None:
        line = frame_command(command.args(), request_id)
        logger.debug(f"Sending command: {line.decode('utf-8').rstrip()}")
        try:
            self.transport.send(line)
        except OSError as e:
            raise SendError(e) from e

    def _queue_event(self, event: Event) -> None:
        logger.debug(f"Queued event: {event}")
        self._events.append(event)

    def _wait_read(self, timeout: float | None) -> None:
        try:
            self.transport.wait_read(timeout)
        except TimeoutError:
            raise
        except OSError as e:
            raise ReceiveIOError(e) from e

    def _next_response(self) -> Event | Result | None:
        """Parse the next buffered line, reading once if none is complete."""
        line = self._buffer.consume_line()
        if line is None:
            try:
                self._buffer.read_nonblocking(self.transport)
            except OSError as e:
                raise ReceiveIOError(e) from e
            line = self._buffer.consume_line()
            if line is None:
                return None

        return parse_response(line)

    def _next_result(self) -> Result:
        try:
            while True:
                response = self._next_response()
                if response is None:
                    if self._buffer.eof:
                        raise ChannelClosedError()
                    self._wait_read(self.wait_timeout)
                elif isinstance(response, Result):
                    return response
                else:
                    self._queue_event(response)
        finally:
            self._buffer.shift()
