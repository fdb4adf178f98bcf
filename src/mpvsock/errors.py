"""Exception types raised by mpvsock."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .protocol.messages import Result, ResultErrorCode


class MpvSockError(Exception):
    """Base class for all mpvsock errors."""


class LinkClosedError(MpvSockError, RuntimeError):
    """Raised when a closed transport is used for anything but teardown."""

    def __init__(self, message: str = "mpv link closed"):
        super().__init__(message)


# Construction


class LinkInitError(MpvSockError):
    """Failed to build a link to mpv."""

    message = "Failed to initialize mpv link"

    def __init__(self, cause: OSError | None = None):
        self.cause = cause
        text = self.message if cause is None else f"{self.message}: {cause}"
        super().__init__(text)


class SocketPairError(LinkInitError):
    message = "Failed to create socket pair"


class CloexecError(LinkInitError):
    message = "Failed to clear CLOEXEC flag"


class NonblockingError(LinkInitError):
    message = "Failed to set channel to nonblocking"


class SpawnError(LinkInitError):
    message = "Failed to spawn process"


class ConnectError(LinkInitError):
    message = "Failed to connect to server socket"


class RemovePreviousError(LinkInitError):
    message = "Failed to remove previous socket"


# Teardown


class LinkDeinitError(MpvSockError):
    """Failed to release the link cleanly."""

    message = "Failed to deinitialize mpv link"

    def __init__(self, cause: OSError | None = None):
        self.cause = cause
        text = self.message if cause is None else f"{self.message}: {cause}"
        super().__init__(text)


class ShutdownError(LinkDeinitError):
    message = "Failed to shutdown socket"


class WaitError(LinkDeinitError):
    message = "Failed to wait for the child process"


# Commands


class CommandError(MpvSockError):
    """Base class for failures of a single command."""


class SendError(CommandError):
    """Could not write the command into the stream."""

    def __init__(self, cause: OSError):
        self.cause = cause
        super().__init__(f"Could not write into the stream: {cause}")


class ReceiveError(CommandError):
    """Could not read or make sense of the response stream."""


class ReceiveIOError(ReceiveError):
    def __init__(self, cause: OSError):
        self.cause = cause
        super().__init__(f"Could not read from the stream: {cause}")


class DeserializeError(ReceiveError):
    def __init__(self, reason: str, line: bytes = b""):
        self.reason = reason
        self.line = line
        super().__init__(f"Could not deserialize response: {reason}")


class RequestIdMismatchError(ReceiveError):
    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Expected request_id = {expected} but found request_id = {found}"
        )


class UnexpectedResultError(ReceiveError):
    def __init__(self, result: Result):
        self.result = result
        super().__init__("Expected only events but found a result response")


class ChannelClosedError(ReceiveError):
    def __init__(self):
        super().__init__("Channel closed by mpv while a response was expected")


class ResultError(CommandError):
    """mpv rejected the command with a structured error."""

    def __init__(self, code: ResultErrorCode, request_id: int | None = None):
        self.code = code
        self.request_id = request_id
        super().__init__(f"Received error response: {code.value}")


class DataParseError(CommandError):
    """The result payload did not have the shape the command expected."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Error while parsing response data: {reason}")
