"""mpvsock - client for mpv's JSON IPC protocol over Unix sockets."""

from .errors import (
    CommandError,
    DataParseError,
    LinkClosedError,
    LinkDeinitError,
    LinkInitError,
    MpvSockError,
    ReceiveError,
    ResultError,
    SendError,
)
from .link import MpvLink, Transport

__version__ = "0.2.0"

__all__ = [
    "MpvLink",
    "Transport",
    "MpvSockError",
    "LinkInitError",
    "LinkDeinitError",
    "LinkClosedError",
    "CommandError",
    "SendError",
    "ReceiveError",
    "ResultError",
    "DataParseError",
]
