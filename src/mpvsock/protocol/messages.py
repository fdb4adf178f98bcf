"""Message envelopes for the mpv JSON IPC protocol.

Outbound commands::

    {"request_id": 1, "command": ["get_property", "volume"]}

Inbound messages are one JSON object per line and come in two shapes that
are told apart by which fields are present:

    {"event": "property-change", "id": 1, "name": "volume", "data": 50.0}
    {"error": "success", "data": 50.0, "request_id": 1}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from ..errors import DeserializeError

# request_id 0 asks mpv not to correlate the reply
NO_REQUEST_ID = 0


class ResultErrorCode(str, Enum):
    """Values of the ``error`` field of a result."""

    SUCCESS = "success"
    INVALID_PARAMETER = "invalid parameter"
    PROPERTY_UNAVAILABLE = "property unavailable"
    PROPERTY_NOT_FOUND = "property not found"
    ERROR_RUNNING_COMMAND = "error running command"


class EventKind(str, Enum):
    """Event names mpv is known to emit."""

    IDLE = "idle"
    START_FILE = "start-file"
    END_FILE = "end-file"
    FILE_LOADED = "file-loaded"
    SEEK = "seek"
    PLAYBACK_RESTART = "playback-restart"
    SHUTDOWN = "shutdown"
    AUDIO_RECONFIG = "audio-reconfig"
    VIDEO_RECONFIG = "video-reconfig"
    LOG_MESSAGE = "log-message"
    PROPERTY_CHANGE = "property-change"
    CLIENT_MESSAGE = "client-message"


def frame_command(args: list[Any], request_id: int = NO_REQUEST_ID) -> bytes:
    """Serialize a command array into a single newline-terminated line."""
    envelope = {"request_id": request_id, "command": args}
    return (json.dumps(envelope, separators=(",", ":")) + "\n").encode("utf-8")


# Events


class Event:
    """Unsolicited message from mpv."""

    kind: ClassVar[EventKind]

    @property
    def event_name(self) -> str:
        kind = getattr(self, "kind", None)
        return kind.value if kind else ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        return parse_event(data)


@dataclass
class SimpleEvent(Event):
    """Event that carries nothing beyond its name."""

    kind: EventKind

    @property
    def event_name(self) -> str:
        return self.kind.value


@dataclass
class StartFileEvent(Event):
    kind: ClassVar[EventKind] = EventKind.START_FILE

    playlist_entry_id: int


@dataclass
class EndFileEvent(Event):
    kind: ClassVar[EventKind] = EventKind.END_FILE

    reason: str | None = None
    playlist_entry_id: int | None = None
    file_error: str | None = None


@dataclass
class LogMessageEvent(Event):
    kind: ClassVar[EventKind] = EventKind.LOG_MESSAGE

    prefix: str
    level: str
    text: str


@dataclass
class PropertyChangeEvent(Event):
    """Change notification for an observed property."""

    kind: ClassVar[EventKind] = EventKind.PROPERTY_CHANGE

    id: int
    name: str
    data: Any = None


@dataclass
class ClientMessageEvent(Event):
    kind: ClassVar[EventKind] = EventKind.CLIENT_MESSAGE

    args: list[str] = field(default_factory=list)


@dataclass
class UnknownEvent(Event):
    """Event whose name this library does not recognize."""

    name: str
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def event_name(self) -> str:
        return self.name


def _require(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in data:
        raise DeserializeError(f"missing field `{key}` in {data.get('event')!r} event")
    value = data[key]
    if not isinstance(value, kind) or isinstance(value, bool) and kind is int:
        raise DeserializeError(f"invalid type for field `{key}`: {value!r}")
    return value


def parse_event(data: dict[str, Any]) -> Event:
    """Build the event variant matching ``data["event"]``."""
    name = data["event"]
    if not isinstance(name, str):
        raise DeserializeError(f"invalid event name: {name!r}")

    try:
        kind = EventKind(name)
    except ValueError:
        fields = {k: v for k, v in data.items() if k != "event"}
        return UnknownEvent(name=name, fields=fields)

    if kind == EventKind.PROPERTY_CHANGE:
        return PropertyChangeEvent(
            id=_require(data, "id", int),
            name=_require(data, "name", str),
            data=data.get("data"),
        )
    elif kind == EventKind.START_FILE:
        return StartFileEvent(playlist_entry_id=_require(data, "playlist_entry_id", int))
    elif kind == EventKind.END_FILE:
        return EndFileEvent(
            reason=data.get("reason"),
            playlist_entry_id=data.get("playlist_entry_id"),
            file_error=data.get("file_error"),
        )
    elif kind == EventKind.LOG_MESSAGE:
        return LogMessageEvent(
            prefix=_require(data, "prefix", str),
            level=_require(data, "level", str),
            text=_require(data, "text", str),
        )
    elif kind == EventKind.CLIENT_MESSAGE:
        return ClientMessageEvent(args=list(data.get("args", [])))
    return SimpleEvent(kind=kind)


# Results


class Result:
    """Reply to a command, correlated by ``request_id``."""

    request_id: int | None

    @property
    def is_success(self) -> bool:
        return isinstance(self, ResultSuccess)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result:
        return parse_result(data)


@dataclass
class ResultSuccess(Result):
    """``error == "success"``; ``data`` is whatever the command returned."""

    data: Any = None
    request_id: int | None = None
    has_data: bool = True


@dataclass
class ResultFailure(Result):
    """mpv refused or failed to run the command."""

    code: ResultErrorCode
    request_id: int | None = None


def parse_result(data: dict[str, Any]) -> Result:
    """Build a success or failure result from a decoded object."""
    try:
        code = ResultErrorCode(data["error"])
    except (ValueError, TypeError):
        raise DeserializeError(f"unknown result error: {data['error']!r}") from None

    request_id = data.get("request_id")
    if request_id is not None and (not isinstance(request_id, int) or isinstance(request_id, bool)):
        raise DeserializeError(f"invalid request_id: {request_id!r}")

    if code == ResultErrorCode.SUCCESS:
        return ResultSuccess(
            data=data.get("data"),
            request_id=request_id,
            has_data="data" in data,
        )
    return ResultFailure(code=code, request_id=request_id)


def parse_response(line: bytes | str) -> Event | Result:
    """Parse one protocol line into an event or a result."""
    try:
        data = json.loads(line)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raw = line if isinstance(line, bytes) else line.encode("utf-8", "replace")
        raise DeserializeError(str(e), raw) from e

    if not isinstance(data, dict):
        raise DeserializeError(f"expected a JSON object, got {type(data).__name__}")

    if "event" in data:
        return parse_event(data)
    elif "error" in data:
        return parse_result(data)
    raise DeserializeError(f"unknown message type: {data!r}")
