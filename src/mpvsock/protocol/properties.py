"""Property references used to build typed property commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class TrackIdKind(str, Enum):
    INDEX = "index"
    AUTO = "auto"
    NONE = "no"


@dataclass(frozen=True)
class TrackId:
    """Value of the ``aid``/``vid``/``sid`` properties.

    mpv reports a selected track as its integer id, no track as ``false``
    and automatic selection as ``"auto"``.
    """

    kind: TrackIdKind
    index: int | None = None

    @classmethod
    def of(cls, index: int) -> TrackId:
        return cls(TrackIdKind.INDEX, index)

    @classmethod
    def from_json(cls, value: Any) -> TrackId:
        if isinstance(value, bool):
            if value:
                raise ValueError("track id cannot be `true`")
            return cls(TrackIdKind.NONE)
        if isinstance(value, int):
            if value < 0:
                raise ValueError(f"track id must be non-negative: {value}")
            return cls.of(value)
        if isinstance(value, str):
            return cls(TrackIdKind.AUTO)
        raise TypeError(f"invalid track id: {value!r}")

    def to_json(self) -> Any:
        if self.kind == TrackIdKind.INDEX:
            return self.index
        if self.kind == TrackIdKind.NONE:
            return False
        return "auto"

    def __str__(self) -> str:
        return str(self.index) if self.kind == TrackIdKind.INDEX else self.kind.value


TRACK_AUTO = TrackId(TrackIdKind.AUTO)
TRACK_NONE = TrackId(TrackIdKind.NONE)


def _identity(value: Any) -> Any:
    return value


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {value!r}")
    return value


def _track_to_json(value: Any) -> Any:
    return value.to_json() if isinstance(value, TrackId) else value


@dataclass(frozen=True)
class Property:
    """A property name bound to the shape of its value.

    ``decode`` turns the JSON ``data`` of a reply into a Python value and
    raises ``ValueError``/``TypeError`` when the shape is wrong; ``encode``
    goes the other way for ``set_property``.
    """

    name: str
    decode: Callable[[Any], Any] = _identity
    encode: Callable[[Any], Any] = _identity

    @classmethod
    def untyped(cls, name: str) -> Property:
        return cls(name)


VOLUME = Property("volume", _as_float)
PERCENT_POS = Property("percent-pos", _as_float)
TIME_POS = Property("time-pos", _as_float)

PATH = Property("path", _as_str)
WORKING_DIRECTORY = Property("working-directory", _as_str)
MEDIA_TITLE = Property("media-title", _as_str)
FILENAME = Property("filename", _as_str)

AID = Property("aid", TrackId.from_json, _track_to_json)
VID = Property("vid", TrackId.from_json, _track_to_json)
SID = Property("sid", TrackId.from_json, _track_to_json)

FULLSCREEN = Property("fullscreen", _as_bool)
PAUSE = Property("pause", _as_bool)


class KnownProperty(Enum):
    """Properties with a known value shape."""

    VOLUME = VOLUME
    PERCENT_POS = PERCENT_POS
    TIME_POS = TIME_POS
    PATH = PATH
    WORKING_DIRECTORY = WORKING_DIRECTORY
    MEDIA_TITLE = MEDIA_TITLE
    FILENAME = FILENAME
    AID = AID
    VID = VID
    SID = SID
    FULLSCREEN = FULLSCREEN
    PAUSE = PAUSE

    @property
    def property_name(self) -> str:
        return self.value.name


_BY_NAME = {p.value.name: p.value for p in KnownProperty}


def known_property(name: str) -> Property | None:
    """Look up a known property by its mpv name."""
    return _BY_NAME.get(name)


def property_by_name(name: str) -> Property:
    """Return the known property for ``name``, or an untyped reference."""
    return _BY_NAME.get(name) or Property.untyped(name)
