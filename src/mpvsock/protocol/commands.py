"""Commands that can be sent over an mpv link.

Two capabilities are involved. ``CommandArgs`` is anything that can turn
itself into the ``command`` array of the envelope. ``Command`` additionally
knows how to interpret the ``data`` of a successful reply. ``parse_data``
signals a shape mismatch by raising ``ValueError``, ``TypeError`` or
``KeyError``; the link reports those as ``DataParseError``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar, runtime_checkable

from .properties import Property

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class CommandArgs(Protocol):
    """Something that serializes into a command array."""

    def args(self) -> list[Any]: ...


@runtime_checkable
class Command(CommandArgs, Protocol[T_co]):
    """A command with a typed result."""

    def parse_data(self, data: Any) -> T_co: ...


@dataclass
class StringCommand:
    """Arbitrary command given as a list of arguments; the result is raw JSON."""

    words: list[Any]

    def args(self) -> list[Any]:
        return list(self.words)

    def parse_data(self, data: Any) -> Any:
        return data


@dataclass
class RawCommand:
    """Command given as pre-serialized JSON array elements.

    ``'"get_property", "volume"'`` becomes ``["get_property", "volume"]``.
    """

    text: str

    def args(self) -> list[Any]:
        value = json.loads(f"[{self.text}]")
        if not value:
            raise ValueError("empty command")
        return value

    def parse_data(self, data: Any) -> Any:
        return data


@dataclass
class GetVersion:
    """``get_version``; mpv packs the client API version as ``major << 16 | minor``."""

    def args(self) -> list[Any]:
        return ["get_version"]

    def parse_data(self, data: Any) -> tuple[int, int]:
        if isinstance(data, bool) or not isinstance(data, int):
            raise TypeError(f"expected an integer version, got {data!r}")
        return (data >> 16) & 0xFFFF, data & 0xFFFF


@dataclass
class GetProperty:
    property: Property

    def args(self) -> list[Any]:
        return ["get_property", self.property.name]

    def parse_data(self, data: Any) -> Any:
        return self.property.decode(data)


@dataclass
class SetProperty:
    property: Property
    value: Any

    def args(self) -> list[Any]:
        return ["set_property", self.property.name, self.property.encode(self.value)]

    def parse_data(self, data: Any) -> None:
        return None


@dataclass
class ObserveProperty:
    """Ask mpv to emit ``property-change`` events tagged with ``observer_id``."""

    observer_id: int
    property: Property

    def args(self) -> list[Any]:
        return ["observe_property", self.observer_id, self.property.name]

    def parse_data(self, data: Any) -> None:
        return None


@dataclass
class UnobserveProperty:
    observer_id: int

    def args(self) -> list[Any]:
        return ["unobserve_property", self.observer_id]

    def parse_data(self, data: Any) -> None:
        return None


@dataclass
class CycleProperty:
    property: Property
    up: bool = True

    def args(self) -> list[Any]:
        return ["cycle", self.property.name, "up" if self.up else "down"]

    def parse_data(self, data: Any) -> None:
        return None


@dataclass
class FileloadInfo:
    playlist_entry_id: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileloadInfo:
        entry_id = data["playlist_entry_id"]
        if isinstance(entry_id, bool) or not isinstance(entry_id, int):
            raise TypeError(f"invalid playlist_entry_id: {entry_id!r}")
        return cls(playlist_entry_id=entry_id)


@dataclass
class LoadFile:
    path: str
    options: list[str] = field(default_factory=list)

    def args(self) -> list[Any]:
        return ["loadfile", self.path, *self.options]

    def parse_data(self, data: Any) -> FileloadInfo:
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {data!r}")
        return FileloadInfo.from_dict(data)


@dataclass
class Stop:
    keep_playlist: bool = False

    def args(self) -> list[Any]:
        if self.keep_playlist:
            return ["stop", "keep-playlist"]
        return ["stop"]

    def parse_data(self, data: Any) -> None:
        return None


@dataclass
class Quit:
    code: int | None = None

    def args(self) -> list[Any]:
        if self.code is None:
            return ["quit"]
        return ["quit", self.code]

    def parse_data(self, data: Any) -> None:
        return None
