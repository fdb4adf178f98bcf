"""mpv JSON IPC protocol: envelopes, properties and commands."""

from .commands import (
    Command,
    CommandArgs,
    CycleProperty,
    FileloadInfo,
    GetProperty,
    GetVersion,
    LoadFile,
    ObserveProperty,
    Quit,
    RawCommand,
    SetProperty,
    Stop,
    StringCommand,
    UnobserveProperty,
)
from .messages import (
    NO_REQUEST_ID,
    ClientMessageEvent,
    EndFileEvent,
    Event,
    EventKind,
    LogMessageEvent,
    PropertyChangeEvent,
    Result,
    ResultErrorCode,
    ResultFailure,
    ResultSuccess,
    SimpleEvent,
    StartFileEvent,
    UnknownEvent,
    frame_command,
    parse_response,
)
from .properties import KnownProperty, Property, TrackId, known_property, property_by_name

__all__ = [
    "NO_REQUEST_ID",
    "Event",
    "EventKind",
    "SimpleEvent",
    "StartFileEvent",
    "EndFileEvent",
    "LogMessageEvent",
    "PropertyChangeEvent",
    "ClientMessageEvent",
    "UnknownEvent",
    "Result",
    "ResultErrorCode",
    "ResultSuccess",
    "ResultFailure",
    "frame_command",
    "parse_response",
    "Property",
    "KnownProperty",
    "TrackId",
    "known_property",
    "property_by_name",
    "Command",
    "CommandArgs",
    "StringCommand",
    "RawCommand",
    "GetVersion",
    "GetProperty",
    "SetProperty",
    "ObserveProperty",
    "UnobserveProperty",
    "CycleProperty",
    "LoadFile",
    "FileloadInfo",
    "Stop",
    "Quit",
]
