"""Output formatting for CLI."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any

from ..protocol.messages import Event, PropertyChangeEvent, UnknownEvent
from ..protocol.properties import TrackId


def to_jsonable(value: Any) -> Any:
    """Convert typed command results to plain JSON values."""
    if isinstance(value, TrackId):
        return value.to_json()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, tuple):
        return list(value)
    return value


def format_value(value: Any) -> str:
    """Format a command result for display."""
    if value is None:
        return "(none)"
    if isinstance(value, tuple) and len(value) == 2 and all(isinstance(v, int) for v in value):
        return f"{value[0]}.{value[1]}"
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2)
    return str(value)


def format_event(event: Event) -> str:
    """One-line description of an event."""
    if isinstance(event, PropertyChangeEvent):
        return f"{event.event_name} [{event.id}] {event.name} = {json.dumps(event.data)}"
    if isinstance(event, UnknownEvent):
        fields = json.dumps(event.fields) if event.fields else ""
        return f"{event.event_name} (unknown) {fields}".rstrip()

    fields = {k: v for k, v in vars(event).items() if k != "kind" and v is not None}
    if fields:
        return f"{event.event_name} {json.dumps(fields)}"
    return event.event_name


def event_to_dict(event: Event) -> dict[str, Any]:
    """Event as it appeared on the wire."""
    if isinstance(event, UnknownEvent):
        return {"event": event.name, **event.fields}
    fields = {k: v for k, v in vars(event).items() if k != "kind"}
    return {"event": event.event_name, **fields}


def print_result(value: Any, json_output: bool = False) -> None:
    """Print a command result."""
    if json_output:
        print(json.dumps({"ok": True, "data": to_jsonable(value)}))
    else:
        print(format_value(value))


def print_error(error: Exception, json_output: bool = False) -> None:
    """Print a command failure."""
    if json_output:
        print(json.dumps({"ok": False, "error": str(error)}))
    else:
        print(f"Error: {error}")


def print_event(event: Event, json_output: bool = False) -> None:
    """Print an event."""
    if json_output:
        print(json.dumps(event_to_dict(event)))
    else:
        print(format_event(event))
