"""mpv-client command line interface."""

from .interactive import InputMode, InteractiveContext, split_string_command
from .main import cli, main, setup_logging
from .output import event_to_dict, format_event, format_value

__all__ = [
    "cli",
    "main",
    "setup_logging",
    "InteractiveContext",
    "InputMode",
    "split_string_command",
    "format_event",
    "format_value",
    "event_to_dict",
]
