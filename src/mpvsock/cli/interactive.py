"""Interactive command prompt for a live mpv link."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, TextIO

from ..errors import MpvSockError
from ..link import MpvLink
from ..protocol.commands import GetProperty, GetVersion, RawCommand, SetProperty, StringCommand
from ..protocol.properties import known_property, property_by_name
from .output import format_event

KNOWN_COMMANDS = ("get_version", "get_property", "set_property")


class InputMode(str, Enum):
    RAW = "raw"
    STRING = "string"
    KNOWN = "known"


MODE_HELP = {
    InputMode.RAW: "Raw mode is on, input is directly pasted as JSON array elements",
    InputMode.STRING: (
        "String mode is on, input is split by spaces and elements are quoted "
        "(prefix element with @ to disable quoting)"
    ),
    InputMode.KNOWN: (
        "Known mode is on, only known commands are accepted and their result is properly parsed\n"
        f"\tKnown commands: {' '.join(KNOWN_COMMANDS)}"
    ),
}


def split_string_command(line: str) -> list[Any]:
    """Split a string-mode line into command arguments.

    ``@word`` is sent as a JSON literal, ``@@word`` as the string ``@word``
    and anything else as a plain string.
    """
    words: list[Any] = []
    for word in line.split(" "):
        if word.startswith("@@"):
            words.append(word[1:])
        elif word.startswith("@"):
            words.append(json.loads(word[1:]))
        else:
            words.append(word)
    return words


class InteractiveContext:
    """Reads commands line by line and prints their results."""

    def __init__(self, link: MpvLink, stdin: TextIO, stdout: TextIO, mode: InputMode = InputMode.STRING):
        self.link = link
        self.stdin = stdin
        self.stdout = stdout
        self.mode = mode

    def write(self, text: str = "") -> None:
        self.stdout.write(text + "\n")

    def run(self) -> None:
        self.write_help()

        while True:
            self.stdout.write("Input: ")
            self.stdout.flush()

            line = self.stdin.readline()
            if not line:
                break
            line = line.rstrip("\n")

            if line.startswith("#"):
                if self.handle_input_command(line):
                    break
                continue

            if self.mode == InputMode.RAW:
                self.run_raw_command(line)
            elif self.mode == InputMode.STRING:
                self.run_string_command(line)
            else:
                self.run_known_command(line)

    def handle_input_command(self, line: str) -> bool:
        """Handle a ``#`` command. Returns True when the prompt should exit."""
        if line == "#quit":
            return True
        elif line == "#help":
            self.write_help()
        elif line == "#events":
            try:
                events = self.link.poll_events()
            except MpvSockError as e:
                self.write(f"Error: {e}")
                return False
            self.write(f"Events ({len(events)}):")
            for event in events:
                self.write(f"\t{format_event(event)}")
            self.link.clear_events()
        elif line.startswith("#mode "):
            try:
                self.mode = InputMode(line[len("#mode "):].strip())
            except ValueError:
                self.write("Error: Invalid mode")
                return False
            self.write_mode()
        else:
            self.write("Error: Invalid input command")
        return False

    def write_help(self) -> None:
        self.write("Help:")
        self.write("\tInput commands:\n\t\t#help\n\t\t#events\n\t\t#mode raw|string|known\n\t\t#quit")
        self.write_mode()
        self.write()

    def write_mode(self) -> None:
        self.write(f"\t{MODE_HELP[self.mode]}")

    def _run(self, command: Any) -> None:
        try:
            result = self.link.run_command(command)
        except (MpvSockError, TimeoutError, ValueError) as e:
            self.write(f"Error: {e}")
            return
        self.write(f"Result: {result!r}")

    def run_raw_command(self, line: str) -> None:
        self._run(RawCommand(line))

    def run_string_command(self, line: str) -> None:
        try:
            words = split_string_command(line)
        except ValueError as e:
            self.write(f"Error: {e}")
            return
        self._run(StringCommand(words))

    def run_known_command(self, line: str) -> None:
        if line.strip() == "get_version":
            self._run(GetVersion())
            return

        if line.startswith("get_property"):
            parts = line.split(" ", 1)
            if len(parts) < 2 or not parts[1]:
                self.write("Error: get_property expects an argument")
                return
            self._run(GetProperty(property_by_name(parts[1])))
            return

        if line.startswith("set_property"):
            parts = line.split(" ", 2)
            if len(parts) < 3:
                self.write("Error: set_property expects two arguments")
                return
            name, raw_value = parts[1], parts[2]

            prop = known_property(name)
            if prop is None:
                # untyped properties take the text as-is
                self._run(SetProperty(property_by_name(name), raw_value))
                return
            try:
                value = prop.decode(json.loads(raw_value))
            except (ValueError, TypeError) as e:
                self.write(f"Error: {e}")
                return
            self._run(SetProperty(prop, value))
            return

        self.write("Unrecognized command")
