"""mpv-client CLI main entry point."""

from __future__ import annotations

import json
import logging
import shlex
import sys
import time
from pathlib import Path

import click

from ..config import get_effective_socket_path, get_effective_state_dir, load_config
from ..errors import LinkInitError, MpvSockError
from ..link import MpvLink
from ..protocol.commands import GetProperty, GetVersion, ObserveProperty, SetProperty
from ..protocol.properties import known_property, property_by_name
from .interactive import InteractiveContext
from .output import print_error, print_event, print_result

VERBOSITY_LEVELS: dict[str, int | None] = {
    "off": None,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


def setup_logging(verbosity: str, log_file: Path | None = None) -> None:
    """Set up logging to stderr and optionally a file."""
    level = VERBOSITY_LEVELS.get(verbosity.lower())
    if level is None:
        return

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger("mpvsock")
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Per-line buffer logging is only wanted at trace
    if verbosity.lower() != "trace":
        logging.getLogger("mpvsock.buffer").setLevel(max(level, logging.INFO))


def open_link(ctx: click.Context) -> MpvLink:
    """Build the link selected by the global options."""
    obj = ctx.obj
    config = obj["config"]
    player = obj["player"] or config.player.command
    extra_args = config.player.extra_args
    timeout = config.client.wait_timeout

    if obj["connect"]:
        return MpvLink.connect(obj["connect"], wait_timeout=timeout)
    if obj["spawn_server"]:
        return MpvLink.spawn_server(obj["spawn_server"], player, extra_args, wait_timeout=timeout)
    return MpvLink.spawn_client(player, extra_args, wait_timeout=timeout)


@click.group()
@click.option("--connect", "connect", type=click.Path(), metavar="SOCKET_PATH",
              help="Connect to an existing mpv socket")
@click.option("--spawn-server", "spawn_server", type=click.Path(), metavar="SOCKET_PATH",
              help="Spawn a new mpv process that acts as a server opening a socket at given path")
@click.option("--spawn-client", "spawn_client", is_flag=True,
              help="Spawn a new mpv process that acts as a client listening on an unnamed socket")
@click.option("--player", envvar="MPVSOCK_PLAYER", default=None,
              help="Command used to launch mpv (default from config, else 'mpv')")
@click.option("-v", "--verbosity", type=click.Choice(list(VERBOSITY_LEVELS), case_sensitive=False),
              default=None, help="Level of verbosity")
@click.option("--log-file", is_flag=True, help="Also log to the state directory")
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON")
@click.version_option(package_name="mpvsock")
@click.pass_context
def cli(ctx, connect, spawn_server, spawn_client, player, verbosity, log_file, json_output):
    """mpv-client - talk to mpv over its JSON IPC socket."""
    config = load_config()

    selected = [opt for opt in (connect, spawn_server, spawn_client) if opt]
    if not selected:
        # Fall back to the configured socket when an mpv is already serving it
        default_socket = get_effective_socket_path(config)
        if default_socket.exists():
            connect = str(default_socket)
            selected = [connect]
    if len(selected) != 1:
        raise click.UsageError("Exactly one of --connect, --spawn-server or --spawn-client is required")

    verbosity = verbosity or config.client.log_level
    setup_logging(
        verbosity,
        get_effective_state_dir(config) / "mpv-client.log" if log_file else None,
    )

    ctx.ensure_object(dict)
    ctx.obj.update(
        config=config,
        connect=connect,
        spawn_server=spawn_server,
        player=shlex.split(player) if player else None,
        json=json_output,
    )


def _with_link(ctx: click.Context) -> MpvLink:
    try:
        return open_link(ctx)
    except LinkInitError as e:
        print_error(e, ctx.obj["json"])
        sys.exit(1)


@cli.command("interactive")
@click.pass_context
def interactive(ctx):
    """Opens an interactive command prompt."""
    with _with_link(ctx) as link:
        InteractiveContext(link, sys.stdin, sys.stdout).run()


@cli.command("version")
@click.pass_context
def version(ctx):
    """Print the mpv client API version."""
    with _with_link(ctx) as link:
        if not _run(ctx, link, GetVersion()):
            sys.exit(1)


@cli.command("get")
@click.argument("name")
@click.pass_context
def get(ctx, name: str):
    """Get a property value."""
    with _with_link(ctx) as link:
        if not _run(ctx, link, GetProperty(property_by_name(name))):
            sys.exit(1)


@cli.command("set")
@click.argument("name")
@click.argument("value")
@click.pass_context
def set_(ctx, name: str, value: str):
    """Set a property; VALUE is JSON for known properties."""
    prop = known_property(name)
    if prop is None:
        command = SetProperty(property_by_name(name), value)
    else:
        try:
            command = SetProperty(prop, prop.decode(json.loads(value)))
        except (ValueError, TypeError) as e:
            raise click.BadParameter(str(e), param_hint="VALUE")

    with _with_link(ctx) as link:
        if not _run(ctx, link, command):
            sys.exit(1)


@cli.command("events")
@click.option("--timeout", type=float, default=None, help="Stop listening after this many seconds")
@click.option("--count", type=int, default=None, help="Stop after this many events")
@click.option("--observe", multiple=True, help="Observe a property while listening")
@click.pass_context
def events(ctx, timeout: float | None, count: int | None, observe: tuple[str, ...]):
    """Print events as they arrive."""
    json_output = ctx.obj["json"]
    seen = 0

    with _with_link(ctx) as link:
        for observer_id, name in enumerate(observe, start=1):
            if not _run(ctx, link, ObserveProperty(observer_id, property_by_name(name)), quiet=True):
                sys.exit(1)

        deadline = None if timeout is None else time.monotonic() + timeout
        while count is None or seen < count:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                batch = link.wait_events(remaining)
            except TimeoutError:
                break
            except MpvSockError as e:
                print_error(e, json_output)
                sys.exit(1)

            for event in link.drain_events():
                print_event(event, json_output)
                seen += 1
                if count is not None and seen >= count:
                    break

            if not batch and link.at_eof:
                break


def _run(ctx: click.Context, link: MpvLink, command, quiet: bool = False) -> bool:
    try:
        result = link.run_command(command)
    except (MpvSockError, TimeoutError) as e:
        print_error(e, ctx.obj["json"])
        return False
    if not quiet:
        print_result(result, ctx.obj["json"])
    return True


def main() -> None:
    """Main entry point for mpv-client."""
    cli(obj={})


if __name__ == "__main__":
    main()
