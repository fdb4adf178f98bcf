"""Configuration management for mpvsock."""

from __future__ import annotations

import getpass
import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .link.transport import DEFAULT_PLAYER


@dataclass
class PlayerConfig:
    """How to launch mpv."""

    command: list[str] = field(default_factory=lambda: list(DEFAULT_PLAYER))
    extra_args: list[str] = field(default_factory=list)


@dataclass
class ClientConfig:
    """Client defaults."""

    log_level: str = "off"
    socket_path: str = ""
    wait_timeout: float | None = None


@dataclass
class PathsConfig:
    """Path configuration."""

    runtime_dir: str = ""
    state_dir: str = ""


@dataclass
class Config:
    """Full mpvsock configuration."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)


def get_config_dir() -> Path:
    """Get the mpvsock config directory."""
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "mpvsock"
    return Path.home() / ".config" / "mpvsock"


def get_state_dir() -> Path:
    """Get the mpvsock state directory (for logs)."""
    if xdg_state := os.environ.get("XDG_STATE_HOME"):
        return Path(xdg_state) / "mpvsock"
    return Path.home() / ".local" / "state" / "mpvsock"


def get_runtime_dir() -> Path:
    """Get the mpvsock runtime directory for sockets."""
    if env_dir := os.environ.get("MPVSOCK_RUNTIME_DIR"):
        return Path(env_dir)

    xdg_runtime = os.environ.get("XDG_RUNTIME_DIR")
    if xdg_runtime:
        return Path(xdg_runtime) / "mpvsock"

    return Path(f"/tmp/mpvsock-{getpass.getuser()}")


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file."""
    config_file = path or get_config_dir() / "config.toml"

    if not config_file.exists():
        return Config()

    with open(config_file, "rb") as f:
        data = tomllib.load(f)

    return Config(
        player=PlayerConfig(**data.get("player", {})),
        client=ClientConfig(**data.get("client", {})),
        paths=PathsConfig(**data.get("paths", {})),
    )


def get_effective_runtime_dir(config: Config) -> Path:
    """Get runtime directory, considering config overrides."""
    if config.paths.runtime_dir:
        return Path(config.paths.runtime_dir)
    return get_runtime_dir()


def get_effective_state_dir(config: Config) -> Path:
    """Get state directory, considering config overrides."""
    if config.paths.state_dir:
        return Path(config.paths.state_dir)
    return get_state_dir()


def get_effective_socket_path(config: Config) -> Path:
    """Socket the CLI connects to when no link option is given."""
    if config.client.socket_path:
        return Path(config.client.socket_path).expanduser()
    return get_effective_runtime_dir(config) / "mpv.sock"
