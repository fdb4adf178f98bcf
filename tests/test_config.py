"""Tests for configuration loading and path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from mpvsock.config import (
    Config,
    get_config_dir,
    get_effective_socket_path,
    get_effective_state_dir,
    get_runtime_dir,
    load_config,
)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.toml")

        assert config == Config()
        assert config.player.command == ["mpv"]
        assert config.player.extra_args == []
        assert config.client.log_level == "off"
        assert config.client.wait_timeout is None

    def test_reads_sections(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[player]\n'
            'command = ["mpv", "--profile=low-latency"]\n'
            'extra_args = ["--mute=yes"]\n'
            '\n'
            '[client]\n'
            'log_level = "debug"\n'
            'wait_timeout = 2.5\n'
            '\n'
            '[paths]\n'
            'state_dir = "/var/tmp/mpvsock-state"\n'
        )

        config = load_config(path)

        assert config.player.command == ["mpv", "--profile=low-latency"]
        assert config.player.extra_args == ["--mute=yes"]
        assert config.client.log_level == "debug"
        assert config.client.wait_timeout == 2.5
        assert get_effective_state_dir(config) == Path("/var/tmp/mpvsock-state")

    def test_partial_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[client]\nsocket_path = "/tmp/a.sock"\n')

        config = load_config(path)

        assert config.player.command == ["mpv"]
        assert config.client.socket_path == "/tmp/a.sock"

    def test_unknown_key_is_rejected(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[client]\ncolour = "blue"\n')

        with pytest.raises(TypeError):
            load_config(path)

    def test_default_location(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        (tmp_path / "mpvsock").mkdir()
        (tmp_path / "mpvsock" / "config.toml").write_text('[client]\nlog_level = "warn"\n')

        assert get_config_dir() == tmp_path / "mpvsock"
        assert load_config().client.log_level == "warn"


class TestPaths:
    def test_runtime_dir_override(self, monkeypatch):
        monkeypatch.setenv("MPVSOCK_RUNTIME_DIR", "/tmp/custom-run")
        assert get_runtime_dir() == Path("/tmp/custom-run")

    def test_runtime_dir_xdg(self, monkeypatch):
        monkeypatch.delenv("MPVSOCK_RUNTIME_DIR", raising=False)
        monkeypatch.setenv("XDG_RUNTIME_DIR", "/run/user/1000")
        assert get_runtime_dir() == Path("/run/user/1000/mpvsock")

    def test_runtime_dir_fallback(self, monkeypatch):
        monkeypatch.delenv("MPVSOCK_RUNTIME_DIR", raising=False)
        monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
        monkeypatch.setattr("getpass.getuser", lambda: "alice")
        assert get_runtime_dir() == Path("/tmp/mpvsock-alice")

    def test_socket_path_default(self, monkeypatch):
        monkeypatch.setenv("MPVSOCK_RUNTIME_DIR", "/tmp/custom-run")
        assert get_effective_socket_path(Config()) == Path("/tmp/custom-run/mpv.sock")

    def test_socket_path_from_config(self):
        config = Config()
        config.client.socket_path = "/tmp/elsewhere.sock"
        assert get_effective_socket_path(config) == Path("/tmp/elsewhere.sock")

    def test_runtime_dir_from_config(self):
        config = Config()
        config.paths.runtime_dir = "/tmp/from-config"
        assert get_effective_socket_path(config) == Path("/tmp/from-config/mpv.sock")
