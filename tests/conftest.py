"""Pytest configuration and fixtures for mpvsock tests."""

from __future__ import annotations

import json
import shutil
import socket
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from mpvsock.link import MpvLink, Transport

FAKE_MPV = Path(__file__).parent / "fake_mpv.py"


class Peer:
    """The mpv side of a socket pair, driven by the test."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self._pending = b""

    def send(self, *messages: dict | bytes) -> None:
        for message in messages:
            if isinstance(message, dict):
                message = (json.dumps(message) + "\n").encode()
            self.sock.sendall(message)

    def read_request(self, timeout: float = 5.0) -> dict:
        """Read one command line written by the link."""
        self.sock.settimeout(timeout)
        while b"\n" not in self._pending:
            chunk = self.sock.recv(4096)
            if not chunk:
                raise EOFError("link closed")
            self._pending += chunk
        line, self._pending = self._pending.split(b"\n", 1)
        return json.loads(line)

    def close(self) -> None:
        self.sock.close()


@pytest.fixture
def player() -> list[str]:
    """Command line that launches the fake mpv."""
    return [sys.executable, str(FAKE_MPV)]


@pytest.fixture
def short_tmp() -> Generator[Path, None, None]:
    """Short temporary directory (Unix socket paths are length limited)."""
    path = Path(tempfile.mkdtemp(prefix="mpvsock-", dir="/tmp"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def socket_path(short_tmp: Path) -> Path:
    return short_tmp / "mpv.sock"


@pytest.fixture
def transport_pair() -> Generator[tuple[Transport, Peer], None, None]:
    """A socket-only transport and the peer end of its socket."""
    ours, theirs = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
    transport = Transport(ours)
    peer = Peer(theirs)

    yield transport, peer

    transport.close()
    peer.close()


@pytest.fixture
def link_pair(transport_pair) -> tuple[MpvLink, Peer]:
    """An MpvLink over a socket pair and its peer."""
    transport, peer = transport_pair
    return MpvLink(transport, wait_timeout=5.0), peer


@pytest.fixture
def listening_socket(socket_path: Path) -> Generator[socket.socket, None, None]:
    """A Unix socket listening at ``socket_path``."""
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    server.bind(str(socket_path))
    server.listen(1)

    yield server

    server.close()
