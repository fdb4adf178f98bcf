"""Owns the socket to mpv and, when we started it, the mpv process."""

from __future__ import annotations

import errno
import logging
import os
import select
import socket
import stat
import subprocess
import time
import warnings
from enum import Enum
from pathlib import Path
from typing import Sequence

from ..errors import (
    CloexecError,
    ConnectError,
    LinkClosedError,
    NonblockingError,
    RemovePreviousError,
    ShutdownError,
    SocketPairError,
    SpawnError,
    WaitError,
)

logger = logging.getLogger("mpvsock.transport")

DEFAULT_PLAYER = ("mpv",)
PLAYER_ARGS = ("--idle", "--no-terminal")

# Retry interval while mpv has not created its server socket yet
CONNECT_RETRY_INTERVAL = 0.001

# poll() takes a C int of milliseconds
POLL_TIMEOUT_MAX_MS = 2**31 - 1


class TransportState(str, Enum):
    CLOSED = "closed"
    SOCKET = "socket"
    CHILD = "child"


def _spawn_player(player: Sequence[str], extra: Sequence[str], pass_fds: tuple[int, ...] = ()) -> subprocess.Popen:
    argv = [*player, *PLAYER_ARGS, *extra]
    try:
        child = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            pass_fds=pass_fds,
        )
    except OSError as e:
        raise SpawnError(e) from e

    logger.info(f"Spawned mpv with pid: {child.pid}")
    return child


class Transport:
    """Socket (and optional child process) that protocol traffic flows over.

    The state is one of ``CLOSED``, ``SOCKET`` (we only hold a socket) or
    ``CHILD`` (we also spawned mpv). Everything except ``close()`` raises
    ``LinkClosedError`` once the transport is closed.
    """

    def __init__(self, sock: socket.socket, child: subprocess.Popen | None = None):
        self._socket: socket.socket | None = sock
        self._child = child

    # Construction

    @classmethod
    def connect(cls, path: str | os.PathLike) -> Transport:
        """Connect to an mpv started elsewhere with ``--input-ipc-server``."""
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(os.fspath(path))
        except OSError as e:
            sock.close()
            raise ConnectError(e) from e

        logger.info(f"Connected to mpv socket at {path}")
        return cls(sock)

    @classmethod
    def spawn_server(
        cls,
        path: str | os.PathLike,
        player: Sequence[str] = DEFAULT_PLAYER,
        extra_args: Sequence[str] = (),
    ) -> Transport:
        """Spawn mpv with ``--input-ipc-server=path`` and connect to it."""
        path = Path(path)
        try:
            is_socket = stat.S_ISSOCK(path.stat().st_mode)
        except OSError:
            is_socket = False

        if is_socket:
            logger.info(f"Removing existing socket at {path}")
            try:
                path.unlink()
            except OSError as e:
                raise RemovePreviousError(e) from e

        child = _spawn_player(player, [*extra_args, f"--input-ipc-server={path}"])

        # mpv creates the socket some time after it starts
        while True:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.connect(str(path))
                break
            except (FileNotFoundError, ConnectionRefusedError) as e:
                sock.close()
                if child.poll() is not None:
                    raise ConnectError(e) from e
                time.sleep(CONNECT_RETRY_INTERVAL)
            except OSError as e:
                sock.close()
                child.kill()
                child.wait()
                raise ConnectError(e) from e

        return cls(sock, child)

    @classmethod
    def spawn_client(
        cls,
        player: Sequence[str] = DEFAULT_PLAYER,
        extra_args: Sequence[str] = (),
    ) -> Transport:
        """Spawn mpv with ``--input-ipc-client=fd://N`` over a socket pair."""
        try:
            sock, mpv_sock = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
        except OSError as e:
            raise SocketPairError(e) from e

        try:
            try:
                # child must inherit its end across exec
                os.set_inheritable(mpv_sock.fileno(), True)
            except OSError as e:
                raise CloexecError(e) from e

            fd = mpv_sock.fileno()
            child = _spawn_player(player, [*extra_args, f"--input-ipc-client=fd://{fd}"], pass_fds=(fd,))
        except BaseException:
            sock.close()
            raise
        finally:
            mpv_sock.close()

        return cls(sock, child)

    # State

    @property
    def state(self) -> TransportState:
        if self._socket is None:
            return TransportState.CLOSED
        if self._child is None:
            return TransportState.SOCKET
        return TransportState.CHILD

    @property
    def is_closed(self) -> bool:
        return self._socket is None

    @property
    def pid(self) -> int | None:
        return self._child.pid if self._child is not None else None

    @property
    def socket(self) -> socket.socket:
        """The read/write socket."""
        if self._socket is None:
            raise LinkClosedError()
        return self._socket

    def fileno(self) -> int:
        return self.socket.fileno()

    def set_nonblocking(self, nonblocking: bool = True) -> None:
        try:
            self.socket.setblocking(not nonblocking)
        except OSError as e:
            raise NonblockingError(e) from e

    def send(self, data: bytes) -> None:
        """Write all of ``data``, waiting for the socket to drain if needed."""
        sock = self.socket
        view = memoryview(data)
        while view:
            try:
                sent = sock.send(view)
            except BlockingIOError:
                select.select([], [sock], [])
                continue
            view = view[sent:]

    def recv(self, bufsize: int) -> bytes:
        return self.socket.recv(bufsize)

    def wait_read(self, timeout: float | None = None) -> None:
        """Block until the socket is readable.

        ``timeout`` is in seconds; ``None`` waits forever. Raises
        ``TimeoutError`` when nothing became readable in time. A hang-up is
        not an error here since buffered data may still be waiting.
        """
        poller = select.poll()
        poller.register(self.fileno(), select.POLLIN)

        timeout_ms = None if timeout is None else int(min(max(0.0, timeout * 1000), POLL_TIMEOUT_MAX_MS))
        ready = poller.poll(timeout_ms)
        if not ready:
            raise TimeoutError(f"No data within {timeout}s")

        _, revents = ready[0]
        if revents & select.POLLNVAL:
            raise OSError(errno.EBADF, "Invalid socket descriptor")
        if revents & select.POLLERR:
            raise OSError(errno.EIO, "Error condition on socket")

    # Teardown

    def close(self) -> None:
        """Release the socket and, for a spawned mpv, wait for it to exit.

        Safe to call more than once; later calls do nothing.
        """
        sock, child = self._socket, self._child
        self._socket = None
        self._child = None

        if sock is None:
            return

        if child is None:
            self._close_socket(sock)
            return

        # nudge mpv to exit on its own; a single write that never blocks
        try:
            sock.setblocking(False)
            sent = sock.send(b"quit\n")
            logger.info(f"Wrote quit command ({sent} bytes)")
        except OSError as e:
            logger.info(f"Could not write quit command: {e!r}")

        try:
            self._close_socket(sock)
        except ShutdownError as e:
            logger.warning(str(e))

        logger.info("Waiting for mpv child to exit")
        try:
            child.wait()
        except OSError as e:
            raise WaitError(e) from e

    @staticmethod
    def _close_socket(sock: socket.socket) -> None:
        if sock.fileno() == -1:
            # descriptor already released, e.g. by the socket's own finalizer
            return

        logger.info("Shutting down and closing socket")
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            raise ShutdownError(e) from e
        finally:
            sock.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        if getattr(self, "_socket", None) is not None:
            warnings.warn(f"unclosed mpv transport {self!r}", ResourceWarning, stacklevel=2)
            self.close()
