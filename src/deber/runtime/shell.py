# This file is part of Deber, a tool for building Debian packages in Docker containers.
#
# Copyright 2025 Canonical Ltd.
#
# SPDX-License-Identifier: GPL-3.0-only
#
# Deber is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License version 3, as published by the
# Free Software Foundation.
#
# Deber is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranties of MERCHANTABILITY,
# SATISFACTORY QUALITY, or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# Deber. If not, see <http://www.gnu.org/licenses/>.

"""Interactive shell sessions attached to the local terminal.

The local terminal is switched to raw mode, bytes are pumped between stdin,
stdout and the exec socket, and a background watcher keeps the remote
pseudo-terminal size in sync with the local window. The watcher stops
when the session ends, whichever side closes first.
"""

from __future__ import annotations

import contextlib
import logging
import os
import select
import shutil
import sys
import termios
import threading
import tty
from collections.abc import Iterator
from typing import Any

from docker.errors import DockerException

logger = logging.getLogger(__name__)

RESIZE_POLL_INTERVAL = 0.25
READ_SIZE = 4096


class ResizeWatcher(threading.Thread):
    """Propagate local terminal size changes to an exec session."""

    def __init__(self, api: Any, exec_id: str, interval: float = RESIZE_POLL_INTERVAL) -> None:
        super().__init__(name=f"resize-{exec_id[:12]}", daemon=True)
        self.api = api
        self.exec_id = exec_id
        self.interval = interval
        self.stopped = threading.Event()
        self._last: tuple[int, int] | None = None

    def resize(self) -> None:
        size = shutil.get_terminal_size()
        current = (size.lines, size.columns)
        if current == self._last:
            return

        try:
            self.api.exec_resize(self.exec_id, height=size.lines, width=size.columns)
        except DockerException as exc:
            # The exec may already be gone; the next poll retries.
            logger.debug("Resize of %s failed: %s", self.exec_id[:12], exc)
            return
        self._last = current

    def run(self) -> None:
        while not self.stopped.is_set():
            self.resize()
            self.stopped.wait(self.interval)

    def stop(self) -> None:
        self.stopped.set()


@contextlib.contextmanager
def raw_terminal(fd: int) -> Iterator[None]:
    """Put the terminal behind fd into raw mode for the duration."""
    if not os.isatty(fd):
        yield
        return

    saved = termios.tcgetattr(fd)
    tty.setraw(fd)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def pump(sock: Any, stdin_fd: int, stdout_fd: int) -> None:
    """Copy bytes both ways until the remote side closes."""
    while True:
        readable, _, _ = select.select([sock, stdin_fd], [], [])
        if sock in readable:
            data = sock.recv(READ_SIZE)
            if not data:
                return
            os.write(stdout_fd, data)
        if stdin_fd in readable:
            data = os.read(stdin_fd, READ_SIZE)
            if not data:
                return
            sock.sendall(data)


def run_interactive(api: Any, exec_id: str) -> None:
    """Start exec_id with a pseudo-terminal and attach the local terminal."""
    stream = api.exec_start(exec_id, tty=True, socket=True)
    sock = getattr(stream, "_sock", stream)

    watcher = ResizeWatcher(api, exec_id)
    watcher.start()
    try:
        with raw_terminal(sys.stdin.fileno()):
            pump(sock, sys.stdin.fileno(), sys.stdout.fileno())
    finally:
        watcher.stop()
        watcher.join()
        sock.close()
