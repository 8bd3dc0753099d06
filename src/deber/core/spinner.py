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

"""TTY-aware spinner shown while Deber waits on the network.

Uses Rich spinners when the step console is a terminal; otherwise the block
runs silently because the stage label already tells what is going on.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import TYPE_CHECKING

from rich.status import Status

if TYPE_CHECKING:
    from deber.core.console import StepConsole


@contextlib.contextmanager
def activity_spinner(console: StepConsole, description: str, disable: bool = False) -> Iterator[None]:
    """Show a transient spinner with description while the block runs.

    The open stage label line is dropped first so the spinner gets a line
    of its own; the spinner line is cleared on exit.
    """
    rich_console = console.console
    if disable or not rich_console.is_terminal:
        yield
        return

    console.drop()
    status = Status(description, console=rich_console, spinner="dots")
    with status:
        yield
