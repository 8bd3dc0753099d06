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

"""Colorized step output.

A stage prints its label, and the outcome is appended to the same line. When
the stage streams command output in between, the label line is "dropped"
(terminated) first and the outcome is printed on a line of its own.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

PROGRAM = "deber"


class StepConsole:
    """Console printing stage labels and their outcomes."""

    def __init__(self, color: bool = True, file: IO[str] | None = None) -> None:
        self.console = Console(
            file=file or sys.stdout,
            no_color=not color,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
        self._line_open = False

    def info(self, label: str) -> None:
        """Print a stage label and leave the line open for the outcome."""
        self.drop()
        self.console.print(f"[bold blue]{PROGRAM}[/] [bold]▸[/] {escape(label)}...", end="")
        self._line_open = True

    def extra(self, message: str) -> None:
        """Print an indented detail line, e.g. one archived file."""
        self.drop()
        self.console.print(f"  [dim]•[/] {escape(message)}", end="")
        self._line_open = True

    def drop(self) -> None:
        """Terminate an open label line before foreign output follows."""
        if self._line_open:
            self.console.print()
            self._line_open = False

    def done(self) -> None:
        self._finish("[green]done[/]")

    def skipped(self, reason: str = "") -> None:
        suffix = f" [dim]({escape(reason)})[/]" if reason else ""
        self._finish(f"[yellow]skipped[/]{suffix}")

    def failed(self, error: BaseException | str | None = None) -> None:
        self._finish("[red]failed[/]")
        if error is not None:
            self.error(error)

    def warning(self, message: str) -> None:
        self.drop()
        self.console.print(f"[bold yellow]warning:[/] {escape(message)}")

    def error(self, error: BaseException | str) -> None:
        self.drop()
        self.console.print(f"[bold red]error:[/] {escape(str(error))}")

    def _finish(self, text: str) -> None:
        if self._line_open:
            self.console.print(f" {text}")
            self._line_open = False
        else:
            self.console.print(f"  {text}")


def setup_logging(verbose: bool, color: bool = True) -> None:
    """Route module loggers through Rich; DEBUG when verbose."""
    handler = RichHandler(
        console=Console(stderr=True, no_color=not color),
        show_path=False,
        show_time=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    # docker and urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO)
    logging.getLogger("docker").setLevel(logging.INFO)
