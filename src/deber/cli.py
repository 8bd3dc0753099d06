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

"""CLI application definition for Deber."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

import typer
from typer import Typer

from deber.commands.build import build
from deber.commands.steps import steps

app: Typer = Typer(
    name="deber",
    help="Debian packaging with Docker.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        current = version("deber")
    except PackageNotFoundError:
        current = "unknown"
    typer.echo(f"deber {current}")
    raise typer.Exit()


@app.callback()
def main(
    show_version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Build Debian packages in Docker containers."""


# Register commands
app.command(name="build")(build)
app.command(name="steps")(steps)
