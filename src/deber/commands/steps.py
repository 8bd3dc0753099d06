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

"""Implementation of `deber steps` command."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from deber.build import STAGES


def steps(
    no_log_color: bool = typer.Option(False, "-c", "--no-log-color", help="Don't colorize output"),
) -> None:
    """List build stages in execution order.

    Stage names are accepted by `deber build --include/--exclude`.
    """
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Stage")
    table.add_column("Description")
    table.add_column("Runs")

    for stage in STAGES:
        table.add_row(stage.name, stage.description, stage.when)

    Console(no_color=no_log_color, highlight=False).print(table)
