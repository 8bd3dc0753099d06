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

"""Tests for deber.core.console module."""

from __future__ import annotations

import io
import logging

from deber.core.console import StepConsole, setup_logging
from deber.core.exceptions import MissingTarballError


def _console() -> tuple[StepConsole, io.StringIO]:
    out = io.StringIO()
    return StepConsole(color=False, file=out), out


class TestStepConsole:
    """Tests for StepConsole class."""

    def test_outcome_on_label_line(self) -> None:
        console, out = _console()
        console.info("Starting container")
        console.done()
        assert out.getvalue() == "deber ▸ Starting container... done\n"

    def test_skipped_with_reason(self) -> None:
        console, out = _console()
        console.info("Starting container")
        console.skipped("container running")
        assert out.getvalue() == "deber ▸ Starting container... skipped (container running)\n"

    def test_drop_moves_outcome_to_own_line(self) -> None:
        console, out = _console()
        console.info("Packaging software")
        console.drop()
        out.write("dpkg-buildpackage output\n")
        console.done()
        assert out.getvalue().splitlines() == [
            "deber ▸ Packaging software...",
            "dpkg-buildpackage output",
            "  done",
        ]

    def test_failed_prints_error(self) -> None:
        console, out = _console()
        console.info("Finding tarballs")
        console.failed(MissingTarballError(message="Upstream tarball not found"))
        assert out.getvalue().splitlines() == [
            "deber ▸ Finding tarballs... failed",
            "error: Upstream tarball not found",
        ]

    def test_extra_lines(self) -> None:
        console, out = _console()
        console.info("Archiving build")
        console.extra("hello_2.10-3.dsc")
        console.skipped("unchanged")
        assert out.getvalue().splitlines() == [
            "deber ▸ Archiving build...",
            "  • hello_2.10-3.dsc skipped (unchanged)",
        ]

    def test_markup_is_escaped(self) -> None:
        console, out = _console()
        console.warning("[bold]not markup[/bold]")
        assert "[bold]not markup[/bold]" in out.getvalue()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_verbose_enables_debug(self) -> None:
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_default_is_warning(self) -> None:
        setup_logging(verbose=False)
        assert logging.getLogger().level == logging.WARNING
