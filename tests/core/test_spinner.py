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

"""Tests for deber.core.spinner module."""

from __future__ import annotations

import io
from unittest import mock

from deber.core import spinner
from deber.core.console import StepConsole


class TestActivitySpinner:
    """Tests for activity_spinner context manager."""

    def test_silent_when_not_a_terminal(self) -> None:
        out = io.StringIO()
        console = StepConsole(color=False, file=out)
        console.info("Building image")

        with mock.patch.object(spinner, "Status") as status:
            with spinner.activity_spinner(console, "Looking up sid"):
                pass

        status.assert_not_called()
        # The label line stays open for the outcome
        assert out.getvalue() == "deber ▸ Building image..."

    def test_yields_control_to_block(self) -> None:
        console = StepConsole(color=False, file=io.StringIO())
        executed = False
        with spinner.activity_spinner(console, "working"):
            executed = True
        assert executed

    def test_uses_status_on_terminal(self) -> None:
        console = StepConsole(color=False, file=io.StringIO())
        with mock.patch.object(type(console.console), "is_terminal", new_callable=mock.PropertyMock, return_value=True):
            with mock.patch.object(spinner, "Status") as status:
                with spinner.activity_spinner(console, "Looking up sid"):
                    pass

        status.assert_called_once()
        assert status.call_args.args[0] == "Looking up sid"

    def test_disabled_skips_status(self) -> None:
        console = StepConsole(color=False, file=io.StringIO())
        with mock.patch.object(type(console.console), "is_terminal", new_callable=mock.PropertyMock, return_value=True):
            with mock.patch.object(spinner, "Status") as status:
                with spinner.activity_spinner(console, "Looking up sid", disable=True):
                    pass

        status.assert_not_called()
