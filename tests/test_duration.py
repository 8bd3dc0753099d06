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

"""Tests for deber.duration module."""

from __future__ import annotations

from datetime import timedelta

import pytest

from deber import duration


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_parses_units(self) -> None:
        assert duration.parse_duration("30s") == timedelta(seconds=30)
        assert duration.parse_duration("30m") == timedelta(minutes=30)
        assert duration.parse_duration("6h") == timedelta(hours=6)
        assert duration.parse_duration("14d") == timedelta(days=14)
        assert duration.parse_duration("2w") == timedelta(weeks=2)

    def test_parses_compound(self) -> None:
        assert duration.parse_duration("1d12h") == timedelta(hours=36)
        assert duration.parse_duration("1h30m") == timedelta(minutes=90)

    def test_case_insensitive(self) -> None:
        assert duration.parse_duration("6H") == timedelta(hours=6)

    def test_strips_whitespace(self) -> None:
        assert duration.parse_duration("  1d  ") == timedelta(days=1)

    @pytest.mark.parametrize("value", ["invalid", "30", "h", "30x", ""])
    def test_raises_on_invalid(self, value: str) -> None:
        with pytest.raises(ValueError) as exc_info:
            duration.parse_duration(value)
        assert "Invalid duration format" in str(exc_info.value)


class TestFormatDuration:
    """Tests for format_duration function."""

    def test_two_largest_units(self) -> None:
        assert duration.format_duration(timedelta(days=3, hours=4, minutes=5)) == "3d4h"

    def test_skips_zero_units(self) -> None:
        assert duration.format_duration(timedelta(days=1, minutes=5)) == "1d5m"

    def test_seconds(self) -> None:
        assert duration.format_duration(timedelta(seconds=42)) == "42s"

    def test_zero_and_negative(self) -> None:
        assert duration.format_duration(timedelta()) == "0s"
        assert duration.format_duration(timedelta(seconds=-5)) == "0s"
