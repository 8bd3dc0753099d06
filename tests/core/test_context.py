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

"""Tests for deber.core.context module."""

from __future__ import annotations

import dataclasses
from datetime import timedelta

import pytest

from deber.core.context import BuildOptions, split_names


class TestBuildOptions:
    """Tests for BuildOptions dataclass."""

    def test_default_values(self) -> None:
        options = BuildOptions()
        assert options.dpkg_flags == "-tc"
        assert options.lintian_flags == "-i -I"
        assert options.max_age == timedelta(days=14)
        assert options.lint is True
        assert options.tests is True
        assert options.network is False
        assert options.keep_container is False
        assert options.base_repos == ("debian", "ubuntu")

    def test_is_immutable(self) -> None:
        options = BuildOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.network = True  # type: ignore[misc]


class TestSplitNames:
    """Tests for split_names function."""

    def test_splits_and_strips(self) -> None:
        assert split_names("build, create ,start") == ("build", "create", "start")

    def test_empty(self) -> None:
        assert split_names("") == ()
        assert split_names(" , ") == ()
