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

"""Tests for deber.mounts module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from deber import mounts
from deber.core.exceptions import InvalidExtraPackageError
from deber.naming import Naming


class TestMountsEqual:
    """Tests for mounts_equal function."""

    def test_order_is_irrelevant(self) -> None:
        a = mounts.Mount.bind("/a", "/x")
        b = mounts.Mount.bind("/b", "/y", read_only=True)
        assert mounts.mounts_equal([a, b], [b, a])
        assert mounts.mounts_equal([b, a], [a, b])

    def test_missing_element_is_unequal(self) -> None:
        a = mounts.Mount.bind("/a", "/x")
        b = mounts.Mount.bind("/b", "/y")
        assert not mounts.mounts_equal([a], [a, b])
        assert not mounts.mounts_equal([a, b], [a])

    def test_read_only_flag_matters(self) -> None:
        assert not mounts.mounts_equal(
            [mounts.Mount.bind("/a", "/x")],
            [mounts.Mount.bind("/a", "/x", read_only=True)],
        )

    def test_empty(self) -> None:
        assert mounts.mounts_equal([], [])


class TestFromAttrs:
    """Tests for Mount.from_attrs."""

    def test_reads_host_config_entry(self) -> None:
        mount = mounts.Mount.from_attrs(
            {"Type": "bind", "Source": "/home/u/debs", "Target": "/archive/debs", "ReadOnly": True}
        )
        assert mount == mounts.Mount.bind("/home/u/debs", "/archive/debs", read_only=True)

    def test_read_only_defaults_to_false(self) -> None:
        mount = mounts.Mount.from_attrs({"Type": "bind", "Source": "/a", "Target": "/b"})
        assert mount.read_only is False


class TestResolveExtraPackages:
    """Tests for resolve_extra_packages function."""

    def test_deb_and_directory(self, tmp_path: Path) -> None:
        deb = tmp_path / "libfoo_1.0-1_amd64.deb"
        deb.write_bytes(b"")
        repo = tmp_path / "repo"
        repo.mkdir()

        assert mounts.resolve_extra_packages([str(deb), str(repo)]) == [deb, repo]

    def test_glob(self, tmp_path: Path) -> None:
        for name in ("b.deb", "a.deb"):
            (tmp_path / name).write_bytes(b"")

        assert mounts.resolve_extra_packages([str(tmp_path / "*.deb")]) == [
            tmp_path / "a.deb",
            tmp_path / "b.deb",
        ]

    def test_rejects_other_files(self, tmp_path: Path) -> None:
        bad = tmp_path / "notes.txt"
        bad.write_text("")
        with pytest.raises(InvalidExtraPackageError) as exc_info:
            mounts.resolve_extra_packages([str(bad)])
        assert exc_info.value.path == str(bad)

    def test_rejects_missing(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidExtraPackageError):
            mounts.resolve_extra_packages([str(tmp_path / "missing.deb")])


class TestDesiredMounts:
    """Tests for desired_mounts function."""

    def test_base_mounts(self, make_naming: Callable[..., Naming]) -> None:
        naming = make_naming()
        result = mounts.desired_mounts(naming, [])
        assert result == [
            mounts.Mount.bind(naming.source_dir, "/build/source"),
            mounts.Mount.bind(naming.build_dir, "/build"),
            mounts.Mount.bind(naming.cache_dir, "/var/cache/apt"),
        ]

    def test_extra_packages_are_read_only_under_archive(
        self, make_naming: Callable[..., Naming], tmp_path: Path
    ) -> None:
        deb = tmp_path / "libfoo_1.0-1_amd64.deb"
        result = mounts.desired_mounts(make_naming(), [deb])
        assert result[-1] == mounts.Mount.bind(deb, "/archive/libfoo_1.0-1_amd64.deb", read_only=True)
        assert len(result) == 4
