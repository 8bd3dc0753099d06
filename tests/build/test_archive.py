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

"""Tests for deber.build.archive module."""

from __future__ import annotations

import hashlib
import stat
from pathlib import Path
from unittest import mock

import pytest

from deber.build import archive
from deber.core.exceptions import HostFilesystemError


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    (build_dir / "hello_2.10-3_amd64.deb").write_bytes(b"deb")
    (build_dir / "hello_2.10-3.dsc").write_text("dsc")
    (build_dir / "source").mkdir()
    return build_dir


class TestComputeSha256:
    """Tests for compute_sha256 function."""

    def test_matches_hashlib(self, tmp_path: Path) -> None:
        path = tmp_path / "f"
        path.write_bytes(b"x" * 100000)
        assert archive.compute_sha256(path) == hashlib.sha256(b"x" * 100000).hexdigest()


class TestArchiveDirectory:
    """Tests for archive_directory function."""

    def test_copies_files_not_directories(self, build_dir: Path, tmp_path: Path) -> None:
        store = tmp_path / "packages" / "unstable" / "hello" / "2.10-3"

        report = archive.archive_directory(build_dir, store)

        assert sorted(f.name for f in report.written) == ["hello_2.10-3.dsc", "hello_2.10-3_amd64.deb"]
        assert sorted(p.name for p in store.iterdir()) == ["hello_2.10-3.dsc", "hello_2.10-3_amd64.deb"]
        assert (store / "hello_2.10-3_amd64.deb").read_bytes() == b"deb"

    def test_second_run_writes_nothing(self, build_dir: Path, tmp_path: Path) -> None:
        store = tmp_path / "store"
        archive.archive_directory(build_dir, store)

        with mock.patch.object(Path, "write_bytes") as write_bytes:
            report = archive.archive_directory(build_dir, store)

        write_bytes.assert_not_called()
        assert report.written == []
        assert all(f.reason == "unchanged" for f in report.skipped)
        assert len(report.skipped) == 2

    def test_changed_file_is_rewritten(self, build_dir: Path, tmp_path: Path) -> None:
        store = tmp_path / "store"
        archive.archive_directory(build_dir, store)
        (build_dir / "hello_2.10-3.dsc").write_text("dsc, rebuilt")

        report = archive.archive_directory(build_dir, store)

        assert [f.name for f in report.written] == ["hello_2.10-3.dsc"]
        assert (store / "hello_2.10-3.dsc").read_text() == "dsc, rebuilt"

    def test_preserves_mode(self, build_dir: Path, tmp_path: Path) -> None:
        source = build_dir / "hello_2.10-3_amd64.deb"
        source.chmod(0o640)
        store = tmp_path / "store"

        archive.archive_directory(build_dir, store)

        assert stat.S_IMODE((store / source.name).stat().st_mode) == 0o640

    def test_missing_build_dir(self, tmp_path: Path) -> None:
        with pytest.raises(HostFilesystemError):
            archive.archive_directory(tmp_path / "missing", tmp_path / "store")
