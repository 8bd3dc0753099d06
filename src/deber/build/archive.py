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

"""Content-addressed copy of build results into the package store.

Files whose checksum matches the copy already in the store are left alone,
so re-archiving an unchanged build performs no writes and signed artifacts
are not churned.
"""

from __future__ import annotations

import hashlib
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path

from deber.core.exceptions import HostFilesystemError


@dataclass
class ArchivedFile:
    """Per-file result of archiving."""

    name: str
    written: bool
    sha256: str
    reason: str = ""


@dataclass
class ArchiveReport:
    files: list[ArchivedFile] = field(default_factory=list)

    @property
    def written(self) -> list[ArchivedFile]:
        return [f for f in self.files if f.written]

    @property
    def skipped(self) -> list[ArchivedFile]:
        return [f for f in self.files if not f.written]


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash of a file."""
    sha256 = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def archive_directory(build_dir: Path, store_dir: Path) -> ArchiveReport:
    """Copy every regular file of build_dir into store_dir unless unchanged.

    Subdirectories, such as the bind-mounted source tree, are not archived.

    Raises:
        HostFilesystemError: If reading, writing or listing fails.
    """
    report = ArchiveReport()
    try:
        store_dir.mkdir(parents=True, exist_ok=True)
        entries = sorted(build_dir.iterdir())
    except OSError as exc:
        raise HostFilesystemError(message=f"Cannot archive {build_dir}", cause=exc) from exc

    for source in entries:
        if source.is_dir():
            continue

        target = store_dir / source.name
        try:
            digest = compute_sha256(source)
            if target.is_file() and compute_sha256(target) == digest:
                report.files.append(
                    ArchivedFile(name=source.name, written=False, sha256=digest, reason="unchanged")
                )
                continue

            target.write_bytes(source.read_bytes())
            os.chmod(target, stat.S_IMODE(source.stat().st_mode))
        except OSError as exc:
            raise HostFilesystemError(message=f"Cannot archive {source.name}", cause=exc) from exc

        report.files.append(ArchivedFile(name=source.name, written=True, sha256=digest))

    return report
