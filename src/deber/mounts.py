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

"""Container mount sets: computing the desired set and diffing it.

The create stage compares the mounts of an existing container with the set
the current invocation wants. When extra local packages are added or
removed between runs the sets differ and the container is recreated.
"""

from __future__ import annotations

import glob
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from deber.core.exceptions import InvalidExtraPackageError
from deber.naming import (
    CONTAINER_ARCHIVE_DIR,
    CONTAINER_BUILD_DIR,
    CONTAINER_CACHE_DIR,
    CONTAINER_SOURCE_DIR,
    Naming,
)

MOUNT_TYPE_BIND = "bind"


@dataclass(frozen=True)
class Mount:
    """A single container mount.

    Attributes:
        type: Mount type, always "bind" for mounts created by Deber.
        source: Absolute host path.
        target: Absolute path inside the container.
        read_only: Whether the container sees the mount read-only.
    """

    type: str
    source: str
    target: str
    read_only: bool = False

    @classmethod
    def bind(cls, source: Path | str, target: str, read_only: bool = False) -> Mount:
        return cls(type=MOUNT_TYPE_BIND, source=str(source), target=target, read_only=read_only)

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> Mount:
        """Build a Mount from a HostConfig.Mounts entry of a container inspect."""
        return cls(
            type=attrs.get("Type", MOUNT_TYPE_BIND),
            source=attrs.get("Source", ""),
            target=attrs.get("Target", ""),
            read_only=bool(attrs.get("ReadOnly", False)),
        )


def mounts_equal(existing: Sequence[Mount], desired: Sequence[Mount]) -> bool:
    """Return True if both mount lists hold the same mounts in any order."""
    if len(existing) != len(desired):
        return False

    present = set(existing)
    return all(mount in present for mount in desired)


def resolve_extra_packages(patterns: Iterable[str]) -> list[Path]:
    """Expand extra package patterns into absolute paths.

    Each pattern may be a plain path or a glob. Every match must be a
    directory or a ``.deb`` file.

    Raises:
        InvalidExtraPackageError: If a pattern matches nothing or a match is
            neither a directory nor a .deb file.
    """
    resolved: list[Path] = []
    for pattern in patterns:
        matches = sorted(glob.glob(str(Path(pattern).expanduser())))
        if not matches:
            raise InvalidExtraPackageError(
                message=f"Extra package not found: {pattern}",
                path=pattern,
            )

        for match in matches:
            path = Path(match).absolute()
            if not path.is_dir() and path.suffix != ".deb":
                raise InvalidExtraPackageError(
                    message=f"Please specify a directory or .deb file: {path}",
                    path=str(path),
                )
            resolved.append(path)

    return resolved


def desired_mounts(naming: Naming, extra_packages: Sequence[Path]) -> list[Mount]:
    """Return the mounts a container for naming should have.

    Source, build and apt cache directories are bind-mounted read-write;
    each extra package is mounted read-only under the local archive.
    """
    mounts = [
        Mount.bind(naming.source_dir, CONTAINER_SOURCE_DIR),
        Mount.bind(naming.build_dir, CONTAINER_BUILD_DIR),
        Mount.bind(naming.cache_dir, CONTAINER_CACHE_DIR),
    ]

    for package in extra_packages:
        mounts.append(
            Mount.bind(package, f"{CONTAINER_ARCHIVE_DIR}/{package.name}", read_only=True)
        )

    return mounts
