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

"""Upstream tarball resolution.

Packaging tools usually leave the upstream tarball (or a symlink to it) in
the parent of the source tree, while dpkg-buildpackage inside the container
only sees the build directory. The tarball is moved, not copied, so a later
run finds it in the build directory and skips.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from deber.build.types import StepResult
from deber.core.exceptions import AmbiguousTarballError, HostFilesystemError, MissingTarballError
from deber.naming import Naming

logger = logging.getLogger(__name__)

TARBALL_EXTENSIONS = ("gz", "xz", "bz2")


def find_tarballs(directory: Path, prefix: str, extensions: Sequence[str] | None = None) -> list[str]:
    """Return sorted names in directory starting with prefix.

    When extensions is given, the last dot-separated part of the name must
    be one of them. A missing directory has no tarballs.
    """
    try:
        names = sorted(os.listdir(directory))
    except FileNotFoundError:
        return []
    except OSError as exc:
        raise HostFilesystemError(message=f"Cannot list {directory}", cause=exc) from exc

    matches = []
    for name in names:
        if not name.startswith(prefix):
            continue
        if extensions is not None and name.rsplit(".", 1)[-1] not in extensions:
            continue
        matches.append(name)
    return matches


def resolve_tarball(naming: Naming) -> StepResult:
    """Make the upstream tarball available in the build directory.

    Raises:
        AmbiguousTarballError: If either directory holds more than one match.
        MissingTarballError: If neither directory holds a match.
        HostFilesystemError: If removing or moving a file fails.
    """
    if naming.is_native:
        return StepResult.skipped("native package")

    prefix = naming.tarball_prefix
    parent_matches = find_tarballs(naming.source_parent_dir, prefix, TARBALL_EXTENSIONS)
    build_matches = find_tarballs(naming.build_dir, prefix)

    if len(build_matches) > 1:
        raise AmbiguousTarballError(
            message=f"Multiple tarballs found in build directory {naming.build_dir}",
            candidates=build_matches,
        )
    if len(parent_matches) > 1:
        raise AmbiguousTarballError(
            message=f"Multiple tarballs found in parent source directory {naming.source_parent_dir}",
            candidates=parent_matches,
        )
    if not parent_matches and not build_matches:
        raise MissingTarballError(message=f"Upstream tarball {prefix}.* not found")

    if not parent_matches:
        return StepResult.skipped("tarball already in build directory")

    name = parent_matches[0]
    link = naming.source_parent_dir / name
    dest = naming.build_dir / name
    try:
        source = link.resolve(strict=True)
        for stale in build_matches:
            stale_path = naming.build_dir / stale
            if stale_path.resolve() != source:
                stale_path.unlink()

        naming.build_dir.mkdir(parents=True, exist_ok=True)
        if source != dest.resolve():
            os.rename(source, dest)
        # A symlink in the parent now dangles; drop it too.
        if link.is_symlink():
            link.unlink()
    except OSError as exc:
        raise HostFilesystemError(message=f"Cannot move {link} to {dest}", cause=exc) from exc

    logger.debug("Moved %s to %s", source, dest)
    return StepResult.done()
