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

"""Deterministic naming of containers, images and host directories.

Every name used by the build pipeline is computed here from the changelog
metadata and the configured base directories. Re-running Deber on the same
changelog must always produce the same names, otherwise the stages could not
recognise work done by a previous invocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Mount points inside the container
CONTAINER_ARCHIVE_DIR = "/archive"
CONTAINER_BUILD_DIR = "/build"
CONTAINER_SOURCE_DIR = "/build/source"
CONTAINER_CACHE_DIR = "/var/cache/apt"

BACKPORTS_SUFFIX = "-backports"
BACKPORT_MARKER = "bpo"

# Docker allows only [a-zA-Z0-9][a-zA-Z0-9_.-] in container names, while
# Debian versions may also contain these.
_VERSION_REPLACEMENTS = ("~", ":", "+")


@dataclass(frozen=True)
class NamingArgs:
    """Raw inputs to naming derivation.

    Attributes:
        prefix: Program name used as image repository and container prefix.
        source: Source package name from debian/changelog.
        version: Full Debian version string.
        upstream: Upstream part of the version.
        target: Target distribution from debian/changelog (or override).
        source_base_dir: Directory holding the unpacked source (cwd).
        build_base_dir: Directory holding per-container build directories.
        cache_base_dir: Directory holding per-image apt caches.
        packages_base_dir: Root of the versioned package store.
    """

    prefix: str
    source: str
    version: str
    upstream: str
    target: str
    source_base_dir: Path
    build_base_dir: Path
    cache_base_dir: Path
    packages_base_dir: Path


@dataclass(frozen=True)
class Naming:
    """Names and paths derived from NamingArgs."""

    args: NamingArgs
    target: str
    container: str
    image: str
    source_dir: Path
    source_parent_dir: Path
    build_dir: Path
    cache_dir: Path
    packages_dir: Path
    packages_target_dir: Path
    packages_source_dir: Path
    packages_version_dir: Path

    @property
    def source(self) -> str:
        return self.args.source

    @property
    def version(self) -> str:
        return self.args.version

    @property
    def upstream(self) -> str:
        return self.args.upstream

    @property
    def is_native(self) -> bool:
        """Native packages carry no separate upstream tarball."""
        return self.args.version == self.args.upstream

    @property
    def tarball_prefix(self) -> str:
        return f"{self.args.source}_{self.args.upstream}.orig.tar"


def standardize_version(version: str) -> str:
    """Replace characters Docker rejects in names with hyphens."""
    for char in _VERSION_REPLACEMENTS:
        version = version.replace(char, "-")
    return version


def standardize_target(version: str, target: str) -> str:
    """Normalize a changelog distribution into an image tag.

    UNRELEASED maps to unstable, pocket suffixes such as ``-security`` or
    ``-proposed`` are dropped, and backport versions get ``-backports``.
    """
    target = target.replace("UNRELEASED", "unstable")
    target = target.split("-")[0]

    if BACKPORT_MARKER in version:
        target += BACKPORTS_SUFFIX

    return target


def base_distribution(target: str) -> str:
    """Return the codename a standardized target is based on."""
    if target.endswith(BACKPORTS_SUFFIX):
        return target[: -len(BACKPORTS_SUFFIX)]
    return target


def derive(args: NamingArgs) -> Naming:
    """Derive every container, image and directory name from args."""
    target = standardize_target(args.version, args.target)
    version = standardize_version(args.version)

    image = f"{args.prefix}:{target}"
    container = f"{args.prefix}_{target}_{args.source}_{version}"

    packages_dir = Path(args.packages_base_dir)
    return Naming(
        args=args,
        target=target,
        container=container,
        image=image,
        source_dir=Path(args.source_base_dir),
        source_parent_dir=Path(args.source_base_dir).parent,
        build_dir=Path(args.build_base_dir) / container,
        cache_dir=Path(args.cache_base_dir) / image,
        packages_dir=packages_dir,
        packages_target_dir=packages_dir / target,
        packages_source_dir=packages_dir / target / args.source,
        packages_version_dir=packages_dir / target / args.source / args.version,
    )
