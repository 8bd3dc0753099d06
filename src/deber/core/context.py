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

"""Context objects for Deber build operations.

BuildOptions is constructed once from command line flags merged with the
configuration file and handed to every stage. Stage logic reads its
settings from here and never from module globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

DEFAULT_MAX_AGE = timedelta(days=14)


@dataclass(frozen=True)
class BuildOptions:
    """Immutable settings for one build invocation.

    Attributes:
        dpkg_flags: Extra flags for dpkg-buildpackage.
        lintian_flags: Extra flags for lintian.
        extra_packages: Paths or globs of local .deb files or directories
            made available to apt inside the container.
        max_age: Age after which the image is rebuilt.
        network: Allow network access during dpkg-buildpackage.
        shell: Launch an interactive shell instead of building.
        lint: Run debi/debc/lintian after the build.
        tests: Run the package test suite during the build.
        keep_container: Do not remove the container at the end.
        include: Stage names to run exclusively (empty for all).
        exclude: Stage names to leave out.
        color: Colorize console output.
        base_repos: Docker Hub repositories tried, in order, as image base.
        recipe_template: Jinja2 Dockerfile template overriding the bundled one.
        image_packages: Packages installed into the image.
    """

    dpkg_flags: str = "-tc"
    lintian_flags: str = "-i -I"
    extra_packages: tuple[str, ...] = ()
    max_age: timedelta = DEFAULT_MAX_AGE
    network: bool = False
    shell: bool = False
    lint: bool = True
    tests: bool = True
    keep_container: bool = False
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    color: bool = True
    base_repos: tuple[str, ...] = ("debian", "ubuntu")
    recipe_template: Path | None = None
    image_packages: tuple[str, ...] = ()


def split_names(value: str) -> tuple[str, ...]:
    """Split a comma-separated flag value into stripped, non-empty names."""
    return tuple(part.strip() for part in value.split(",") if part.strip())
