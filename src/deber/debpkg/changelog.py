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

"""Reading package metadata from debian/changelog using python-debian."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from debian.changelog import Changelog, ChangelogParseError

from deber.core.exceptions import ConfigError

CHANGELOG_PATH = Path("debian") / "changelog"


@dataclass(frozen=True)
class ChangelogInfo:
    """Metadata of the topmost changelog entry."""

    source: str
    version: str
    upstream: str
    target: str


def read_changelog(path: Path = CHANGELOG_PATH) -> ChangelogInfo:
    """Parse the topmost entry of a debian/changelog.

    The target is the first distribution listed for the entry.

    Raises:
        ConfigError: If the file is unreadable or has no valid entry.
    """
    try:
        with Path(path).open(encoding="utf-8") as f:
            cl = Changelog(f, max_blocks=1, strict=True)
    except OSError as exc:
        raise ConfigError(message=f"Cannot read {path}", cause=exc) from exc
    except ChangelogParseError as exc:
        raise ConfigError(message=f"Cannot parse {path}", cause=exc) from exc

    if len(cl) == 0 or not cl.package or cl.version is None:
        raise ConfigError(message=f"No changelog entry found in {path}")

    distributions = (cl.distributions or "").split()
    if not distributions:
        raise ConfigError(message=f"No target distribution in {path}")

    return ChangelogInfo(
        source=cl.package,
        version=str(cl.version),
        upstream=cl.version.upstream_version,
        target=distributions[0],
    )
