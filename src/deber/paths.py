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

"""Path helpers and directory creation for Deber."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from deber.core.exceptions import HostFilesystemError

REQUIRED_PATHS = ("build_root", "cache_root", "packages_root", "runs_root")


def resolve_paths(cfg: Mapping[str, Any], overrides: Mapping[str, str] | None = None) -> dict[str, Path]:
    """Return resolved Path objects for configured paths.

    Non-empty values in overrides (typically command line flags) replace the
    configured ones.
    """
    paths: dict[str, Any] = dict(cfg.get("paths", {}))
    for key, val in (overrides or {}).items():
        if val:
            paths[key] = val

    return {key: Path(str(val)).expanduser().resolve() for key, val in paths.items()}


def ensure_directories(paths: Mapping[str, Path]) -> None:
    """Create the base directories Deber writes into."""
    for key in REQUIRED_PATHS:
        try:
            paths[key].mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise HostFilesystemError(message=f"Cannot create {key} directory {paths[key]}", cause=exc) from exc
