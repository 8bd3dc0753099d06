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

"""Configuration utilities for Deber."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "build_root": "~/.cache/deber/builddir",
        "cache_root": "~/.cache/deber/cachedir",
        "packages_root": "~/.cache/deber/packages",
        "runs_root": "~/.cache/deber/runs",
    },
    "defaults": {
        "max_age": "14d",
        "dpkg_flags": "-tc",
        "lintian_flags": "-i -I",
    },
    "recipe": {
        # Path to a Jinja2 Dockerfile template; the bundled one when unset.
        "template": None,
        "base_repos": ["debian", "ubuntu"],
        "packages": ["build-essential", "devscripts", "debhelper", "lintian", "fakeroot", "dpkg-dev"],
    },
    "registry": {
        "dockerhub_url": "https://hub.docker.com/v2/repositories/library",
        "timeout": 30,
    },
}


def get_config_path() -> Path:
    """Return the path to the config file."""
    return Path.home() / ".config" / "deber" / "config.yaml"


def ensure_config_exists() -> None:
    """Create the config file with defaults if it does not exist."""
    cfg_path = get_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    if not cfg_path.exists():
        cfg_path.write_text(yaml.safe_dump(DEFAULT_CONFIG))


def load_config() -> dict[str, Any]:
    """Load configuration from disk and merge with defaults.

    Each top-level section of the on-disk file is merged over the matching
    section of DEFAULT_CONFIG, so a file only needs the keys it changes.
    """
    ensure_config_exists()
    cfg_path = get_config_path()
    try:
        raw = yaml.safe_load(cfg_path.read_text()) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, exc)
        raw = {}

    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", cfg_path)
        raw = {}

    merged: dict[str, Any] = {}
    for key, val in DEFAULT_CONFIG.items():
        if isinstance(raw.get(key), dict):
            merged[key] = {**val, **raw[key]}
        else:
            merged[key] = dict(val)

    for pkey, pval in merged["paths"].items():
        merged["paths"][pkey] = str(Path(pval).expanduser())

    return merged
