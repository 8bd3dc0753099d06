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

"""Pytest fixtures and configuration for Deber tests."""

from __future__ import annotations

import io
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from unittest import mock

import pytest

from deber.build.types import StepContext
from deber.core.console import StepConsole
from deber.core.context import BuildOptions
from deber.naming import Naming, NamingArgs, derive


@pytest.fixture
def temp_home(monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Create a temporary home directory and set HOME/XDG paths."""
    with tempfile.TemporaryDirectory() as tmpdir:
        home = Path(tmpdir)
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
        monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
        # Also patch Path.home() to return our temp home
        monkeypatch.setattr(Path, "home", lambda: home)
        yield home


@pytest.fixture
def mock_config(temp_home: Path) -> Path:
    """Create a minimal config file in the temp home."""
    config_dir = temp_home / ".config" / "deber"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / "config.yaml"
    config_file.write_text("""
paths:
  build_root: "~/.cache/deber/builddir"
  cache_root: "~/.cache/deber/cachedir"
  packages_root: "~/.cache/deber/packages"
  runs_root: "~/.cache/deber/runs"

defaults:
  max_age: "14d"
  dpkg_flags: "-tc"
  lintian_flags: "-i -I"
""")
    return config_file


@pytest.fixture
def make_naming(tmp_path: Path) -> Callable[..., Naming]:
    """Factory deriving a Naming whose directories live under tmp_path."""

    def _make(
        source: str = "hello",
        version: str = "2.10-3",
        upstream: str = "2.10",
        target: str = "unstable",
    ) -> Naming:
        source_dir = tmp_path / "src" / f"{source}-{upstream}"
        source_dir.mkdir(parents=True, exist_ok=True)
        return derive(
            NamingArgs(
                prefix="deber",
                source=source,
                version=version,
                upstream=upstream,
                target=target,
                source_base_dir=source_dir,
                build_base_dir=tmp_path / "builddir",
                cache_base_dir=tmp_path / "cachedir",
                packages_base_dir=tmp_path / "packages",
            )
        )

    return _make


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_ctx(make_naming: Callable[..., Naming], console_output: io.StringIO) -> Callable[..., StepContext]:
    """Factory for a StepContext with mocked runtime collaborators.

    By default nothing exists: no image, no container.
    """

    def _make(naming: Naming | None = None, **option_overrides) -> StepContext:
        inspector = mock.MagicMock(name="inspector")
        inspector.image_exists.return_value = False
        inspector.container_exists.return_value = False
        inspector.container_running.return_value = False
        inspector.container_mounts.return_value = []

        return StepContext(
            naming=naming or make_naming(),
            options=BuildOptions(**option_overrides),
            inspector=inspector,
            runtime=mock.MagicMock(name="runtime"),
            tags=mock.MagicMock(name="tags"),
            console=StepConsole(color=False, file=console_output),
        )

    return _make
