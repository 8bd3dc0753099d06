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

"""Implementation of `deber build` command.

Reads debian/changelog in the current directory, derives every name from
it and runs the build stages in a container for the target distribution.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import typer

from deber.build import STAGES, StepContext, run_pipeline, select_stages
from deber.config import load_config
from deber.core.console import PROGRAM, StepConsole, setup_logging
from deber.core.context import BuildOptions, split_names
from deber.core.exceptions import ConfigError, DeberError
from deber.core.run import RunContext
from deber.debpkg.changelog import CHANGELOG_PATH, read_changelog
from deber.duration import parse_duration
from deber.naming import Naming, NamingArgs, derive
from deber.paths import ensure_directories, resolve_paths
from deber.runtime.client import Runtime, connect
from deber.runtime.inspector import StateInspector
from deber.upstream.dockerhub import TagLookup


def build_options(cfg: dict[str, Any], **flags: Any) -> BuildOptions:
    """Merge command line flags over the configuration.

    Empty string flags fall back to the configured defaults.

    Raises:
        ConfigError: If a duration is malformed.
    """
    defaults = cfg["defaults"]
    recipe = cfg["recipe"]

    age = flags.get("age") or defaults["max_age"]
    try:
        max_age = parse_duration(str(age))
    except ValueError as exc:
        raise ConfigError(message=f"Invalid image age {age!r}", cause=exc) from exc

    template = recipe.get("template")
    return BuildOptions(
        dpkg_flags=flags.get("dpkg_flags") or defaults["dpkg_flags"],
        lintian_flags=flags.get("lintian_flags") or defaults["lintian_flags"],
        extra_packages=tuple(flags.get("packages") or ()),
        max_age=max_age,
        network=bool(flags.get("network")),
        shell=bool(flags.get("shell")),
        lint=not flags.get("no_lintian"),
        tests=not flags.get("no_tests"),
        keep_container=bool(flags.get("no_remove")),
        include=split_names(flags.get("include") or ""),
        exclude=split_names(flags.get("exclude") or ""),
        color=not flags.get("no_log_color"),
        base_repos=tuple(recipe.get("base_repos") or ("debian", "ubuntu")),
        recipe_template=Path(template).expanduser() if template else None,
        image_packages=tuple(recipe.get("packages") or ()),
    )


def derive_naming(paths: dict[str, Path], distribution: str = "", source_dir: Path | None = None) -> Naming:
    """Derive names from the changelog of the source tree in source_dir."""
    source_dir = (source_dir or Path.cwd()).resolve()
    info = read_changelog(source_dir / CHANGELOG_PATH)

    return derive(
        NamingArgs(
            prefix=PROGRAM,
            source=info.source,
            version=info.version,
            upstream=info.upstream,
            target=distribution or info.target,
            source_base_dir=source_dir,
            build_base_dir=paths["build_root"],
            cache_base_dir=paths["cache_root"],
            packages_base_dir=paths["packages_root"],
        )
    )


def build(
    build_dir: str = typer.Option("", "-B", "--build-dir", help="Where to place build directories"),
    cache_dir: str = typer.Option("", "-C", "--cache-dir", help="Where to place apt cache directories"),
    packages_dir: str = typer.Option("", "-P", "--packages-dir", help="Where to archive built packages"),
    distribution: str = typer.Option("", "-d", "--distribution", help="Override target distribution"),
    package: list[str] | None = typer.Option(
        None, "-p", "--package", help="Additional local .deb or directory of them (repeatable, globs allowed)"
    ),
    age: str = typer.Option("", "-a", "--age", help="Rebuild the image when older than this (e.g. 14d, 36h)"),
    network: bool = typer.Option(False, "-n", "--network", help="Allow network access during package build"),
    shell: bool = typer.Option(False, "-s", "--shell", help="Launch an interactive shell in the container"),
    dpkg_flags: str = typer.Option("", "-D", "--dpkg-flags", help="Flags passed to dpkg-buildpackage (default: -tc)"),
    lintian_flags: str = typer.Option("", "-L", "--lintian-flags", help="Flags passed to lintian (default: -i -I)"),
    no_lintian: bool = typer.Option(False, "-l", "--no-lintian", help="Don't run lintian"),
    no_tests: bool = typer.Option(False, "-t", "--no-tests", help="Don't run package tests"),
    no_log_color: bool = typer.Option(False, "-c", "--no-log-color", help="Don't colorize output"),
    no_remove: bool = typer.Option(False, "-r", "--no-remove", help="Don't remove the container at the end"),
    include: str = typer.Option("", "--include", help="Comma-separated stages to run exclusively"),
    exclude: str = typer.Option("", "--exclude", help="Comma-separated stages to leave out"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """Build the Debian package in the current directory inside a container."""
    setup_logging(verbose, color=not no_log_color)
    console = StepConsole(color=not no_log_color)

    try:
        cfg = load_config()
        options = build_options(
            cfg,
            age=age,
            dpkg_flags=dpkg_flags,
            lintian_flags=lintian_flags,
            packages=package,
            network=network,
            shell=shell,
            no_lintian=no_lintian,
            no_tests=no_tests,
            no_remove=no_remove,
            include=include,
            exclude=exclude,
            no_log_color=no_log_color,
        )
        stages = select_stages(STAGES, options)
        paths = resolve_paths(
            cfg,
            {"build_root": build_dir, "cache_root": cache_dir, "packages_root": packages_dir},
        )
        ensure_directories(paths)
        naming = derive_naming(paths, distribution)
    except DeberError as err:
        console.error(err)
        sys.exit(err.exit_code)

    exit_code = 0
    with RunContext("build", paths["runs_root"], name=naming.source) as run:
        run.write_summary(
            container=naming.container,
            image=naming.image,
            version=naming.version,
            target=naming.target,
            stages_selected=[stage.name for stage in stages],
        )
        try:
            client = connect()
            registry = cfg["registry"]
            ctx = StepContext(
                naming=naming,
                options=options,
                inspector=StateInspector(client),
                runtime=Runtime(client),
                tags=TagLookup(base_url=registry["dockerhub_url"], timeout=int(registry["timeout"])),
                console=console,
            )
            run_pipeline(stages, ctx, run)
        except DeberError as err:
            # Stage failures were already shown next to their label.
            if not run.summary.get("failed_stage"):
                console.error(err)
                run.write_summary(status="failed", error=str(err), exit_code=err.exit_code)
            exit_code = err.exit_code

    sys.exit(exit_code)
