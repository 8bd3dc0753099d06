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

"""Ordered build stages and the sequential pipeline runner.

    build -> create -> start -> [shell] -> tarball -> depends -> package
          -> lint -> archive -> stop -> [remove]

Bracketed stages depend on options. The shell stage ends the pipeline:
the container is left running for further sessions.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from deber.build import steps
from deber.build.errors import log_stage_event, stage_error, stage_warning
from deber.build.types import Outcome, PipelineResult, Stage, StageReport, StepContext
from deber.core.exceptions import ConfigError, DeberError

if TYPE_CHECKING:
    from deber.core.context import BuildOptions
    from deber.core.run import RunContext

logger = logging.getLogger(__name__)

PACKAGE_STAGE = "package"

STAGES: tuple[Stage, ...] = (
    Stage("build", "Building image", "Build the image unless a fresh one exists", steps.build_image),
    Stage("create", "Creating container", "Create the container, recreating it if mounts changed", steps.create_container),
    Stage("start", "Starting container", "Start the container unless it is running", steps.start_container),
    Stage(
        "shell",
        "Launching shell",
        "Open an interactive root shell and stop there",
        steps.shell,
        enabled=lambda options: options.shell,
        terminal=True,
        when="with --shell, then stops",
    ),
    Stage("tarball", "Finding tarballs", "Move the upstream tarball into the build directory", steps.tarball),
    Stage("depends", "Installing dependencies", "Install build dependencies in the container", steps.install_depends),
    Stage(PACKAGE_STAGE, "Packaging software", "Run dpkg-buildpackage in the container", steps.package),
    Stage(
        "lint",
        "Linting package",
        "Install the package and run lintian",
        steps.lint,
        when="always, skipped with --no-lintian",
    ),
    Stage("archive", "Archiving build", "Copy changed build results into the package store", steps.archive),
    Stage("stop", "Stopping container", "Stop the container if it is running", steps.stop_container),
    Stage(
        "remove",
        "Removing container",
        "Remove the container if it exists",
        steps.remove_container,
        enabled=lambda options: not options.keep_container,
        when="unless --no-remove",
    ),
)


def stage_names(stages: Sequence[Stage] = STAGES) -> list[str]:
    return [stage.name for stage in stages]


def select_stages(stages: Sequence[Stage], options: BuildOptions) -> list[Stage]:
    """Return the stages to run, in order.

    A stage runs when its enabled predicate holds, it is listed in
    options.include (if any) and it is not listed in options.exclude.

    Raises:
        ConfigError: If both include and exclude are given, or either names
            an unknown stage.
    """
    if options.include and options.exclude:
        raise ConfigError(message="--include and --exclude cannot be used together")

    known = set(stage_names(stages))
    unknown = sorted(set(options.include) - known) + sorted(set(options.exclude) - known)
    if unknown:
        raise ConfigError(
            message=f"Unknown stage(s): {', '.join(unknown)} (choose from {', '.join(stage_names(stages))})"
        )

    selected = []
    for stage in stages:
        if not stage.enabled(options):
            continue
        if options.include and stage.name not in options.include:
            continue
        if stage.name in options.exclude:
            continue
        selected.append(stage)
    return selected


def run_pipeline(
    stages: Sequence[Stage],
    ctx: StepContext,
    run: RunContext | None = None,
) -> PipelineResult:
    """Run stages in order, stopping at the first failure.

    When the package stage fails the container is force-removed, unless it
    is meant to be kept, before the original error is re-raised. A failure
    of that removal is only reported.

    Raises:
        DeberError: The error of the failing stage.
    """
    result = PipelineResult()

    for stage in stages:
        ctx.console.info(stage.label)
        log_stage_event(run, stage.name, "start")
        try:
            step = stage.run(ctx)
        except DeberError as err:
            ctx.console.failed(err)
            stage_error(run, stage.name, err)
            result.stages.append(
                StageReport(name=stage.name, outcome=Outcome.FAILED, error=str(err))
            )
            if stage.name == PACKAGE_STAGE and not ctx.options.keep_container:
                _cleanup_container(ctx, run)
            if run is not None:
                run.write_summary(stages=_stage_summary(result))
            raise

        if step.outcome is Outcome.SKIPPED:
            ctx.console.skipped(step.reason)
        else:
            ctx.console.done()
        log_stage_event(run, stage.name, step.outcome.value, reason=step.reason)
        result.stages.append(StageReport(name=stage.name, outcome=step.outcome, reason=step.reason))

        if stage.terminal:
            logger.debug("Stage %s ends the pipeline", stage.name)
            break

    if run is not None:
        run.write_summary(status="success", stages=_stage_summary(result))
    return result


def _cleanup_container(ctx: StepContext, run: RunContext | None) -> None:
    name = ctx.naming.container
    try:
        ctx.runtime.container_remove(name, force=True, missing_ok=True)
    except DeberError as err:
        stage_warning(run, ctx.console, PACKAGE_STAGE, f"Cannot remove container {name}: {err}")
        return
    log_stage_event(run, PACKAGE_STAGE, "cleanup", container=name)


def _stage_summary(result: PipelineResult) -> list[dict[str, str]]:
    return [
        {"stage": report.name, "outcome": report.outcome.value, "reason": report.reason}
        for report in result.stages
    ]
