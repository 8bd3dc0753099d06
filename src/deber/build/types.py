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

"""Type definitions for build stages.

This module provides the dataclasses passed between the pipeline runner and
the stage functions: the shared stage context, stage descriptors and the
per-stage outcome records.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deber.core.console import StepConsole
    from deber.core.context import BuildOptions
    from deber.naming import Naming
    from deber.runtime.client import Runtime
    from deber.runtime.inspector import StateInspector
    from deber.upstream.dockerhub import TagLookup


class Outcome(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """Result of a stage that did not fail.

    Failures are raised as DeberError instead of being returned.
    """

    outcome: Outcome
    reason: str = ""

    @classmethod
    def done(cls) -> StepResult:
        return cls(outcome=Outcome.DONE)

    @classmethod
    def skipped(cls, reason: str = "") -> StepResult:
        return cls(outcome=Outcome.SKIPPED, reason=reason)


@dataclass
class StepContext:
    """Everything a stage needs, handed to each stage function.

    Attributes:
        naming: Names and paths derived from debian/changelog.
        options: Immutable options of this invocation.
        inspector: Read-only runtime state queries.
        runtime: Side-effecting runtime actions.
        tags: Remote base image tag lookup.
        console: Step output.
    """

    naming: Naming
    options: BuildOptions
    inspector: StateInspector
    runtime: Runtime
    tags: TagLookup
    console: StepConsole


def always(options: BuildOptions) -> bool:
    return True


@dataclass(frozen=True)
class Stage:
    """An entry of the ordered stage list.

    Attributes:
        name: Identifier used by --include/--exclude.
        label: Human-readable label printed when the stage starts.
        description: One line shown by ``deber steps``.
        run: Stage function.
        enabled: Predicate over the options deciding whether the stage runs.
        terminal: The pipeline ends after this stage.
        when: When the stage runs, as listed by ``deber steps``.
    """

    name: str
    label: str
    description: str
    run: Callable[[StepContext], StepResult]
    enabled: Callable[[BuildOptions], bool] = always
    terminal: bool = False
    when: str = "always"


@dataclass
class StageReport:
    name: str
    outcome: Outcome
    reason: str = ""
    error: str = ""


@dataclass
class PipelineResult:
    """Outcomes of the stages that ran, in order."""

    stages: list[StageReport] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return any(stage.outcome is Outcome.FAILED for stage in self.stages)

    def outcome_of(self, name: str) -> Outcome | None:
        for stage in self.stages:
            if stage.name == name:
                return stage.outcome
        return None
