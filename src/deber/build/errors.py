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

"""Structured event helpers for build stages.

Every stage transition is written to the run's events.jsonl with a key of
the form "{stage}.{what}". A run is optional so stages can be driven
without one, e.g. from tests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from deber.core.console import StepConsole
    from deber.core.exceptions import DeberError
    from deber.core.run import RunContext

logger = logging.getLogger(__name__)


def log_stage_event(run: RunContext | None, stage: str, what: str, **event_data: Any) -> None:
    """Log a structured "{stage}.{what}" event.

    Example:
        log_stage_event(run, "build", "skipped", reason="image is fresh")
    """
    logger.debug("%s.%s %s", stage, what, event_data or "")
    if run is None:
        return
    run.log_event({"event": f"{stage}.{what}", "stage": stage, **event_data})


def stage_error(run: RunContext | None, stage: str, error: DeberError) -> int:
    """Record a stage failure and write the failed summary.

    Returns:
        The error's exit code.
    """
    log_stage_event(
        run,
        stage,
        "error",
        kind=error.kind.value,
        message=str(error),
        exit_code=error.exit_code,
    )
    if run is not None:
        run.write_summary(
            status="failed",
            failed_stage=stage,
            error=str(error),
            exit_code=error.exit_code,
        )
    return error.exit_code


def stage_warning(
    run: RunContext | None,
    console: StepConsole,
    stage: str,
    message: str,
    **event_data: Any,
) -> None:
    """Show a warning without affecting the outcome of the run."""
    console.warning(message)
    log_stage_event(run, stage, "warning", message=message, **event_data)
