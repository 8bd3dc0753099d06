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

"""Build pipeline for Deber.

Provides the ordered build stages, the sequential runner and the helpers
they use for tarball resolution and archiving.
"""

from deber.build.pipeline import STAGES, run_pipeline, select_stages, stage_names
from deber.build.types import Outcome, PipelineResult, Stage, StepContext, StepResult

__all__ = [
    "STAGES",
    "Outcome",
    "PipelineResult",
    "Stage",
    "StepContext",
    "StepResult",
    "run_pipeline",
    "select_stages",
    "stage_names",
]
