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

"""Run context manager for Deber CLI runs.

Each run gets a directory under the configured runs root holding a JSONL
event log (one line per stage transition) and a summary.json written when
the run ends. Unlike the console output, these files are meant for
machines and for post-mortem inspection of failed builds.

Terminal output is left alone: the package build and the interactive shell
need the real stdout.
"""

from __future__ import annotations

import contextlib
import datetime
import json
import uuid
from pathlib import Path
from typing import IO, Any


class RunContext:
    """Context manager that creates a run directory and records events.

    Usage:
        with RunContext("build", runs_root) as run:
            run.log_event({"event": "stage.start", "stage": "build"})
            ...
    """

    def __init__(self, command: str, runs_root: Path, name: str = "") -> None:
        self.command = command
        self.runs_root = Path(runs_root)
        now_utc = datetime.datetime.now(datetime.timezone.utc)
        suffix = f"-{name}" if name else ""
        self.run_id = now_utc.strftime("%Y%m%dT%H%M%SZ") + f"-{command}{suffix}-" + uuid.uuid4().hex[:8]
        self.run_path = self.runs_root / self.run_id
        self.events_file: IO[str] | None = None
        self.summary: dict[str, Any] = {"command": command, "start_utc": now_utc.isoformat()}

    def __enter__(self) -> RunContext:
        self.run_path.mkdir(parents=True, exist_ok=True)
        self.events_file = (self.run_path / "events.jsonl").open("a", encoding="utf-8")
        self.log_event({"event": "run.start", "run_id": self.run_id})
        return self

    def log_event(self, event: dict[str, Any]) -> None:
        """Write a JSONL event with a timestamp."""
        if self.events_file is None:
            return
        payload = {"timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(), **event}
        self.events_file.write(json.dumps(payload, default=str) + "\n")
        self.events_file.flush()

    def write_summary(self, **kwargs: Any) -> None:
        self.summary.update(kwargs)
        (self.run_path / "summary.json").write_text(json.dumps(self.summary, indent=2, default=str))

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> bool | None:
        status = self.summary.get("status", "success")
        if exc is not None:
            status = "failed"
            self.summary["error"] = str(exc)

        self.summary["end_utc"] = datetime.datetime.now(datetime.timezone.utc).isoformat()
        self.summary["status"] = status
        self.write_summary()

        with contextlib.suppress(OSError):
            self.log_event({"event": "run.end", "status": status})

        if self.events_file is not None:
            self.events_file.close()
            self.events_file = None

        # Do not suppress exceptions
        return None
