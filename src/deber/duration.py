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

"""Duration string parsing for the image max-age setting."""

from __future__ import annotations

import re
from datetime import timedelta

# A duration is one or more <number><unit> components, e.g. "1d12h".
DURATION_PATTERN = re.compile(r"^(?:\d+[smhdw])+$", re.IGNORECASE)
COMPONENT_PATTERN = re.compile(r"(\d+)([smhdw])", re.IGNORECASE)

UNIT_SECONDS: dict[str, int] = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
}


def parse_duration(value: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Supported formats:
        30m    -> 30 minutes
        336h   -> 14 days
        14d    -> 14 days
        2w     -> 14 days
        1d12h  -> 36 hours

    Raises:
        ValueError: If the format is invalid.
    """
    text = value.strip().replace(" ", "")
    if not DURATION_PATTERN.match(text):
        raise ValueError(f"Invalid duration format: '{value}'. Expected format like '14d', '336h', '1d12h'.")

    seconds = sum(
        int(amount) * UNIT_SECONDS[unit.lower()]
        for amount, unit in COMPONENT_PATTERN.findall(text)
    )
    return timedelta(seconds=seconds)


def format_duration(delta: timedelta) -> str:
    """Render a timedelta in the coarse form used in log lines (e.g. "3d4h")."""
    total = int(delta.total_seconds())
    if total <= 0:
        return "0s"

    parts: list[str] = []
    for unit in ("d", "h", "m", "s"):
        amount, total = divmod(total, UNIT_SECONDS[unit])
        if amount:
            parts.append(f"{amount}{unit}")
        if len(parts) == 2:
            break
    return "".join(parts)
