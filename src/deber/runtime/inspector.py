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

"""Image and container state queries.

Every stage re-checks the current state before acting and treats "already
in the desired state" as a skip. Nothing here is cached: containers and
images can be removed by hand or by other tools between two invocations,
or even between two stages.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Callable

import docker
from docker.errors import DockerException, NotFound

from deber.core.exceptions import InspectError
from deber.mounts import Mount

logger = logging.getLogger(__name__)

CONTAINER_RUNNING = "running"

# Docker reports RFC 3339 timestamps with nanoseconds, e.g.
# 2024-05-01T10:20:30.123456789Z, which datetime cannot parse directly.
_TIMESTAMP_PATTERN = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})?$"
)


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse a Docker timestamp into an aware datetime."""
    match = _TIMESTAMP_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Unrecognized timestamp: {value!r}")

    frac = (match.group("frac") or "")[:6].ljust(6, "0")
    tz = match.group("tz") or "Z"
    if tz == "Z":
        tz = "+00:00"
    return datetime.datetime.fromisoformat(f"{match.group('base')}.{frac}{tz}")


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class StateInspector:
    """Read-only view of image and container state."""

    def __init__(
        self,
        client: docker.DockerClient,
        now: Callable[[], datetime.datetime] = _utcnow,
    ) -> None:
        self.client = client
        self.now = now

    def image_exists(self, name: str) -> bool:
        """Return True if an image tagged name exists."""
        try:
            images = self.client.images.list(name=name)
        except DockerException as exc:
            raise InspectError(message=f"Failed to list images matching {name}", cause=exc) from exc

        return any(name in (image.tags or []) for image in images)

    def image_age(self, name: str) -> datetime.timedelta:
        """Return how long ago the image was created.

        Raises:
            InspectError: If the image is missing or cannot be inspected.
        """
        try:
            image = self.client.images.get(name)
        except NotFound as exc:
            raise InspectError(message=f"Image {name} not found", cause=exc) from exc
        except DockerException as exc:
            raise InspectError(message=f"Failed to inspect image {name}", cause=exc) from exc

        try:
            created = parse_timestamp(image.attrs["Created"])
        except (KeyError, ValueError) as exc:
            raise InspectError(message=f"Image {name} has no usable creation time", cause=exc) from exc

        return self.now() - created

    def container_exists(self, name: str) -> bool:
        """Return True if a container with exactly this name exists."""
        try:
            # The name filter is a substring match; compare names exactly.
            containers = self.client.containers.list(all=True, filters={"name": name})
        except DockerException as exc:
            raise InspectError(message=f"Failed to list containers matching {name}", cause=exc) from exc

        return any(container.name == name for container in containers)

    def container_running(self, name: str) -> bool:
        """Return True only when the container is in the running state.

        Created, exited, restarting, paused and dead containers, as well as
        missing ones, are not running.
        """
        try:
            container = self.client.containers.get(name)
        except NotFound:
            return False
        except DockerException as exc:
            raise InspectError(message=f"Failed to inspect container {name}", cause=exc) from exc

        state = container.attrs.get("State") or {}
        return state.get("Status") == CONTAINER_RUNNING

    def container_stopped(self, name: str) -> bool:
        return self.container_exists(name) and not self.container_running(name)

    def container_mounts(self, name: str) -> list[Mount]:
        """Return the mounts an existing container was created with."""
        try:
            container = self.client.containers.get(name)
        except DockerException as exc:
            raise InspectError(message=f"Failed to inspect container {name}", cause=exc) from exc

        host_config = container.attrs.get("HostConfig") or {}
        mounts = [Mount.from_attrs(entry) for entry in host_config.get("Mounts") or []]
        logger.debug("Container %s has %d mounts", name, len(mounts))
        return mounts
