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

"""Argument bundles for container runtime calls."""

from __future__ import annotations

from dataclasses import dataclass, field

from deber.mounts import Mount


@dataclass(frozen=True)
class ContainerCreateArgs:
    name: str
    image: str
    user: str
    mounts: list[Mount] = field(default_factory=list)


@dataclass(frozen=True)
class ContainerExecArgs:
    """A command to execute in a running container.

    Attributes:
        name: Container name.
        cmd: Shell command line, run with ``bash -c``. Ignored for
            interactive sessions, which always start a login shell.
        workdir: Working directory override; the image WORKDIR when empty.
        as_root: Run as root instead of the container user.
        interactive: Attach the local terminal with a pseudo-terminal.
        network: Attach the container to the network for this command only.
        skip: Do nothing; lets callers keep a fixed command list.
    """

    name: str
    cmd: str = ""
    workdir: str = ""
    as_root: bool = False
    interactive: bool = False
    network: bool = False
    skip: bool = False
