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

"""Deber-specific exception types with associated exit codes.

Every failure a build stage can report is one of the subclasses below. The
set is closed: callers may dispatch on ``error.kind`` instead of isinstance
chains. Errors raised on top of a runtime, network or filesystem failure keep
the original exception in ``cause``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Enumeration of every error kind Deber can raise."""

    CONFIG = "config"
    INSPECT = "inspect"
    RUNTIME_CALL = "runtime_call"
    HOST_FILESYSTEM = "host_filesystem"
    TAG_LOOKUP = "tag_lookup"
    DIST_NOT_FOUND = "dist_not_found"
    BUILD_FAILED = "build_failed"
    AMBIGUOUS_TARBALL = "ambiguous_tarball"
    MISSING_TARBALL = "missing_tarball"
    INVALID_EXTRA_PACKAGE = "invalid_extra_package"
    EXEC_NON_ZERO_EXIT = "exec_non_zero_exit"


@dataclass
class DeberError(Exception):
    """Base class for Deber errors with an exit code."""

    kind: ClassVar[ErrorKind]

    message: str = "An error occurred"
    exit_code: int = field(default=1)
    cause: BaseException | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.cause is not None:
            self.__cause__ = self.cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


@dataclass
class ConfigError(DeberError):
    kind: ClassVar[ErrorKind] = ErrorKind.CONFIG
    exit_code: int = field(default=2)


@dataclass
class InspectError(DeberError):
    """Querying the container runtime for image or container state failed."""

    kind: ClassVar[ErrorKind] = ErrorKind.INSPECT
    exit_code: int = field(default=3)


@dataclass
class RuntimeCallError(DeberError):
    """A side-effecting container runtime call failed."""

    kind: ClassVar[ErrorKind] = ErrorKind.RUNTIME_CALL
    exit_code: int = field(default=3)


@dataclass
class HostFilesystemError(DeberError):
    kind: ClassVar[ErrorKind] = ErrorKind.HOST_FILESYSTEM
    exit_code: int = field(default=4)


@dataclass
class TagLookupError(DeberError):
    """The remote base-image tag listing could not be fetched."""

    kind: ClassVar[ErrorKind] = ErrorKind.TAG_LOOKUP
    exit_code: int = field(default=5)


@dataclass
class DistNotFoundError(DeberError):
    """No base image repository carries a tag for the target distribution."""

    kind: ClassVar[ErrorKind] = ErrorKind.DIST_NOT_FOUND
    exit_code: int = field(default=5)
    distribution: str = ""


@dataclass
class BuildFailedError(DeberError):
    """The image is still missing after the build call reported success."""

    kind: ClassVar[ErrorKind] = ErrorKind.BUILD_FAILED
    exit_code: int = field(default=6)


@dataclass
class AmbiguousTarballError(DeberError):
    kind: ClassVar[ErrorKind] = ErrorKind.AMBIGUOUS_TARBALL
    exit_code: int = field(default=7)
    candidates: list[str] = field(default_factory=list)


@dataclass
class MissingTarballError(DeberError):
    kind: ClassVar[ErrorKind] = ErrorKind.MISSING_TARBALL
    exit_code: int = field(default=7)


@dataclass
class InvalidExtraPackageError(DeberError):
    """An extra package path is neither a directory nor a .deb file."""

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_EXTRA_PACKAGE
    exit_code: int = field(default=2)
    path: str = ""


@dataclass
class ExecNonZeroExitError(DeberError):
    """A non-interactive command inside the container exited non-zero."""

    kind: ClassVar[ErrorKind] = ErrorKind.EXEC_NON_ZERO_EXIT
    exit_code: int = field(default=8)
    command: str = ""
    status: int = 0
