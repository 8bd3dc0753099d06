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

"""Dockerfile rendering for build images.

The bundled template installs the Debian build toolchain on top of an
official base image, registers the local archive used for extra packages
and keeps the container idle so commands can be executed in it. A user
template set in the configuration replaces it entirely and receives the
same variables:

    repo, tag         base image reference
    distribution      standardized target, e.g. bookworm-backports
    backports         mirror/components mapping, or None
    packages          packages to install
    archive_dir       container path of the local archive
    source_dir        container path of the source tree
"""

from __future__ import annotations

import io
import tarfile
import time
from collections.abc import Sequence
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from deber.core.exceptions import ConfigError
from deber.naming import BACKPORTS_SUFFIX, CONTAINER_ARCHIVE_DIR, CONTAINER_SOURCE_DIR

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
DEFAULT_TEMPLATE = "Dockerfile.j2"

DEFAULT_PACKAGES = ("build-essential", "devscripts", "debhelper", "lintian", "fakeroot", "dpkg-dev")

BACKPORTS_MIRRORS = {
    "debian": {"mirror": "http://deb.debian.org/debian", "components": "main"},
    "ubuntu": {"mirror": "http://archive.ubuntu.com/ubuntu", "components": "main universe"},
}


def _environment(directory: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(directory)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


def render_recipe(
    repo: str,
    tag: str,
    distribution: str,
    template: Path | None = None,
    packages: Sequence[str] = (),
) -> str:
    """Render the Dockerfile for an image based on repo:tag.

    Args:
        repo: Official base repository, e.g. "debian".
        tag: Base image tag, the distribution codename.
        distribution: Standardized target the image builds for.
        template: Optional user template replacing the bundled one.
        packages: Packages to install; the build toolchain when empty.

    Raises:
        ConfigError: If the template cannot be loaded or rendered.
    """
    if template is not None:
        template = Path(template).expanduser()
        env = _environment(template.parent)
        name = template.name
    else:
        env = _environment(TEMPLATES_DIR)
        name = DEFAULT_TEMPLATE

    backports = None
    if distribution.endswith(BACKPORTS_SUFFIX):
        backports = BACKPORTS_MIRRORS.get(repo)

    try:
        return env.get_template(name).render(
            repo=repo,
            tag=tag,
            distribution=distribution,
            backports=backports,
            packages=list(packages or DEFAULT_PACKAGES),
            archive_dir=CONTAINER_ARCHIVE_DIR,
            source_dir=CONTAINER_SOURCE_DIR,
        )
    except TemplateError as exc:
        raise ConfigError(message=f"Cannot render Dockerfile template {name}", cause=exc) from exc


def build_context(dockerfile: str) -> io.BytesIO:
    """Return a tar build context holding only the Dockerfile."""
    data = dockerfile.encode("utf-8")
    buffer = io.BytesIO()

    info = tarfile.TarInfo("Dockerfile")
    info.size = len(data)
    info.mtime = int(time.time())
    with tarfile.open(fileobj=buffer, mode="w") as tar:
        tar.addfile(info, io.BytesIO(data))

    buffer.seek(0)
    return buffer
