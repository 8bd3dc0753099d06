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

"""Build stage functions.

Each stage re-checks the current image or container state, acts only when
that state differs from the desired one, and returns a StepResult. Any
failure is raised as a DeberError and ends the pipeline.
"""

from __future__ import annotations

import logging
import os

from deber.build.archive import archive_directory
from deber.build.tarball import resolve_tarball
from deber.build.types import StepContext, StepResult
from deber.core.exceptions import BuildFailedError, HostFilesystemError
from deber.core.spinner import activity_spinner
from deber.duration import format_duration
from deber.mounts import desired_mounts, mounts_equal, resolve_extra_packages
from deber.naming import CONTAINER_ARCHIVE_DIR, base_distribution
from deber.recipe import build_context, render_recipe
from deber.runtime.args import ContainerCreateArgs, ContainerExecArgs

logger = logging.getLogger(__name__)

NO_TESTS_ENV = "DEB_BUILD_OPTIONS='nocheck nodoc notest'"


def build_image(ctx: StepContext) -> StepResult:
    """Build the image unless a fresh enough one exists."""
    image = ctx.naming.image
    if ctx.inspector.image_exists(image):
        age = ctx.inspector.image_age(image)
        if age < ctx.options.max_age:
            return StepResult.skipped(f"image is {format_duration(age)} old")
        logger.debug("Image %s is %s old, rebuilding", image, format_duration(age))

    tag = base_distribution(ctx.naming.target)
    with activity_spinner(ctx.console, f"Looking up {tag} on Docker Hub"):
        repo = ctx.tags.match_repo(ctx.options.base_repos, tag)

    dockerfile = render_recipe(
        repo,
        tag,
        ctx.naming.target,
        template=ctx.options.recipe_template,
        packages=ctx.options.image_packages,
    )

    ctx.console.drop()
    ctx.runtime.image_build(image, build_context(dockerfile))

    if not ctx.inspector.image_exists(image):
        raise BuildFailedError(message=f"Image {image} not found after build")
    return StepResult.done()


def create_container(ctx: StepContext) -> StepResult:
    """Create the container, recreating it when its mounts are stale."""
    naming = ctx.naming
    name = naming.container
    mounts = desired_mounts(naming, resolve_extra_packages(ctx.options.extra_packages))

    if ctx.inspector.container_exists(name):
        if mounts_equal(ctx.inspector.container_mounts(name), mounts):
            return StepResult.skipped("container exists")

        logger.debug("Mounts of %s changed, recreating", name)
        if ctx.inspector.container_running(name):
            ctx.runtime.container_stop(name)
        ctx.runtime.container_remove(name)

    for mount in mounts:
        if os.path.exists(mount.source):
            continue
        try:
            os.makedirs(mount.source)
        except OSError as exc:
            raise HostFilesystemError(message=f"Cannot create {mount.source}", cause=exc) from exc

    ctx.runtime.container_create(
        ContainerCreateArgs(
            name=name,
            image=naming.image,
            user=f"{os.getuid()}:{os.getgid()}",
            mounts=mounts,
        )
    )
    return StepResult.done()


def start_container(ctx: StepContext) -> StepResult:
    name = ctx.naming.container
    if ctx.inspector.container_running(name):
        return StepResult.skipped("container running")

    ctx.runtime.container_start(name)
    return StepResult.done()


def shell(ctx: StepContext) -> StepResult:
    ctx.console.drop()
    ctx.runtime.container_exec(
        ContainerExecArgs(
            name=ctx.naming.container,
            as_root=True,
            interactive=True,
            network=True,
        )
    )
    return StepResult.done()


def tarball(ctx: StepContext) -> StepResult:
    return resolve_tarball(ctx.naming)


def install_depends(ctx: StepContext) -> StepResult:
    name = ctx.naming.container
    no_archive = not ctx.options.extra_packages
    commands = [
        ContainerExecArgs(
            name=name,
            cmd="dpkg-scanpackages -m . > Packages",
            workdir=CONTAINER_ARCHIVE_DIR,
            as_root=True,
            skip=no_archive,
        ),
        ContainerExecArgs(name=name, cmd="apt-get update", as_root=True, network=True),
        ContainerExecArgs(name=name, cmd="apt-get build-dep ./", as_root=True, network=True),
    ]

    ctx.console.drop()
    for args in commands:
        ctx.runtime.container_exec(args)
    return StepResult.done()


def package(ctx: StepContext) -> StepResult:
    cmd = f"dpkg-buildpackage {ctx.options.dpkg_flags}".strip()
    if not ctx.options.tests:
        cmd = f"{NO_TESTS_ENV} {cmd}"

    ctx.console.drop()
    ctx.runtime.container_exec(
        ContainerExecArgs(name=ctx.naming.container, cmd=cmd, network=ctx.options.network)
    )
    return StepResult.done()


def lint(ctx: StepContext) -> StepResult:
    if not ctx.options.lint:
        return StepResult.skipped("--no-lintian")

    name = ctx.naming.container
    commands = [
        ContainerExecArgs(name=name, cmd="debi --with-depends", as_root=True, network=True),
        ContainerExecArgs(name=name, cmd="debc"),
        ContainerExecArgs(name=name, cmd=f"lintian {ctx.options.lintian_flags}".strip()),
    ]

    ctx.console.drop()
    for args in commands:
        ctx.runtime.container_exec(args)
    return StepResult.done()


def archive(ctx: StepContext) -> StepResult:
    report = archive_directory(ctx.naming.build_dir, ctx.naming.packages_version_dir)
    for entry in report.files:
        ctx.console.extra(entry.name)
        if entry.written:
            ctx.console.done()
        else:
            ctx.console.skipped(entry.reason)

    if not report.written:
        return StepResult.skipped("nothing changed")
    return StepResult.done()


def stop_container(ctx: StepContext) -> StepResult:
    name = ctx.naming.container
    if not ctx.inspector.container_running(name):
        return StepResult.skipped("container not running")

    ctx.runtime.container_stop(name)
    return StepResult.done()


def remove_container(ctx: StepContext) -> StepResult:
    name = ctx.naming.container
    if not ctx.inspector.container_exists(name):
        return StepResult.skipped("container absent")

    ctx.runtime.container_remove(name)
    return StepResult.done()
