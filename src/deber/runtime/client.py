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

"""Side-effecting container runtime actions.

Containers are created detached from every network, so package builds run
offline unless a command explicitly asks for network access. Such commands
attach the container to the default bridge network for their duration only.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator
from typing import IO

import docker
import docker.types
from docker.errors import DockerException, NotFound

from deber.core.exceptions import ExecNonZeroExitError, RuntimeCallError
from deber.runtime.args import ContainerCreateArgs, ContainerExecArgs
from deber.runtime.shell import run_interactive

logger = logging.getLogger(__name__)

# Seconds the runtime waits for a graceful stop before killing the container
STOP_TIMEOUT = 3
NETWORK_NAME = "bridge"
SHELL = "bash"


def connect(version: str = "auto") -> docker.DockerClient:
    """Return a Docker client configured from the environment.

    The API version is negotiated with the daemon; exec with a working
    directory requires API 1.35 or newer.
    """
    try:
        return docker.from_env(version=version)
    except DockerException as exc:
        raise RuntimeCallError(message="Cannot connect to the Docker daemon", cause=exc) from exc


@contextlib.contextmanager
def runtime_call(description: str) -> Iterator[None]:
    """Translate Docker SDK failures into RuntimeCallError."""
    try:
        yield
    except DockerException as exc:
        raise RuntimeCallError(message=f"Failed to {description}", cause=exc) from exc


class Runtime:
    """Actions against the container runtime."""

    def __init__(self, client: docker.DockerClient, output: IO[bytes] | None = None) -> None:
        self.client = client
        self.output = output if output is not None else sys.stdout.buffer

    def container_create(self, args: ContainerCreateArgs) -> None:
        mounts = [
            docker.types.Mount(
                target=mount.target,
                source=mount.source,
                type=mount.type,
                read_only=mount.read_only,
            )
            for mount in args.mounts
        ]

        with runtime_call(f"create container {args.name}"):
            container = self.client.containers.create(
                args.image,
                name=args.name,
                user=args.user,
                mounts=mounts,
            )
            self.client.networks.get(NETWORK_NAME).disconnect(container)

        logger.debug("Created container %s from %s with %d mounts", args.name, args.image, len(mounts))

    def container_start(self, name: str) -> None:
        with runtime_call(f"start container {name}"):
            self.client.containers.get(name).start()

    def container_stop(self, name: str, timeout: int = STOP_TIMEOUT) -> None:
        with runtime_call(f"stop container {name}"):
            self.client.containers.get(name).stop(timeout=timeout)

    def container_remove(self, name: str, force: bool = False, missing_ok: bool = False) -> None:
        """Remove a container.

        Args:
            name: Container name.
            force: Kill the container first if it is running.
            missing_ok: Treat an already removed container as success.
        """
        with runtime_call(f"remove container {name}"):
            try:
                self.client.containers.get(name).remove(force=force)
            except NotFound:
                if not missing_ok:
                    raise
                logger.debug("Container %s already removed", name)

    def container_exec(self, args: ContainerExecArgs) -> None:
        """Execute a command in a running container.

        Output of non-interactive commands is streamed to the output stream
        as it arrives.

        Raises:
            RuntimeCallError: If a runtime call fails.
            ExecNonZeroExitError: If a non-interactive command exits non-zero.
        """
        if args.skip:
            return

        with runtime_call(f"execute in container {args.name}"):
            container = self.client.containers.get(args.name)
            with self._network(container, args.network):
                if args.interactive:
                    self._exec_interactive(container.id, args)
                else:
                    self._exec_streamed(container.id, args)

    def image_build(self, name: str, context: IO[bytes]) -> None:
        """Build an image tagged name from a tar build context.

        Build output is streamed; an error entry in the stream fails the
        build even though the API call itself succeeded.
        """
        with runtime_call(f"build image {name}"):
            stream = self.client.api.build(
                fileobj=context,
                custom_context=True,
                tag=name,
                rm=True,
                forcerm=True,
                pull=True,
                decode=True,
            )
            for entry in stream:
                if "error" in entry:
                    raise RuntimeCallError(message=f"Failed to build image {name}: {entry['error'].strip()}")
                text = entry.get("stream")
                if text:
                    self.output.write(text.encode("utf-8", "replace"))
                    self.output.flush()

    @contextlib.contextmanager
    def _network(self, container, enabled: bool) -> Iterator[None]:
        if not enabled:
            yield
            return

        network = self.client.networks.get(NETWORK_NAME)
        container.reload()
        attached = NETWORK_NAME in (container.attrs.get("NetworkSettings", {}).get("Networks") or {})
        if attached:
            yield
            return

        network.connect(container)
        logger.debug("Connected %s to %s", container.name, NETWORK_NAME)
        try:
            yield
        finally:
            network.disconnect(container)
            logger.debug("Disconnected %s from %s", container.name, NETWORK_NAME)

    def _exec_streamed(self, container_id: str, args: ContainerExecArgs) -> None:
        api = self.client.api
        exec_id = api.exec_create(
            container_id,
            [SHELL, "-c", args.cmd],
            stdout=True,
            stderr=True,
            user="root" if args.as_root else "",
            workdir=args.workdir or None,
        )["Id"]

        logger.debug("exec %s in %s: %s", exec_id[:12], args.name, args.cmd)
        for chunk in api.exec_start(exec_id, stream=True):
            self.output.write(chunk)
            self.output.flush()

        status = api.exec_inspect(exec_id).get("ExitCode")
        if status:
            raise ExecNonZeroExitError(
                message=f"Command exited with status {status}: {args.cmd}",
                command=args.cmd,
                status=status,
            )

    def _exec_interactive(self, container_id: str, args: ContainerExecArgs) -> None:
        api = self.client.api
        exec_id = api.exec_create(
            container_id,
            [SHELL],
            stdin=True,
            tty=True,
            user="root" if args.as_root else "",
            workdir=args.workdir or None,
        )["Id"]
        run_interactive(api, exec_id)
