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

"""Docker Hub tag listing for official base image repositories.

Used to decide which official image (debian or ubuntu) provides a base for
the target distribution. The listing endpoint is paginated:

    GET {base}/{repo}/tags?page_size=100[&name=bookworm]
    -> {"count": N, "next": url-or-null, "results": [{"name": "bookworm"}, ...]}
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

import requests

from deber.core.exceptions import DistNotFoundError, TagLookupError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://hub.docker.com/v2/repositories/library"
DEFAULT_PAGE_SIZE = 100


class TagLookup:
    """Client for the Docker Hub tag listing API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
        timeout: int = 30,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.page_size = page_size

    def iter_tags(self, repo: str, name: str | None = None) -> Iterator[str]:
        """Yield every tag of repo, following pagination.

        Args:
            repo: Official repository name, e.g. "debian".
            name: Optional substring filter applied by the registry.

        Raises:
            TagLookupError: On transport errors, non-200 responses or
                malformed payloads.
        """
        url: str | None = f"{self.base_url}/{repo}/tags"
        params: dict[str, str | int] | None = {"page_size": self.page_size}
        if name:
            params["name"] = name

        while url:
            try:
                resp = self.session.get(url, params=params, timeout=self.timeout)
                resp.raise_for_status()
                payload = resp.json()
            except requests.RequestException as exc:
                raise TagLookupError(message=f"Failed to list tags of {repo}", cause=exc) from exc
            except ValueError as exc:
                raise TagLookupError(message=f"Malformed tag listing for {repo}", cause=exc) from exc

            if not isinstance(payload, dict):
                raise TagLookupError(message=f"Malformed tag listing for {repo}")

            for result in payload.get("results") or []:
                tag = result.get("name") if isinstance(result, dict) else None
                if tag:
                    yield tag

            # The next link already carries the query string.
            url = payload.get("next")
            params = None

    def match_repo(self, repos: Sequence[str], tag: str) -> str:
        """Return the first repository in repos that carries tag.

        Raises:
            DistNotFoundError: If no repository has the tag.
            TagLookupError: If a listing cannot be fetched.
        """
        for repo in repos:
            logger.debug("Looking up tag %s in %s", tag, repo)
            if any(candidate == tag for candidate in self.iter_tags(repo, name=tag)):
                return repo

        raise DistNotFoundError(
            message=f"Distribution {tag} not found in {', '.join(repos)}",
            distribution=tag,
        )
