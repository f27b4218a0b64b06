"""GitPython-backed implementation of the VCS client."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from git import Remote, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from git_auto_fetch.sync.vcs.base import FetchError, RemoteNotFoundError, RepositoryNotFoundError

logger = logging.getLogger(__name__)


class GitVcsClient:
    """Runs ``git fetch`` through GitPython; one blocking call per operation."""

    def open(self, local_path: Path) -> Repo:
        try:
            return Repo(local_path)
        except NoSuchPathError as error:
            raise RepositoryNotFoundError(
                message=f"Path does not exist: {local_path}",
            ) from error
        except InvalidGitRepositoryError as error:
            raise RepositoryNotFoundError(
                message=f"Not a git working copy: {local_path}",
            ) from error

    def resolve_remote(self, handle: Repo, remote_name: str) -> Remote:
        try:
            return handle.remote(remote_name)
        except ValueError as error:
            raise RemoteNotFoundError(
                message=f"Remote {remote_name!r} is not configured in {handle.working_dir}",
            ) from error

    def close(self, handle: Repo) -> None:
        handle.close()

    def fetch(self, remote: Remote, branches: Sequence[str]) -> None:
        if not branches:
            return
        logger.debug("git fetch %s %s", remote.name, " ".join(branches))
        try:
            remote.fetch(refspec=list(branches))
        except GitCommandError as error:
            raise FetchError(
                message=f"git fetch {remote.name} failed with status {error.status}",
                stderr=_as_text(error.stderr),
                status=error.status,
            ) from error


def _as_text(value: str | bytes | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
