"""Version-control client contract consumed by the sync worker."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol


@dataclass(slots=True)
class VcsError(Exception):
    """Base VCS error; always reported as a task failure, never a crash."""

    message: str
    code: str = "vcs_error"

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class RepositoryNotFoundError(VcsError):
    """Local path does not hold a usable working copy."""

    code: str = "not_found"


@dataclass(slots=True)
class RemoteNotFoundError(VcsError):
    """Named remote is not configured in the working copy."""

    code: str = "remote_not_found"


@dataclass(slots=True)
class FetchError(VcsError):
    """The fetch itself failed (network, auth, protocol, unknown ref)."""

    code: str = "fetch_failed"
    stderr: str | None = None
    status: int | str | None = None

    @property
    def cause(self) -> str:
        """Best available description of what went wrong on the git side."""

        if self.stderr and self.stderr.strip():
            return self.stderr.strip()
        return self.message


class VcsClient(Protocol):
    """Open a working copy, resolve a remote and fetch branches from it.

    Every call may block for an arbitrary time; implementations do not retry.
    """

    def open(self, local_path: Path) -> Any:
        """Open the working copy at ``local_path`` or raise ``RepositoryNotFoundError``."""

    def resolve_remote(self, handle: Any, remote_name: str) -> Any:
        """Return the remote handle or raise ``RemoteNotFoundError``."""

    def fetch(self, remote: Any, branches: Sequence[str]) -> None:
        """Fetch ``branches`` from ``remote`` or raise ``FetchError``."""

    def close(self, handle: Any) -> None:
        """Release resources held by a handle returned from ``open``."""
