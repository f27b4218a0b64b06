"""VCS client contract and implementations."""

from git_auto_fetch.sync.vcs.base import (
    FetchError,
    RemoteNotFoundError,
    RepositoryNotFoundError,
    VcsClient,
    VcsError,
)
from git_auto_fetch.sync.vcs.git_client import GitVcsClient

__all__ = [
    "FetchError",
    "GitVcsClient",
    "RemoteNotFoundError",
    "RepositoryNotFoundError",
    "VcsClient",
    "VcsError",
]
