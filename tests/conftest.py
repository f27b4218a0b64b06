"""Shared test fixtures."""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest
from git import Actor, Repo

from git_auto_fetch.sync.vcs import FetchError, RemoteNotFoundError, RepositoryNotFoundError

_AUTHOR = Actor("Test Author", "test@example.com")


def commit_file(repo: Repo, name: str, content: str) -> str:
    """Write ``name`` into the working tree, commit it and return the sha."""

    (Path(repo.working_dir) / name).write_text(content, "utf-8")
    repo.index.add([name])
    commit = repo.index.commit(f"Add {name}", author=_AUTHOR, committer=_AUTHOR)
    return commit.hexsha


@dataclass(slots=True)
class GitPair:
    """A local working copy with ``origin`` pointing at a second repository."""

    local: Repo
    remote: Repo

    @property
    def local_path(self) -> Path:
        return Path(self.local.working_dir)


@pytest.fixture()
def git_pair(tmp_path: Path) -> Iterator[GitPair]:
    remote = Repo.init(tmp_path / "remote")
    commit_file(remote, "README.md", "hello\n")
    remote.git.branch("-M", "main")
    remote.create_head("develop")
    local = Repo.init(tmp_path / "local")
    local.create_remote("origin", str(tmp_path / "remote"))
    pair = GitPair(local=local, remote=remote)
    try:
        yield pair
    finally:
        local.close()
        remote.close()


class FakeVcsClient:
    """In-memory VCS client that records calls and tracks parallelism."""

    def __init__(
        self,
        *,
        missing_paths: Sequence[Path] = (),
        missing_remotes: Sequence[str] = (),
        fetch_errors: dict[Path, str] | None = None,
        crash_paths: Sequence[Path] = (),
        raise_on_open: dict[Path, BaseException] | None = None,
        delay_seconds: float = 0.0,
        barrier: threading.Barrier | None = None,
    ) -> None:
        self.missing_paths = set(missing_paths)
        self.missing_remotes = set(missing_remotes)
        self.fetch_errors = fetch_errors or {}
        self.crash_paths = set(crash_paths)
        self.raise_on_open = raise_on_open or {}
        self.delay_seconds = delay_seconds
        self.barrier = barrier
        self.fetched: list[tuple[Path, str, tuple[str, ...]]] = []
        self.opened: list[Path] = []
        self.closed: list[Path] = []
        self.active = 0
        self.peak_active = 0
        self._lock = threading.Lock()

    def open(self, local_path: Path) -> Path:
        with self._lock:
            self.opened.append(local_path)
        if local_path in self.crash_paths:
            raise RuntimeError(f"boom in {local_path}")
        if local_path in self.raise_on_open:
            raise self.raise_on_open[local_path]
        if local_path in self.missing_paths:
            raise RepositoryNotFoundError(message=f"Path does not exist: {local_path}")
        return local_path

    def resolve_remote(self, handle: Path, remote_name: str) -> tuple[Path, str]:
        if remote_name in self.missing_remotes:
            raise RemoteNotFoundError(message=f"Remote {remote_name!r} is not configured")
        return handle, remote_name

    def close(self, handle: Path) -> None:
        with self._lock:
            self.closed.append(handle)

    def fetch(self, remote: tuple[Path, str], branches: Sequence[str]) -> None:
        local_path, remote_name = remote
        with self._lock:
            self.active += 1
            self.peak_active = max(self.peak_active, self.active)
        try:
            if self.barrier is not None:
                self.barrier.wait()
            if self.delay_seconds:
                time.sleep(self.delay_seconds)
            if local_path in self.fetch_errors:
                raise FetchError(
                    message="git fetch failed with status 128",
                    stderr=self.fetch_errors[local_path],
                    status=128,
                )
            with self._lock:
                self.fetched.append((local_path, remote_name, tuple(branches)))
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture()
def fake_vcs() -> type[FakeVcsClient]:
    return FakeVcsClient
