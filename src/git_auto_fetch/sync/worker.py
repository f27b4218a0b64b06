"""Sync worker: fetches one repository and reports a single outcome."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from git_auto_fetch.sync.failure_classifier import classify_fetch_failure
from git_auto_fetch.sync.models import FailureKind, SyncOutcome, TaskDescriptor
from git_auto_fetch.sync.vcs import (
    FetchError,
    RemoteNotFoundError,
    RepositoryNotFoundError,
    VcsClient,
    VcsError,
)

logger = logging.getLogger(__name__)


class SyncWorker:
    """Executes task descriptors against a VCS client.

    VCS errors become failure outcomes. Anything else the client raises is
    left to propagate so the orchestrator can tell a crash from a failed task.
    """

    def __init__(
        self,
        *,
        client: VcsClient,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self._clock = clock

    def run(self, task: TaskDescriptor) -> SyncOutcome:
        started = self._clock()
        if not task.branches:
            logger.debug("No branches configured for %s; nothing to fetch", task.identity)
            return SyncOutcome.success(task)

        logger.debug(
            "Fetching %s from %s in %s",
            ", ".join(task.branches),
            task.remote_name,
            task.identity,
        )
        try:
            handle = self.client.open(task.local_path)
        except RepositoryNotFoundError as error:
            return self._failed(task, FailureKind.NOT_FOUND, error, started=started)

        try:
            return self._fetch(task, handle, started=started)
        finally:
            self.client.close(handle)

    def _fetch(self, task: TaskDescriptor, handle: Any, *, started: float) -> SyncOutcome:
        try:
            remote = self.client.resolve_remote(handle, task.remote_name)
        except RemoteNotFoundError as error:
            return self._failed(task, FailureKind.REMOTE_NOT_FOUND, error, started=started)

        try:
            self.client.fetch(remote, task.branches)
        except FetchError as error:
            classification = classify_fetch_failure(error.cause)
            logger.warning(
                "Fetch failed for %s (%s, status %s): %s",
                task.identity,
                classification.failure_class.value,
                error.status,
                error.cause,
            )
            return SyncOutcome.failure(
                task,
                FailureKind.FETCH_FAILED,
                reason=error.cause,
                fetch_failure_class=classification.failure_class,
                elapsed_seconds=self._clock() - started,
            )

        elapsed = self._clock() - started
        logger.info("Fetched %s in %.2fs", task.identity, elapsed)
        return SyncOutcome.success(task, elapsed_seconds=elapsed)

    def _failed(
        self,
        task: TaskDescriptor,
        kind: FailureKind,
        error: VcsError,
        *,
        started: float,
    ) -> SyncOutcome:
        logger.warning("Sync of %s failed (%s): %s", task.identity, error.code, error)
        return SyncOutcome.failure(
            task,
            kind,
            reason=str(error),
            elapsed_seconds=self._clock() - started,
        )
