"""Sync orchestrator: runs one worker per task on a bounded thread pool."""

from __future__ import annotations

import logging
import queue
import threading
import traceback
from collections import Counter
from collections.abc import Callable, Sequence

from git_auto_fetch.sync.models import ProcessResult, SyncOutcome, TaskDescriptor, UnitCrash
from git_auto_fetch.sync.worker import SyncWorker

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class SyncOrchestrator:
    """Fans task descriptors out to pool threads and joins all outcomes.

    Tasks are queued in input order and picked up FIFO by at most
    ``max_workers`` threads. ``execute`` returns only after every task has
    produced an outcome or crashed; there is no cancellation and no timeout.
    """

    def __init__(
        self,
        *,
        worker: SyncWorker,
        max_workers: int = DEFAULT_MAX_WORKERS,
        on_outcome: Callable[[SyncOutcome], None] | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}.")
        self.worker = worker
        self.max_workers = max_workers
        self._on_outcome = on_outcome or (lambda _outcome: None)

    def execute(self, tasks: Sequence[TaskDescriptor]) -> ProcessResult:
        result = ProcessResult()
        if not tasks:
            logger.info("No repositories configured")
            result.finalize()
            return result

        task_q: queue.Queue[TaskDescriptor | None] = queue.Queue()
        for task in tasks:
            task_q.put(task)
        pool_size = min(self.max_workers, len(tasks))
        for _ in range(pool_size):
            task_q.put(None)

        logger.info("Syncing %d repositories with %d worker thread(s)", len(tasks), pool_size)
        threads = [
            threading.Thread(
                target=self._drain,
                args=(task_q, result),
                name=f"sync-worker-{index}",
            )
            for index in range(pool_size)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self._record_unreported(tasks, result)
        result.finalize()
        logger.info(
            "Sync finished: %d succeeded, %d failed, %d crashed",
            len(result.succeeded),
            len(result.failures),
            len(result.crashes),
        )
        return result

    def _drain(self, task_q: queue.Queue[TaskDescriptor | None], result: ProcessResult) -> None:
        while True:
            task = task_q.get()
            if task is None:
                return
            try:
                outcome = self.worker.run(task)
            except BaseException as exc:  # noqa: BLE001
                logger.exception("Sync worker crashed for %s", task.identity)
                result.record_crash(
                    UnitCrash(
                        local_path=task.local_path,
                        error=f"{type(exc).__name__}: {exc}",
                        traceback=traceback.format_exc(),
                    ),
                )
                continue
            result.record_outcome(outcome)
            try:
                self._on_outcome(outcome)
            except Exception:  # noqa: BLE001
                logger.exception("Outcome callback failed for %s", task.identity)

    def _record_unreported(self, tasks: Sequence[TaskDescriptor], result: ProcessResult) -> None:
        """Every task ends with exactly one outcome or crash; fill in any gap."""

        reported = Counter(outcome.local_path for outcome in result.outcomes)
        reported.update(crash.local_path for crash in result.crashes)
        for task in tasks:
            if reported[task.local_path] > 0:
                reported[task.local_path] -= 1
                continue
            logger.error("No outcome was reported for %s", task.identity)
            result.record_crash(
                UnitCrash(
                    local_path=task.local_path,
                    error="Worker thread exited without reporting an outcome",
                ),
            )
