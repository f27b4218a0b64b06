"""Domain models for repository sync tasks and their outcomes."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path


class FailureKind(str, Enum):
    """Reason a single sync task did not succeed."""

    NOT_FOUND = "not_found"
    REMOTE_NOT_FOUND = "remote_not_found"
    FETCH_FAILED = "fetch_failed"


class FetchFailureClass(str, Enum):
    """Normalized cause of a failed fetch, for diagnostics only."""

    NETWORK = "network"
    AUTH = "auth"
    PROTOCOL = "protocol"
    UNKNOWN_REF = "unknown_ref"
    UNKNOWN = "unknown"


class ExitCode(IntEnum):
    """Process exit status of one sync run."""

    OK = 0
    TASK_FAILED = 1
    CONFIG_ERROR = 3
    UNIT_CRASH = 4


@dataclass(frozen=True, slots=True)
class TaskDescriptor:
    """One repository to fetch: working copy path, remote and branches."""

    local_path: Path
    remote_name: str
    branches: tuple[str, ...] = ()

    @property
    def identity(self) -> str:
        return str(self.local_path)


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    """Result of one task; a missing ``failure_kind`` means success."""

    local_path: Path
    failure_kind: FailureKind | None = None
    reason: str | None = None
    fetch_failure_class: FetchFailureClass | None = None
    elapsed_seconds: float = 0.0

    @classmethod
    def success(cls, task: TaskDescriptor, *, elapsed_seconds: float = 0.0) -> SyncOutcome:
        return cls(local_path=task.local_path, elapsed_seconds=elapsed_seconds)

    @classmethod
    def failure(
        cls,
        task: TaskDescriptor,
        kind: FailureKind,
        *,
        reason: str,
        fetch_failure_class: FetchFailureClass | None = None,
        elapsed_seconds: float = 0.0,
    ) -> SyncOutcome:
        return cls(
            local_path=task.local_path,
            failure_kind=kind,
            reason=reason,
            fetch_failure_class=fetch_failure_class,
            elapsed_seconds=elapsed_seconds,
        )

    @property
    def ok(self) -> bool:
        return self.failure_kind is None

    def describe(self) -> str:
        """Render a one-line diagnostic naming the repository."""

        if self.failure_kind is None:
            return f"OK      {self.local_path} ({self.elapsed_seconds:.2f}s)"
        label = self.failure_kind.value
        if self.fetch_failure_class is not None:
            label = f"{label}/{self.fetch_failure_class.value}"
        return f"FAILED  {self.local_path} [{label}]: {self.reason}"


@dataclass(frozen=True, slots=True)
class UnitCrash:
    """An execution unit raised instead of returning an outcome."""

    local_path: Path
    error: str
    traceback: str = ""

    def describe(self) -> str:
        return f"CRASHED {self.local_path}: {self.error}"


@dataclass(slots=True)
class ProcessResult:
    """Aggregate of all outcomes of one orchestrator run.

    Outcomes arrive from pool threads in completion order, so every write goes
    through ``_lock``. Once ``finalize`` is called the result is read-only.
    """

    outcomes: list[SyncOutcome] = field(default_factory=list)
    crashes: list[UnitCrash] = field(default_factory=list)
    finalized: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_outcome(self, outcome: SyncOutcome) -> None:
        with self._lock:
            self._ensure_open()
            self.outcomes.append(outcome)

    def record_crash(self, crash: UnitCrash) -> None:
        with self._lock:
            self._ensure_open()
            self.crashes.append(crash)

    def finalize(self) -> None:
        with self._lock:
            self.finalized = True

    @property
    def succeeded(self) -> list[SyncOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failures(self) -> list[SyncOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def fatal(self) -> bool:
        return bool(self.crashes)

    @property
    def ok(self) -> bool:
        """True when no task failed and no unit crashed (vacuously for no tasks)."""

        return not self.fatal and not self.failures

    @property
    def exit_code(self) -> ExitCode:
        if self.fatal:
            return ExitCode.UNIT_CRASH
        if self.failures:
            return ExitCode.TASK_FAILED
        return ExitCode.OK

    def _ensure_open(self) -> None:
        if self.finalized:
            raise RuntimeError("Process result is finalized; no more outcomes can be recorded.")
