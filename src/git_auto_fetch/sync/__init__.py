"""Parallel fetch orchestration for configured repositories.

A run turns the configured repository list into ``TaskDescriptor`` values,
hands them to ``SyncOrchestrator`` and reads the overall status from the
returned ``ProcessResult``:

- ``SyncWorker`` executes one descriptor against a ``VcsClient`` and always
  returns a ``SyncOutcome``; VCS-level problems are data, not exceptions.
- ``SyncOrchestrator`` runs workers on a bounded thread pool, waits for every
  task and records anything a worker raises as a ``UnitCrash``.
- A crash is fatal to the process, a failed fetch is not: siblings still run
  and every failure is reported at the end.
"""
