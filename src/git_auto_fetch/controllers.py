"""Controller for the sync CLI command."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from git_auto_fetch.config import ConfigError, SyncSettings, TaskConfig, load_task_config
from git_auto_fetch.sync.models import ExitCode, ProcessResult, SyncOutcome, UnitCrash
from git_auto_fetch.sync.orchestrator import SyncOrchestrator
from git_auto_fetch.sync.vcs import GitVcsClient, VcsClient
from git_auto_fetch.sync.worker import SyncWorker

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncRunCommand:
    """CLI input for one sync run; ``None`` falls back to the environment."""

    config_file: Path | None = None
    max_workers: int | None = None
    log_level: str | None = None


@dataclass(slots=True)
class SyncRunResult:
    """Rendered report and process exit status."""

    lines: list[str] = field(default_factory=list)
    exit_code: ExitCode = ExitCode.OK


class SyncCliController:
    """Wires settings, config, VCS client and orchestrator for the CLI."""

    def __init__(self, *, client: VcsClient | None = None) -> None:
        self._client = client

    def resolve_settings(self, command: SyncRunCommand) -> SyncSettings:
        settings = SyncSettings.from_env()
        if command.config_file is not None:
            settings = replace(settings, config_file=command.config_file)
        if command.max_workers is not None:
            settings = replace(settings, max_workers=command.max_workers)
        if command.log_level is not None:
            settings = replace(settings, log_level=command.log_level.lower())
        settings.validate()
        return settings

    def run(self, command: SyncRunCommand, settings: SyncSettings | None = None) -> SyncRunResult:
        try:
            settings = settings or self.resolve_settings(command)
            if settings.config_file is None:
                raise ConfigError("A config file is required.")
            config = load_task_config(settings.config_file)
        except ConfigError as error:
            logger.error("Configuration error: %s", error)
            return SyncRunResult(
                lines=[f"Configuration error: {error}"],
                exit_code=ExitCode.CONFIG_ERROR,
            )
        logger.debug("Loaded config %s", config)

        orchestrator = SyncOrchestrator(
            worker=SyncWorker(client=self._client or GitVcsClient()),
            max_workers=settings.max_workers,
            on_outcome=_log_outcome,
        )
        result = orchestrator.execute(config.repositories)
        return SyncRunResult(
            lines=render_report(config, result),
            exit_code=result.exit_code,
        )


def render_report(config: TaskConfig, result: ProcessResult) -> list[str]:
    """List every failure and crash by local path, then a summary line."""

    lines = [outcome.describe() for outcome in sorted(result.failures, key=_path_key)]
    lines.extend(crash.describe() for crash in sorted(result.crashes, key=_path_key))
    lines.append(
        f"Synced {len(result.succeeded)}/{len(config.repositories)} repositories: "
        f"{len(result.failures)} failed, {len(result.crashes)} crashed.",
    )
    return lines


def _path_key(item: SyncOutcome | UnitCrash) -> str:
    return str(item.local_path)


def _log_outcome(outcome: SyncOutcome) -> None:
    logger.debug("Outcome: %s", outcome.describe())
