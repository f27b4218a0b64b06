"""Runtime settings and repository config file loading."""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from git_auto_fetch.logging_config import LOG_LEVELS
from git_auto_fetch.sync.models import TaskDescriptor
from git_auto_fetch.sync.orchestrator import DEFAULT_MAX_WORKERS


class ConfigError(ValueError):
    """Config file or settings are unreadable or malformed."""


@dataclass(slots=True)
class SyncSettings:
    """Process-level settings; CLI options take precedence over the environment."""

    config_file: Path | None = None
    max_workers: int = DEFAULT_MAX_WORKERS
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> SyncSettings:
        """Load settings from ``GIT_AUTO_FETCH_*`` environment variables."""

        config_file = os.getenv("GIT_AUTO_FETCH_CONFIG_FILE", "").strip()
        raw_workers = os.getenv("GIT_AUTO_FETCH_MAX_WORKERS", str(DEFAULT_MAX_WORKERS)).strip()
        try:
            max_workers = int(raw_workers)
        except ValueError as error:
            raise ConfigError(
                f"Invalid GIT_AUTO_FETCH_MAX_WORKERS value: {raw_workers!r}",
            ) from error
        return cls(
            config_file=Path(config_file) if config_file else None,
            max_workers=max_workers,
            log_level=os.getenv("GIT_AUTO_FETCH_LOG_LEVEL", "info").strip().lower(),
        )

    def validate(self) -> None:
        if self.config_file is None:
            raise ConfigError(
                "A config file is required. Pass --config-file or set GIT_AUTO_FETCH_CONFIG_FILE.",
            )
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be a positive integer, got {self.max_workers}.")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"Unsupported log level {self.log_level!r}. "
                f"Expected one of: {', '.join(LOG_LEVELS)}.",
            )


@dataclass(frozen=True, slots=True)
class TaskConfig:
    """Repositories declared in the config file, in file order."""

    repositories: tuple[TaskDescriptor, ...] = ()


def load_task_config(path: Path) -> TaskConfig:
    """Read and validate a JSON, YAML or TOML repository config file.

    Only field presence and types are checked here; whether a path holds a
    working copy is discovered when the task runs.
    """

    try:
        text = path.read_text("utf-8")
    except OSError as error:
        raise ConfigError(f"Cannot read config file {path}: {error}") from error

    data = _parse(path, text)
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level.")

    raw_repositories = data.get("repositories", [])
    if not isinstance(raw_repositories, list):
        raise ConfigError("'repositories' must be a list.")

    return TaskConfig(
        repositories=tuple(
            _parse_repository(index, entry) for index, entry in enumerate(raw_repositories)
        ),
    )


def _parse(path: Path, text: str) -> Any:
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            return json.loads(text)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        if suffix == ".toml":
            return tomllib.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as error:
        raise ConfigError(f"Cannot parse config file {path}: {error}") from error
    raise ConfigError(
        f"Unsupported config file extension {path.suffix!r}. Use .json, .yaml, .yml or .toml.",
    )


def _parse_repository(index: int, entry: object) -> TaskDescriptor:
    where = f"repositories[{index}]"
    if not isinstance(entry, Mapping):
        raise ConfigError(f"{where} must be a mapping.")

    missing = [key for key in ("local_path", "remote", "fetch_branches") if key not in entry]
    if missing:
        raise ConfigError(f"{where} is missing required field(s): {', '.join(missing)}")

    local_path = entry["local_path"]
    if not isinstance(local_path, str) or not local_path.strip():
        raise ConfigError(f"{where}.local_path must be a non-empty string.")

    remote = entry["remote"]
    if not isinstance(remote, str) or not remote.strip():
        raise ConfigError(f"{where}.remote must be a non-empty string.")

    branches = entry["fetch_branches"]
    if not isinstance(branches, list) or not all(
        isinstance(branch, str) and branch.strip() for branch in branches
    ):
        raise ConfigError(f"{where}.fetch_branches must be a list of non-empty strings.")

    return TaskDescriptor(
        local_path=Path(local_path).expanduser(),
        remote_name=remote.strip(),
        branches=tuple(branch.strip() for branch in branches),
    )
