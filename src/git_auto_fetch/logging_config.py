"""Logging setup for the command-line process."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TextIO

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_OFF = logging.CRITICAL + 10

LOG_LEVELS: dict[str, int] = {
    "off": _OFF,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

DEFAULT_FORMAT = "%(asctime)s %(levelname)-5s %(threadName)s %(name)s - %(message)s"

_PACKAGE_LOGGER = "git_auto_fetch"


def parse_log_level(name: str) -> int:
    """Map a level name (``off`` .. ``trace``, any case) to a logging level."""

    try:
        return LOG_LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported log level {name!r}. Expected one of: {', '.join(LOG_LEVELS)}.",
        ) from None


@dataclass(slots=True)
class LoggingHandle:
    """Installed handler; ``close`` flushes and detaches it."""

    logger: logging.Logger
    handler: logging.Handler
    previous_level: int = logging.NOTSET
    previous_propagate: bool = True

    def close(self) -> None:
        self.handler.flush()
        self.logger.removeHandler(self.handler)
        self.handler.close()
        self.logger.setLevel(self.previous_level)
        self.logger.propagate = self.previous_propagate


def setup_logging(
    level: str = "info",
    *,
    stream: TextIO | None = None,
    format_string: str = DEFAULT_FORMAT,
) -> LoggingHandle:
    """Attach one stream handler to the package logger at ``level``."""

    numeric_level = parse_log_level(level)
    logger = logging.getLogger(_PACKAGE_LOGGER)
    previous_level = logger.level
    previous_propagate = logger.propagate
    logger.setLevel(numeric_level)
    logger.propagate = False

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(format_string))
    handler.setLevel(numeric_level)
    logger.addHandler(handler)
    return LoggingHandle(
        logger=logger,
        handler=handler,
        previous_level=previous_level,
        previous_propagate=previous_propagate,
    )
