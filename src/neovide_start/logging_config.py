"""structlog setup for the launcher.

Log output goes to stderr; stdout is left untouched for the launched
application's users.
"""
from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import TextIO

import structlog

LOG_LEVEL_ENV_VAR = "NEOVIDE_START_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "warning"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    environ: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog to emit filtered, human-readable lines on stderr."""
    env = os.environ if environ is None else environ
    level = _level_from_name(env.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL))

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )
