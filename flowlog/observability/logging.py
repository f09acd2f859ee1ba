from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from flowlog.config import Settings, get_settings


TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVEL_ALIASES = {"WARN": logging.WARNING, "TRACE": TRACE}

_CONFIGURED = False


def resolve_level(level: int | str) -> int:
    """Map a level name (including WARN and TRACE) to its stdlib number."""
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[name]
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level!r}")
    return resolved


def _renderer(settings: Settings) -> Any:
    if settings.json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(level: int | str | None = None) -> None:
    """Route structlog and stdlib records through one stdout handler.

    Level and renderer come from settings unless ``level`` is given. Only the
    first call has an effect.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = get_settings()
    root_level = resolve_level(settings.log_level if level is None else level)

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # TRACE lines are plain stdlib records; foreign_pre_chain gives them the same fields.
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=_renderer(settings), foreign_pre_chain=shared)
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(root_level)

    _CONFIGURED = True


class StructlogSink:
    """Leveled sink bound to one named logger.

    structlog has no trace method, so TRACE lines go straight to the stdlib
    logger of the same name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._logger = structlog.get_logger(name)
        self._stdlib = logging.getLogger(name)

    def info(self, line: str) -> None:
        self._logger.info(line)

    def warning(self, line: str) -> None:
        self._logger.warning(line)

    def error(self, line: str) -> None:
        self._logger.error(line)

    def debug(self, line: str) -> None:
        self._logger.debug(line)

    def trace(self, line: str) -> None:
        if self._stdlib.isEnabledFor(TRACE):
            self._stdlib.log(TRACE, line)


def get_sink(name: str | None = None) -> StructlogSink:
    """Default sink; configures logging on first use so settings apply."""
    configure_logging()
    return StructlogSink(name or get_settings().logger_name)
