from __future__ import annotations

import json

import pytest

from flowlog.config import Settings, get_settings
from flowlog.operations import FlowLog


class RecordingSink:
    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []

    def info(self, line: str) -> None:
        self.lines.append(("INFO", line))

    def warning(self, line: str) -> None:
        self.lines.append(("WARN", line))

    def error(self, line: str) -> None:
        self.lines.append(("ERROR", line))

    def debug(self, line: str) -> None:
        self.lines.append(("DEBUG", line))

    def trace(self, line: str) -> None:
        self.lines.append(("TRACE", line))

    def messages(self, level: str | None = None) -> list[str]:
        return [line for lvl, line in self.lines if level is None or lvl == level]


def split_line(line: str) -> tuple[str, dict[str, str]]:
    """Split a "<message> <json>" line back into message and context."""
    brace = line.index(" {")
    return line[:brace], json.loads(line[brace + 1 :])


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "FLOWLOG_LOGGER_NAME",
        "FLOWLOG_LOG_LEVEL",
        "FLOWLOG_JSON_LOGS",
        "FLOWLOG_LINE_NUMBER_SEPARATOR",
        "FLOWLOG_HTTP_CONTAINER_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def flowlog(sink: RecordingSink) -> FlowLog:
    return FlowLog(sink=sink, settings=Settings())


@pytest.fixture
def fresh_logging(monkeypatch: pytest.MonkeyPatch):
    """Let configure_logging run again and undo its global changes afterwards."""
    import logging

    import structlog

    from flowlog.observability import logging as flowlog_logging

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    monkeypatch.setattr(flowlog_logging, "_CONFIGURED", False)
    yield
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    structlog.reset_defaults()
