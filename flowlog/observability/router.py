from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flowlog.observability.formatting import LogRecord


_SINK_METHODS: dict[str, str] = {
    "INFO": "info",
    "WARN": "warning",
    "ERROR": "error",
    "DEBUG": "debug",
    "TRACE": "trace",
}


class LevelRouter:
    """Sends formatted lines to the sink method matching their level.

    Levels outside TRACE/DEBUG/INFO/WARN/ERROR are dropped without output.
    """

    def __init__(self, sink: Any) -> None:
        self.sink = sink

    def route(self, record: LogRecord) -> None:
        method_name = _SINK_METHODS.get(record.level)
        if method_name is None:
            return
        getattr(self.sink, method_name)(record.render())

    def emit(self, level: str, msg: str, context: Mapping[str, str] | None) -> None:
        self.route(LogRecord(level=level, message=msg, context=context))
