from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass

import structlog

_log = structlog.get_logger(__name__)


def format_log_msg(msg: str, context: Mapping[str, str] | None) -> str:
    """Render ``"<msg> <json>"``; the payload is empty when the context is absent or unserializable."""
    payload = ""
    if context is not None:
        try:
            payload = json.dumps(dict(context), ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError):
            _log.debug("context_serialization_failed", exc_info=True)
    return f"{msg} {payload}"


@dataclass(frozen=True)
class LogRecord:
    level: str
    message: str
    context: Mapping[str, str] | None

    def render(self) -> str:
        return format_log_msg(self.message, self.context)
