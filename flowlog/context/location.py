from __future__ import annotations

from collections.abc import Mapping

import structlog

from flowlog.context.propagation import ContextMap, copy_context
from flowlog.models.schemas import LocationInfo

_log = structlog.get_logger(__name__)


def location_keys(prefix: str, line_number_separator: str = "") -> tuple[str, str, str]:
    return (
        f"{prefix}.flow",
        f"{prefix}.fileName",
        f"{prefix}{line_number_separator}lineNumber",
    )


def add_location(
    prefix: str,
    context: Mapping[str, str] | None,
    location: LocationInfo | None,
    *,
    line_number_separator: str = "",
) -> ContextMap:
    """Return a copy of ``context`` stamped with the caller's location.

    A missing location adds nothing; it is only reported as a debug event.
    """
    stamped = copy_context(context)
    if location is None:
        _log.debug("missing_location_information", prefix=prefix)
        return stamped

    flow_key, file_key, line_key = location_keys(prefix, line_number_separator)
    stamped[flow_key] = location.container_name
    if location.file_name is not None:
        stamped[file_key] = location.file_name
    if location.line_number is not None:
        stamped[line_key] = str(location.line_number)
    return stamped
