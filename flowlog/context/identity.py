from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from flowlog.context.location import add_location
from flowlog.context.propagation import (
    CLIENT_ID,
    JOB_ID,
    RECORD_ID,
    TRANSACTION_ID,
    TRANSACTION_ID_ALT,
    ContextMap,
)
from flowlog.models.schemas import LocationInfo
from flowlog.observability.router import LevelRouter


def new_id() -> str:
    return str(uuid.uuid4())


def _header_value(headers: Mapping[str, Any], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        return None

    # Multi-valued headers contribute their first value.
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = value[0]
    return str(value)


def mint_transaction_context(
    router: LevelRouter,
    headers: Mapping[str, Any] | None = None,
    location: LocationInfo | None = None,
    *,
    line_number_separator: str = "",
) -> ContextMap:
    """
    Start a new context for an inbound request.

    The transaction id is taken from ``x-transaction-id`` (preferred) or
    ``x_transaction_id``; when neither is present a new one is generated and
    an INFO line records it. ``client_id`` is carried through unchanged.
    """
    context = add_location("new", None, location, line_number_separator=line_number_separator)

    transaction_id: str | None = None
    if headers is not None:
        client_id = _header_value(headers, CLIENT_ID)
        if client_id is not None:
            context[CLIENT_ID] = client_id
        transaction_id = _header_value(headers, TRANSACTION_ID)
        if transaction_id is None:
            transaction_id = _header_value(headers, TRANSACTION_ID_ALT)

    if transaction_id is not None:
        context[TRANSACTION_ID] = transaction_id
    else:
        context[TRANSACTION_ID] = new_id()
        router.emit("INFO", f"Generated {TRANSACTION_ID}", context)
    return context


def _mint_child_id(
    router: LevelRouter,
    prefix: str,
    key: str,
    context: Mapping[str, str] | None,
    location: LocationInfo | None,
    line_number_separator: str,
) -> ContextMap:
    minted = add_location(prefix, context, location, line_number_separator=line_number_separator)
    minted[key] = new_id()
    router.emit("DEBUG", f"Generated {key}", minted)
    return minted


def mint_job_id(
    router: LevelRouter,
    context: Mapping[str, str] | None = None,
    location: LocationInfo | None = None,
    *,
    line_number_separator: str = "",
) -> ContextMap:
    return _mint_child_id(router, "new-job", JOB_ID, context, location, line_number_separator)


def mint_record_id(
    router: LevelRouter,
    context: Mapping[str, str] | None = None,
    location: LocationInfo | None = None,
    *,
    line_number_separator: str = "",
) -> ContextMap:
    return _mint_child_id(router, "new-record", RECORD_ID, context, location, line_number_separator)
