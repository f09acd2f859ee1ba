"""Copy-on-write helpers for the correlation context.

A context is a plain ``dict[str, str]``. Nothing in this package mutates a
context it was handed; every helper returns a fresh dict so concurrent
pipeline branches never see each other's additions.
"""

from __future__ import annotations

from collections.abc import Mapping


ContextMap = dict[str, str]

TRANSACTION_ID = "x-transaction-id"
TRANSACTION_ID_ALT = "x_transaction_id"
JOB_ID = "x-job-id"
RECORD_ID = "x-record-id"
CLIENT_ID = "client_id"
ELAPSED_MS = "elapsedMS"


def copy_context(context: Mapping[str, str] | None) -> ContextMap:
    """Return a new context seeded from ``context``.

    ``None`` and an empty mapping are treated the same: both start fresh.
    """
    if context is None:
        return {}
    return dict(context)


def put(key: str, value: str, context: Mapping[str, str] | None = None) -> ContextMap:
    updated = copy_context(context)
    updated[key] = value
    return updated


def put_all(new_entries: Mapping[str, str], context: Mapping[str, str] | None = None) -> ContextMap:
    """Merge ``new_entries`` over a copy of ``context``; new entries win."""
    if new_entries is None:
        raise TypeError("new_entries is required")

    updated = copy_context(context)
    updated.update(new_entries)
    return updated
