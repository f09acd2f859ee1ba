"""Correlation-context propagation and structured logging for pipeline steps."""

from flowlog.context.propagation import ContextMap
from flowlog.models.schemas import LocationInfo
from flowlog.operations import FlowLog
from flowlog.scopes.timed import Completion, FutureCallback, Outcome, TimedScope, chain_call, chain_future

__all__ = [
    "Completion",
    "ContextMap",
    "FlowLog",
    "FutureCallback",
    "LocationInfo",
    "Outcome",
    "TimedScope",
    "chain_call",
    "chain_future",
]
