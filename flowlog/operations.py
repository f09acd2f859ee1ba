from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from concurrent import futures
from typing import Any, TypeVar

from flowlog.config import Settings, get_settings
from flowlog.context import identity
from flowlog.context.location import add_location
from flowlog.context.propagation import ContextMap
from flowlog.context.propagation import put as _put
from flowlog.context.propagation import put_all as _put_all
from flowlog.models.schemas import LOG_LEVELS, LocationInfo
from flowlog.observability.logging import get_sink
from flowlog.observability.router import LevelRouter
from flowlog.scopes.timed import CompletionCallback, FutureCallback, NestedOperation, TimedScope


T = TypeVar("T")


class FlowLog:
    """Context stamping and leveled logging for pipeline steps.

    The sink is injected; by default it is the structlog logger named by
    ``Settings.logger_name``. Every method takes the caller's context
    explicitly and returns a new one where it adds anything.
    """

    def __init__(self, sink: Any | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.router = LevelRouter(sink if sink is not None else get_sink(self.settings.logger_name))
        self.scope = TimedScope(self.router, line_number_separator=self._separator)

    @property
    def _separator(self) -> str:
        return self.settings.line_number_separator

    # Identifiers

    def new(self, headers: Mapping[str, Any] | None = None, location: LocationInfo | None = None) -> ContextMap:
        return identity.mint_transaction_context(
            self.router, headers, location, line_number_separator=self._separator
        )

    def new_job(self, context: Mapping[str, str] | None = None, location: LocationInfo | None = None) -> ContextMap:
        return identity.mint_job_id(self.router, context, location, line_number_separator=self._separator)

    def new_record(self, context: Mapping[str, str] | None = None, location: LocationInfo | None = None) -> ContextMap:
        return identity.mint_record_id(self.router, context, location, line_number_separator=self._separator)

    # Context mutators; location is accepted for call-site symmetry only.

    def put(
        self,
        key: str,
        value: str,
        context: Mapping[str, str] | None = None,
        location: LocationInfo | None = None,
    ) -> ContextMap:
        return _put(key, value, context)

    def put_all(
        self,
        new_entries: Mapping[str, str],
        context: Mapping[str, str] | None = None,
        location: LocationInfo | None = None,
    ) -> ContextMap:
        return _put_all(new_entries, context)

    # Timed scope

    def timed(
        self,
        context: Mapping[str, str] | None,
        location: LocationInfo | None,
        operation: NestedOperation,
        callback: CompletionCallback,
    ) -> None:
        self.scope.run(context, location, operation, callback)

    def timed_future(
        self,
        context: Mapping[str, str] | None,
        location: LocationInfo | None,
        operation: NestedOperation,
    ) -> futures.Future:
        callback = FutureCallback()
        self.scope.run(context, location, operation, callback)
        return callback.future

    async def timed_async(
        self,
        context: Mapping[str, str] | None,
        location: LocationInfo | None,
        operation: Callable[[], Awaitable[T]],
    ) -> T:
        return await self.scope.run_async(context, location, operation)

    # Logging

    def _emit(self, level: str, msg: str, context: Mapping[str, str] | None, location: LocationInfo | None) -> None:
        stamped = add_location("log", context, location, line_number_separator=self._separator)
        self.router.emit(level, msg, stamped)

    def log(
        self,
        msg: str,
        context: Mapping[str, str] | None = None,
        location: LocationInfo | None = None,
        *,
        level: str | None = "INFO",
    ) -> None:
        """Log at a caller-supplied level; unknown levels produce nothing."""
        if level is None:
            level = "INFO"
        if not isinstance(level, str):
            return
        level = level.upper()
        if level not in LOG_LEVELS:
            return
        self._emit(level, msg, context, location)

    def info(self, msg: str, context: Mapping[str, str] | None = None, location: LocationInfo | None = None) -> None:
        self._emit("INFO", msg, context, location)

    def warn(self, msg: str, context: Mapping[str, str] | None = None, location: LocationInfo | None = None) -> None:
        self._emit("WARN", msg, context, location)

    def error(self, msg: str, context: Mapping[str, str] | None = None, location: LocationInfo | None = None) -> None:
        self._emit("ERROR", msg, context, location)

    def debug(self, msg: str, context: Mapping[str, str] | None = None, location: LocationInfo | None = None) -> None:
        self._emit("DEBUG", msg, context, location)

    def trace(self, msg: str, context: Mapping[str, str] | None = None, location: LocationInfo | None = None) -> None:
        self._emit("TRACE", msg, context, location)
