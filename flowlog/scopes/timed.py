"""Timed scope: enter/exit log lines with elapsed time around a nested operation.

The nested operation is any callable taking a :class:`Completion`. It may hand
its work to a thread pool or an event loop and signal ``completion.success``
or ``completion.error`` later, from whichever thread finishes the work.
``TimedScope.run`` returns as soon as the operation has been dispatched.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from concurrent import futures
from dataclasses import dataclass
from threading import Lock
from time import perf_counter
from typing import Any, Protocol, TypeVar

import structlog

from flowlog.context.location import add_location
from flowlog.context.propagation import ELAPSED_MS, ContextMap, put
from flowlog.models.schemas import LocationInfo
from flowlog.observability.router import LevelRouter


T = TypeVar("T")

_log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Outcome:
    result: Any = None
    error: BaseException | None = None
    previous: Any = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class CompletionCallback(Protocol):
    def success(self, result: Any) -> None: ...

    def error(self, error: BaseException) -> None: ...


class Completion:
    """Single-shot continuation handed to a nested operation.

    Only the first signal is forwarded; later ones are ignored.
    """

    def __init__(self, on_outcome: Callable[[Outcome], None]) -> None:
        self._on_outcome = on_outcome
        self._lock = Lock()
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def success(self, result: Any = None) -> None:
        self._fire(Outcome(result=result))

    def error(self, error: BaseException, previous: Any = None) -> None:
        self._fire(Outcome(error=error, previous=previous))

    def _fire(self, outcome: Outcome) -> None:
        with self._lock:
            if self._done:
                _log.debug("completion_already_fired", failed=outcome.failed)
                return
            self._done = True
        self._on_outcome(outcome)


NestedOperation = Callable[[Completion], None]


class FutureCallback:
    """Forwards a scope's outcome into a ``concurrent.futures.Future``."""

    def __init__(self, future: futures.Future | None = None) -> None:
        self.future: futures.Future = future if future is not None else futures.Future()

    def success(self, result: Any) -> None:
        self.future.set_result(result)

    def error(self, error: BaseException) -> None:
        self.future.set_exception(error)


def chain_future(future: Any) -> NestedOperation:
    """Adapt a concurrent or asyncio future into a nested operation."""

    def _operation(completion: Completion) -> None:
        def _done(finished: Any) -> None:
            if finished.cancelled():
                completion.error(futures.CancelledError("nested operation was cancelled"))
                return
            exc = finished.exception()
            if exc is not None:
                completion.error(exc)
            else:
                completion.success(finished.result())

        future.add_done_callback(_done)

    return _operation


def chain_call(executor: futures.Executor, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> NestedOperation:
    """Run ``fn`` on ``executor`` when the scope dispatches it."""

    def _operation(completion: Completion) -> None:
        chain_future(executor.submit(fn, *args, **kwargs))(completion)

    return _operation


class TimedScope:
    def __init__(
        self,
        router: LevelRouter,
        *,
        clock: Callable[[], float] = perf_counter,
        line_number_separator: str = "",
    ) -> None:
        self.router = router
        self._clock = clock
        self._line_number_separator = line_number_separator

    def _enter(self, context: Mapping[str, str] | None, location: LocationInfo | None) -> ContextMap:
        stamped = add_location("timer", context, location, line_number_separator=self._line_number_separator)
        self.router.emit("INFO", "enter", stamped)
        return stamped

    def _exit(self, start: float, stamped: ContextMap, error: BaseException | None) -> None:
        elapsed_ms = int((self._clock() - start) * 1000.0)
        annotated = put(ELAPSED_MS, str(elapsed_ms), stamped)
        if error is None:
            self.router.emit("INFO", "exit", annotated)
        else:
            self.router.emit("INFO", f"exit with error {error}", annotated)

    def run(
        self,
        context: Mapping[str, str] | None,
        location: LocationInfo | None,
        operation: NestedOperation,
        callback: CompletionCallback,
    ) -> None:
        """Dispatch ``operation`` and report its outcome to ``callback``.

        Errors reach ``callback.error`` as the same object the operation
        raised or signalled. An exception thrown while dispatching, before
        any signal, counts as a failure of the operation. Once a signal has
        been forwarded, a later exception from the operation or from
        ``callback`` is re-raised to the caller of ``run``. A
        ``BaseException`` such as ``KeyboardInterrupt`` raised during dispatch
        is not caught: it propagates with no exit line and no callback.
        """
        start = self._clock()
        stamped = self._enter(context, location)

        def _finish(outcome: Outcome) -> None:
            self._exit(start, stamped, outcome.error)
            if outcome.failed:
                callback.error(outcome.error)
            else:
                callback.success(outcome.result)

        completion = Completion(_finish)
        try:
            operation(completion)
        except Exception as exc:
            # The outcome is already reported; the raise belongs to whoever raised after signalling.
            if completion.done:
                raise
            completion.error(exc)

    async def run_async(
        self,
        context: Mapping[str, str] | None,
        location: LocationInfo | None,
        operation: Callable[[], Awaitable[T]],
    ) -> T:
        start = self._clock()
        stamped = self._enter(context, location)
        try:
            result = await operation()
        except Exception as exc:
            self._exit(start, stamped, exc)
            raise
        self._exit(start, stamped, None)
        return result
