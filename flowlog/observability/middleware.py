from __future__ import annotations

from typing import Any, Callable

from starlette.datastructures import Headers, MutableHeaders

from flowlog.context.propagation import TRANSACTION_ID
from flowlog.models.schemas import LocationInfo
from flowlog.operations import FlowLog


CONTEXT_STATE_KEY = "flowlog_context"


class TransactionContextMiddleware:
    """Mints the transaction context per request and times the response.

    The context is available to handlers as ``request.state.flowlog_context``
    and the transaction id is echoed back as a response header.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        flowlog: FlowLog | None = None,
        container_name: str | None = None,
    ) -> None:
        self.app = app
        self.flowlog = flowlog or FlowLog()
        self.container_name = container_name or self.flowlog.settings.http_container_name

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        location = LocationInfo(container_name=self.container_name)
        context = self.flowlog.new(headers, location)
        scope.setdefault("state", {})[CONTEXT_STATE_KEY] = context
        transaction_id = context[TRANSACTION_ID]

        async def send_wrapper(message: dict[str, Any]) -> None:
            if message.get("type") == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                response_headers[TRANSACTION_ID] = transaction_id
            await send(message)

        await self.flowlog.timed_async(
            context,
            location,
            lambda: self.app(scope, receive, send_wrapper),
        )
