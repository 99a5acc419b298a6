"""Envelope dispatcher - routes JSON-RPC methods to the capability provider."""

from __future__ import annotations

import time
from typing import Any

from mcp_gateway.observability.eventlog import EventLog
from mcp_gateway.protocol.jsonrpc import (
    INTERNAL_ERROR,
    JsonRpcRequest,
    make_error,
    make_response,
)
from mcp_gateway.providers.base import CapabilityProvider, ToolCallParams, ToolResult

GENERIC_FAILURE_MESSAGE = "Internal failure"


class UnknownMethodError(Exception):
    """Raised when an envelope names a method the gateway does not route."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Unknown method: {method}")
        self.method = method


class Dispatcher:
    """Turns one validated envelope into one response envelope.

    Every failure raised while handling an envelope, including unknown
    methods and unknown tools, becomes an INTERNAL_ERROR envelope carrying
    the request id. Nothing is retried.
    """

    def __init__(
        self,
        provider: CapabilityProvider,
        redact_errors: bool = False,
        event_log: EventLog | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            provider: Capability provider serving the tools.
            redact_errors: Replace failure text with a generic message.
            event_log: Optional log for dispatch outcomes.
        """
        self._provider = provider
        self._redact_errors = redact_errors
        self._event_log = event_log

    @property
    def provider(self) -> CapabilityProvider:
        """The provider requests are routed to."""
        return self._provider

    async def dispatch(self, request: JsonRpcRequest) -> dict[str, Any]:
        """Handle one envelope.

        Args:
            request: A structurally valid request envelope.

        Returns:
            A result or error envelope with the request's id.
        """
        started = time.perf_counter()
        try:
            result = await self._route(request)
        except Exception as e:
            self._log_outcome(request, "error", started)
            if self._event_log is not None:
                self._event_log.log_error("dispatch", e, request_id=request.id)
            return make_error(request.id, INTERNAL_ERROR, self._error_message(e))

        self._log_outcome(request, "success", started)
        return make_response(request.id, result)

    async def _route(self, request: JsonRpcRequest) -> Any:
        """Route by method name, first match wins."""
        method = request.method

        if method == "initialize":
            return self._provider.describe()

        if method == "tools/list":
            return {"tools": [tool.to_dict() for tool in self._provider.list_tools()]}

        if method == "tools/call":
            call = ToolCallParams.from_params(request.params)
            result = await self._provider.invoke(call)
            if isinstance(result, ToolResult):
                return result.to_dict()
            return result

        raise UnknownMethodError(method)

    def _error_message(self, error: Exception) -> str:
        if self._redact_errors:
            return GENERIC_FAILURE_MESSAGE
        return str(error) or GENERIC_FAILURE_MESSAGE

    def _log_outcome(self, request: JsonRpcRequest, status: str, started: float) -> None:
        if self._event_log is None:
            return
        duration_ms = (time.perf_counter() - started) * 1000
        self._event_log.log_dispatch(request.id, request.method, status, duration_ms)
