"""Batch coordinator - drives single envelopes and batches through the dispatcher."""

from __future__ import annotations

import asyncio
from typing import Any

from mcp_gateway.protocol.dispatcher import Dispatcher
from mcp_gateway.protocol.jsonrpc import (
    INVALID_REQUEST,
    JsonRpcError,
    make_error,
    validate_envelope,
)

INVALID_ENVELOPE_MESSAGE = "Invalid JSON-RPC request"


class BatchCoordinator:
    """Processes a decoded request body.

    A list is a batch and yields a list of responses in the same order. Any
    other value is handled as a single envelope and yields a single
    response.
    """

    def __init__(self, dispatcher: Dispatcher, concurrent: bool = False) -> None:
        """Initialize the coordinator.

        Args:
            dispatcher: Dispatcher for valid envelopes.
            concurrent: Dispatch batch elements concurrently.
        """
        self._dispatcher = dispatcher
        self._concurrent = concurrent

    async def process(self, payload: Any) -> dict[str, Any] | list[dict[str, Any]]:
        """Handle a decoded request body.

        Args:
            payload: Parsed JSON body.

        Returns:
            One response envelope, or a list of them for a batch.
        """
        if not isinstance(payload, list):
            return await self._process_one(payload)

        if self._concurrent:
            # gather preserves argument order in its result
            return list(await asyncio.gather(*(self._process_one(item) for item in payload)))

        return [await self._process_one(item) for item in payload]

    async def _process_one(self, item: Any) -> dict[str, Any]:
        """Validate one element and dispatch it if it is an envelope."""
        try:
            request = validate_envelope(item)
        except JsonRpcError:
            return make_error(None, INVALID_REQUEST, INVALID_ENVELOPE_MESSAGE)

        return await self._dispatcher.dispatch(request)
