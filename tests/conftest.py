"""Pytest configuration and shared fixtures for gateway tests."""

from __future__ import annotations

import io
import json
from typing import Any

import pytest

from mcp_gateway.observability.eventlog import EventLog
from mcp_gateway.protocol.batch import BatchCoordinator
from mcp_gateway.protocol.dispatcher import Dispatcher
from mcp_gateway.providers.arguments import prepare_arguments
from mcp_gateway.providers.base import (
    CapabilityProvider,
    ToolCallParams,
    ToolDefinition,
    ToolResult,
    UnknownToolError,
)
from mcp_gateway.transport.http import HttpRequest, HttpTransport

ECHO_TOOL = ToolDefinition(
    name="echo",
    description="Echoes input",
    input_schema={
        "type": "object",
        "properties": {"message": {"type": "string"}},
        "required": ["message"],
    },
)

COUNT_TOOL = ToolDefinition(
    name="count",
    description="Returns one block per requested item",
    input_schema={
        "type": "object",
        "properties": {
            "limit": {"type": "number", "minimum": 1, "maximum": 10, "default": 5},
        },
        "additionalProperties": False,
    },
)

FAIL_TOOL = ToolDefinition(
    name="fail",
    description="Always raises",
    input_schema={"type": "object", "properties": {}},
)


class FakeProvider(CapabilityProvider):
    """Deterministic provider with no network access."""

    def __init__(self) -> None:
        self.calls: list[ToolCallParams] = []

    @property
    def name(self) -> str:
        return "fake-server"

    @property
    def version(self) -> str:
        return "0.1.0"

    def list_tools(self) -> list[ToolDefinition]:
        return [ECHO_TOOL, COUNT_TOOL, FAIL_TOOL]

    async def invoke(self, call: ToolCallParams) -> ToolResult:
        self.calls.append(call)
        tool = self.get_tool(call.name)
        arguments = prepare_arguments(tool, call.arguments)

        if tool.name == "echo":
            return ToolResult(content=[{"type": "text", "text": arguments["message"]}])
        if tool.name == "count":
            return ToolResult(
                content=[
                    {"type": "text", "text": str(i)} for i in range(1, int(arguments["limit"]) + 1)
                ]
            )
        if tool.name == "fail":
            raise RuntimeError("backend exploded")
        raise UnknownToolError(call.name)


@pytest.fixture
def provider() -> FakeProvider:
    """A fake provider recording its invocations."""
    return FakeProvider()


@pytest.fixture
def log_stream() -> io.StringIO:
    """In-memory stream capturing event log records."""
    return io.StringIO()


@pytest.fixture
def event_log(log_stream: io.StringIO) -> EventLog:
    """Event log writing DEBUG and above to an in-memory stream."""
    return EventLog(stream=log_stream, level="DEBUG")


@pytest.fixture
def dispatcher(provider: FakeProvider, event_log: EventLog) -> Dispatcher:
    """Dispatcher bound to the fake provider."""
    return Dispatcher(provider, event_log=event_log)


@pytest.fixture
def coordinator(dispatcher: Dispatcher) -> BatchCoordinator:
    """Sequential batch coordinator."""
    return BatchCoordinator(dispatcher)


@pytest.fixture
def transport(coordinator: BatchCoordinator, event_log: EventLog) -> HttpTransport:
    """HTTP transport without discovery documents."""
    return HttpTransport(coordinator, event_log=event_log)


def post_request(payload: Any, content_type: str = "application/json") -> HttpRequest:
    """Build a JSON POST request to the MCP endpoint."""
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return HttpRequest(
        method="POST",
        path="/mcp",
        headers={"Content-Type": content_type},
        body=body,
    )


def read_log(stream: io.StringIO) -> list[dict[str, Any]]:
    """Decode all JSON lines written to a log stream."""
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]
