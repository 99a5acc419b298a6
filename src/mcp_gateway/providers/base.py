"""Capability provider base class and data structures.

Defines the interface every tool server must implement to be served by the
gateway. A provider is chosen once at start-up and injected into the
dispatcher.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# Default MCP protocol version advertised by providers
MCP_PROTOCOL_VERSION = "2024-11-05"


class ProviderError(Exception):
    """Base class for provider failures."""

    pass


class UnknownToolError(ProviderError):
    """Raised when a provider is asked to invoke a tool it does not declare."""

    def __init__(self, name: Any) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool offered by a provider."""

    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format.
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ToolCallParams:
    """Parameters of a tools/call request."""

    name: Any
    arguments: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Any) -> ToolCallParams:
        """Interpret envelope params as tool invocation params.

        The name is passed through untouched so that providers can report
        unknown or missing tools themselves.

        Args:
            params: The ``params`` member of a tools/call envelope.

        Returns:
            ToolCallParams instance.

        Raises:
            ValueError: If params is present but not an object.
        """
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ValueError("tools/call params must be an object")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ValueError("tools/call arguments must be an object")

        return cls(name=params.get("name"), arguments=arguments)


@dataclass
class ToolResult:
    """Result of a tool invocation.

    Content blocks are MCP typed content: ``{"type": "text", "text": ...}``,
    ``{"type": "image", "data": ..., "mimeType": ...}`` or
    ``{"type": "resource", ...}``.
    """

    content: list[dict[str, Any]]
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        result: dict[str, Any] = {"content": self.content}
        if self.is_error:
            result["isError"] = True
        return result


class CapabilityProvider(ABC):
    """Abstract base class for tool servers.

    Subclasses declare their tools statically and implement ``invoke``.
    ``describe`` and ``list_tools`` must be deterministic and free of side
    effects; the gateway may call them on every request.
    """

    protocol_version: str = MCP_PROTOCOL_VERSION
    capabilities: dict[str, Any] = {"tools": {}}

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the server name reported by initialize."""
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Return the server version reported by initialize."""
        pass

    @abstractmethod
    def list_tools(self) -> list[ToolDefinition]:
        """Return the tools offered by this provider.

        Returns:
            Ordered list of ToolDefinition objects.
        """
        pass

    @abstractmethod
    async def invoke(self, call: ToolCallParams) -> ToolResult:
        """Invoke a declared tool.

        Args:
            call: Tool name and arguments.

        Returns:
            ToolResult with content blocks.

        Raises:
            UnknownToolError: If ``call.name`` is not a declared tool.
        """
        pass

    def describe(self) -> dict[str, Any]:
        """Return the initialize result for this provider."""
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": dict(self.capabilities),
            "serverInfo": {"name": self.name, "version": self.version},
        }

    def get_tool(self, name: Any) -> ToolDefinition:
        """Look up a declared tool by name.

        Args:
            name: Requested tool name.

        Returns:
            The matching ToolDefinition.

        Raises:
            UnknownToolError: If no declared tool has that name.
        """
        for tool in self.list_tools():
            if tool.name == name:
                return tool
        raise UnknownToolError(name)

    async def aclose(self) -> None:
        """Release resources held by the provider.

        Override in providers that own network clients.
        """
        pass
