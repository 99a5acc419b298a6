"""Capability providers for the MCP gateway."""

from mcp_gateway.providers.arguments import InvalidArgumentsError, prepare_arguments
from mcp_gateway.providers.base import (
    MCP_PROTOCOL_VERSION,
    CapabilityProvider,
    ProviderError,
    ToolCallParams,
    ToolDefinition,
    ToolResult,
    UnknownToolError,
)
from mcp_gateway.providers.dogfacts import DogFactsError, DogFactsProvider

# Providers selectable with ``server.provider`` in the gateway config
PROVIDERS: dict[str, type[CapabilityProvider]] = {
    "dogfacts": DogFactsProvider,
}

__all__ = [
    "MCP_PROTOCOL_VERSION",
    "PROVIDERS",
    "CapabilityProvider",
    "DogFactsError",
    "DogFactsProvider",
    "InvalidArgumentsError",
    "ProviderError",
    "ToolCallParams",
    "ToolDefinition",
    "ToolResult",
    "UnknownToolError",
    "prepare_arguments",
]
