"""MCP HTTP gateway - JSON-RPC tool invocation over HTTP."""

__version__ = "1.0.0"
