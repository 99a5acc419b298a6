"""MCP protocol layer for JSON-RPC envelopes."""

from mcp_gateway.protocol.batch import BatchCoordinator
from mcp_gateway.protocol.dispatcher import Dispatcher, UnknownMethodError
from mcp_gateway.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    make_error,
    make_response,
    validate_envelope,
)

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "BatchCoordinator",
    "Dispatcher",
    "JsonRpcError",
    "JsonRpcRequest",
    "UnknownMethodError",
    "make_error",
    "make_response",
    "validate_envelope",
]
