"""JSON-RPC 2.0 envelope validation and formatting.

Implements the subset of JSON-RPC 2.0 used by the MCP HTTP gateway. Parsing
of the raw HTTP body happens in the transport; this module only deals with
already-decoded JSON values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = str | int | None


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(self, code: int, message: str, data: Any | None = None) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


@dataclass
class JsonRpcRequest:
    """A structurally valid JSON-RPC request envelope."""

    id: str | int
    method: str
    params: dict[str, Any] | list[Any] | None = None


def _is_valid_id(value: Any) -> bool:
    # bool is a subclass of int but never a valid id
    if isinstance(value, bool):
        return False
    return isinstance(value, str | int)


def validate_envelope(data: Any) -> JsonRpcRequest:
    """Check that a decoded JSON value is a JSON-RPC request envelope.

    Args:
        data: A single decoded JSON value (one element of a batch).

    Returns:
        The validated request.

    Raises:
        JsonRpcError: With INVALID_REQUEST if the value is not an envelope.
    """
    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: message must be an object")

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'")

    method = data.get("method")
    if not isinstance(method, str):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: method must be a string")

    params = data.get("params")
    if params is not None and not isinstance(params, dict | list):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: params must be structured")

    if "id" not in data:
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: id is required")

    msg_id = data["id"]
    if not _is_valid_id(msg_id):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: id must be a string or integer")

    return JsonRpcRequest(id=msg_id, method=method, params=params)


def make_response(msg_id: RequestId, result: Any) -> dict[str, Any]:
    """Build a successful JSON-RPC response envelope.

    Args:
        msg_id: Request ID to echo back.
        result: Result payload.

    Returns:
        Response envelope ready for JSON serialization.
    """
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": msg_id,
        "result": result,
    }


def make_error(
    msg_id: RequestId,
    code: int,
    message: str,
    data: Any | None = None,
) -> dict[str, Any]:
    """Build a JSON-RPC error response envelope.

    Args:
        msg_id: Request ID (or None when the request could not be identified).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        Error envelope ready for JSON serialization.
    """
    error_obj: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if data is not None:
        error_obj["data"] = data

    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": msg_id,
        "error": error_obj,
    }
