"""Tests for JSON-RPC 2.0 envelope validation and formatting."""

import pytest

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


class TestErrorCodes:
    """Tests for the standard error code values."""

    def test_uses_standard_codes(self):
        """Should use the canonical JSON-RPC 2.0 codes."""
        assert PARSE_ERROR == -32700
        assert INVALID_REQUEST == -32600
        assert METHOD_NOT_FOUND == -32601
        assert INVALID_PARAMS == -32602
        assert INTERNAL_ERROR == -32603


class TestValidateEnvelope:
    """Tests for envelope validation."""

    def test_accepts_valid_request(self):
        """Should accept a complete request."""
        request = validate_envelope(
            {"jsonrpc": "2.0", "id": 1, "method": "tools/list", "params": {"cursor": "abc"}}
        )

        assert isinstance(request, JsonRpcRequest)
        assert request.id == 1
        assert request.method == "tools/list"
        assert request.params == {"cursor": "abc"}

    def test_accepts_string_id(self):
        """Should accept string ids unchanged."""
        request = validate_envelope({"jsonrpc": "2.0", "id": "req-123", "method": "x"})
        assert request.id == "req-123"

    def test_accepts_zero_id(self):
        """Should accept zero as an integer id."""
        request = validate_envelope({"jsonrpc": "2.0", "id": 0, "method": "x"})
        assert request.id == 0

    def test_accepts_missing_params(self):
        """Should leave params as None when absent."""
        request = validate_envelope({"jsonrpc": "2.0", "id": 1, "method": "ping"})
        assert request.params is None

    @pytest.mark.parametrize(
        "data",
        [
            {"id": 1, "method": "x"},
            {"jsonrpc": "1.0", "id": 1, "method": "x"},
            {"jsonrpc": "2.0", "id": 1},
            {"jsonrpc": "2.0", "id": 1, "method": 42},
            {"jsonrpc": "2.0", "id": True, "method": "x"},
            {"jsonrpc": "2.0", "id": {"a": 1}, "method": "x"},
            {"jsonrpc": "2.0", "id": None, "method": "x"},
            {"jsonrpc": "2.0", "id": 1.5, "method": "x"},
            {"jsonrpc": "2.0", "method": "x"},
            {"jsonrpc": "2.0", "id": 1, "method": "x", "params": "text"},
            [],
            "text",
            42,
            None,
        ],
    )
    def test_rejects_malformed_envelopes(self, data):
        """Should reject anything that is not a request envelope."""
        with pytest.raises(JsonRpcError) as exc_info:
            validate_envelope(data)
        assert exc_info.value.code == INVALID_REQUEST

    def test_missing_id_is_reported(self):
        """Should name the missing id in the error message."""
        with pytest.raises(JsonRpcError, match="id is required"):
            validate_envelope({"jsonrpc": "2.0", "method": "tools/call"})


class TestMakeResponse:
    """Tests for building response envelopes."""

    def test_builds_result_envelope(self):
        """Should include jsonrpc, id and result only."""
        response = make_response(1, {"tools": []})

        assert response == {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}
        assert "error" not in response

    def test_allows_null_result(self):
        """Should allow a null result."""
        assert make_response("a", None)["result"] is None


class TestMakeError:
    """Tests for building error envelopes."""

    def test_builds_error_envelope(self):
        """Should include code and message without result."""
        error = make_error(7, INTERNAL_ERROR, "Unknown tool: x")

        assert error["id"] == 7
        assert error["error"] == {"code": INTERNAL_ERROR, "message": "Unknown tool: x"}
        assert "result" not in error

    def test_includes_data_when_given(self):
        """Should include data only when provided."""
        assert "data" not in make_error(None, PARSE_ERROR, "Parse error")["error"]
        assert make_error(None, PARSE_ERROR, "Parse error", data={"x": 1})["error"]["data"] == {
            "x": 1
        }

    def test_json_rpc_error_carries_code(self):
        """Should expose code, message and data on the exception."""
        error = JsonRpcError(INVALID_PARAMS, "bad params", data=[1])

        assert error.code == INVALID_PARAMS
        assert error.message == "bad params"
        assert error.data == [1]
        assert str(error) == "bad params"
