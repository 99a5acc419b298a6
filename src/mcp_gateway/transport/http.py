"""HTTP transport adapter for MCP communication.

Binds HTTP semantics (verb, headers, body) to the batch coordinator. The
adapter is host-neutral: requests arrive as HttpRequest objects built from
an API Gateway proxy event or from the local development server.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any

from mcp_gateway.config import DEFAULT_MAX_BODY_BYTES, DEFAULT_REALM
from mcp_gateway.discovery.metadata import DiscoveryDocuments
from mcp_gateway.observability.eventlog import EventLog
from mcp_gateway.protocol.batch import BatchCoordinator
from mcp_gateway.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    PARSE_ERROR,
    make_error,
)

JSON_CONTENT_TYPE = "application/json"

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Accept, Authorization, Mcp-Session-Id, Mcp-Protocol-Version"

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": ALLOWED_METHODS,
    "Access-Control-Allow-Headers": ALLOWED_HEADERS,
}


@dataclass
class HttpRequest:
    """An inbound HTTP request."""

    method: str
    path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    def header(self, name: str) -> str | None:
        """Look up a header value by case-insensitive name.

        Upstream platforms deliver headers both canonical-cased and
        lower-cased, so every key is compared lower-cased.

        Args:
            name: Header name.

        Returns:
            Header value or None if absent.
        """
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @classmethod
    def from_api_gateway_event(cls, event: dict[str, Any]) -> HttpRequest:
        """Build a request from an API Gateway REST proxy event.

        Args:
            event: Lambda proxy integration event.

        Returns:
            HttpRequest instance.
        """
        body = event.get("body")
        if body and event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")

        return cls(
            method=(event.get("httpMethod") or "").upper(),
            path=event.get("path") or "/",
            headers=dict(event.get("headers") or {}),
            body=body,
        )


@dataclass
class HttpResponse:
    """An outbound HTTP response."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body)

    def to_api_gateway(self) -> dict[str, Any]:
        """Convert to a Lambda proxy integration result."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
        }


def json_response(
    status_code: int, payload: Any, extra_headers: dict[str, str] | None = None
) -> HttpResponse:
    """Build a JSON response carrying the CORS origin header.

    Args:
        status_code: HTTP status.
        payload: JSON-serializable body.
        extra_headers: Additional headers.

    Returns:
        HttpResponse instance.
    """
    headers = {"Content-Type": JSON_CONTENT_TYPE, **CORS_HEADERS}
    if extra_headers:
        headers.update(extra_headers)
    return HttpResponse(status_code=status_code, headers=headers, body=json.dumps(payload))


def error_response(status_code: int, code: int, message: str) -> HttpResponse:
    """Build a response carrying a JSON-RPC error envelope with a null id."""
    return json_response(status_code, make_error(None, code, message))


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


class HttpTransport:
    """HTTP transport for MCP communication.

    Evaluates each request in a fixed order: preflight, discovery, verb
    gating, content type, body presence, body parsing, dispatch. Token
    validation is not done here; protected verbs are authorized upstream.
    """

    def __init__(
        self,
        coordinator: BatchCoordinator,
        discovery: DiscoveryDocuments | None = None,
        event_log: EventLog | None = None,
        realm: str = DEFAULT_REALM,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
    ) -> None:
        """Initialize the transport.

        Args:
            coordinator: Batch coordinator for POST bodies.
            discovery: Discovery documents to serve on GET, if configured.
            event_log: Optional structured event log.
            realm: Realm reported in authentication challenges.
            max_body_bytes: Largest accepted request body.
        """
        self._coordinator = coordinator
        self._discovery = discovery
        self._event_log = event_log
        self._realm = realm
        self._max_body_bytes = max_body_bytes

    async def handle(self, request: HttpRequest) -> HttpResponse:
        """Produce exactly one response for one request.

        Args:
            request: Inbound HTTP request.

        Returns:
            HTTP response. Unexpected failures become a generic 500.
        """
        self._log_request(request)

        try:
            return await self._handle(request)
        except Exception as e:
            if self._event_log is not None:
                self._event_log.log_error("transport", e, path=request.path)
            return error_response(500, INTERNAL_ERROR, "Internal server error")

    async def _handle(self, request: HttpRequest) -> HttpResponse:
        method = request.method.upper()

        if method == "OPTIONS":
            return HttpResponse(status_code=200, headers=dict(PREFLIGHT_HEADERS), body="")

        if method == "GET":
            return self._handle_get(request)

        if method != "POST":
            return error_response(405, INVALID_REQUEST, "Method Not Allowed")

        content_type = request.header("Content-Type")
        if not content_type or JSON_CONTENT_TYPE not in content_type.lower():
            return error_response(
                415, INVALID_REQUEST, f"Content-Type must be {JSON_CONTENT_TYPE}"
            )

        if not request.body:
            return error_response(400, PARSE_ERROR, "Empty request body")

        if len(request.body.encode("utf-8")) > self._max_body_bytes:
            return error_response(400, PARSE_ERROR, "Request body too large")

        try:
            payload = json.loads(request.body, parse_constant=_reject_constant)
        except ValueError:
            return error_response(400, PARSE_ERROR, "Invalid JSON")

        result = await self._coordinator.process(payload)
        return json_response(200, result, {"Access-Control-Allow-Methods": ALLOWED_METHODS})

    def _handle_get(self, request: HttpRequest) -> HttpResponse:
        """Serve discovery documents, otherwise challenge for authentication."""
        if self._discovery is not None:
            document = self._discovery.for_path(request.path)
            if document is not None:
                return json_response(200, document)

        return json_response(
            401,
            {"error": "invalid_request", "error_description": "Authentication required"},
            {"WWW-Authenticate": self._challenge()},
        )

    def _challenge(self) -> str:
        """Build the WWW-Authenticate header value."""
        challenge = (
            f'Bearer realm="{self._realm}", error="invalid_request", '
            f'error_description="Authentication required"'
        )
        if self._discovery is not None:
            challenge += f', resource_metadata="{self._discovery.protected_resource_url}"'
        return challenge

    def _log_request(self, request: HttpRequest) -> None:
        if self._event_log is None:
            return
        try:
            self._event_log.log_request(
                request.method, request.path, request.headers, len(request.body or "")
            )
        except Exception:  # noqa: BLE001
            self._event_log.dropped += 1
