"""HTTP transport bindings."""

from mcp_gateway.transport.http import HttpRequest, HttpResponse, HttpTransport

__all__ = ["HttpRequest", "HttpResponse", "HttpTransport"]
