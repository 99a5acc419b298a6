"""Local development server.

Serves the gateway as a Starlette application under uvicorn. There is no
authorizer in front of it, so use it only on a trusted machine.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from mcp_gateway.protocol.jsonrpc import PARSE_ERROR
from mcp_gateway.transport.http import HttpRequest, HttpResponse, error_response

if TYPE_CHECKING:
    from mcp_gateway.server import GatewayServer

ROUTE_METHODS = ["GET", "HEAD", "POST", "OPTIONS", "PUT", "PATCH", "DELETE"]


async def to_gateway_request(request: Request) -> HttpRequest:
    """Convert a Starlette request into a gateway request.

    Args:
        request: Inbound Starlette request.

    Returns:
        HttpRequest with the body decoded as UTF-8.

    Raises:
        UnicodeDecodeError: If the body is not valid UTF-8.
    """
    raw = await request.body()
    return HttpRequest(
        method=request.method,
        path=request.url.path,
        headers=dict(request.headers.items()),
        body=raw.decode("utf-8") if raw else None,
    )


def to_starlette_response(response: HttpResponse) -> Response:
    """Convert a gateway response into a Starlette response."""
    return Response(
        content=response.body,
        status_code=response.status_code,
        headers=response.headers,
    )


def create_app(gateway: GatewayServer) -> Starlette:
    """Create the Starlette application for a gateway server.

    Every path and verb is routed to the gateway, which applies its own
    verb gating. The provider is closed when the application shuts down.

    Args:
        gateway: Server that handles every request.

    Returns:
        Starlette application ready for uvicorn.
    """

    async def endpoint(request: Request) -> Response:
        try:
            gateway_request = await to_gateway_request(request)
        except UnicodeDecodeError:
            return to_starlette_response(
                error_response(400, PARSE_ERROR, "Invalid request body encoding")
            )
        return to_starlette_response(await gateway.handle(gateway_request))

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        yield
        await gateway.provider.aclose()

    return Starlette(
        debug=False,
        routes=[Route("/{path:path}", endpoint, methods=ROUTE_METHODS)],
        lifespan=lifespan,
    )
