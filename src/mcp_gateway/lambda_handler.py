"""AWS Lambda entry point.

API Gateway invokes ``handler`` with REST proxy events. The gateway server is
built once per execution environment and reused by warm invocations.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

from mcp_gateway.config import GatewayConfig
from mcp_gateway.protocol.jsonrpc import INTERNAL_ERROR
from mcp_gateway.server import GatewayServer
from mcp_gateway.transport.http import error_response

# Path to the YAML configuration bundled with the function
CONFIG_ENV_VAR = "MCP_GATEWAY_CONFIG"

_server: GatewayServer | None = None


def get_server() -> GatewayServer:
    """Return the process-wide server, building it on first use."""
    global _server
    if _server is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
        if config_path:
            _server = GatewayServer.from_config_file(Path(config_path))
        else:
            _server = GatewayServer(config=GatewayConfig())
    return _server


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle one API Gateway proxy event.

    Args:
        event: Lambda proxy integration event.
        context: Lambda context (unused).

    Returns:
        Lambda proxy integration result. A gateway that cannot be built
        yields a generic 500 and is retried on the next invocation.
    """
    try:
        server = get_server()
    except Exception as e:
        print(f"[MCP] Gateway startup failed: {type(e).__name__}: {e}", file=sys.stderr)
        return error_response(500, INTERNAL_ERROR, "Internal server error").to_api_gateway()

    return server.run(server.handle_event(event))
