#!/usr/bin/env python3
"""MCP HTTP Gateway - local entry point.

Serves the gateway on http://HOST:PORT for development. In production the
gateway runs behind API Gateway with ``mcp_gateway.lambda_handler.handler``
as the Lambda handler and a Cognito authorizer protecting POST.

================================================================================
DEVELOPER GUIDE: Adding a Provider
================================================================================

1. CREATE YOUR PROVIDER
   Subclass CapabilityProvider in src/mcp_gateway/providers/ and implement
   name, version, list_tools() and async invoke(). Raise UnknownToolError for
   names you do not declare. Take any HTTP client as a constructor argument
   so tests can pass an httpx.AsyncClient with a MockTransport.

2. REGISTER IT
   Add it to PROVIDERS in src/mcp_gateway/providers/__init__.py.

3. SELECT IT IN CONFIG
   server:
     provider: myprovider
   providers:
     myprovider:
       base_url: "https://api.example.com"

Settings under providers.<name> are passed to the provider's constructor.

================================================================================
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import uvicorn

from mcp_gateway import __version__
from mcp_gateway.config import ConfigLoadError, GatewayConfig, load_config
from mcp_gateway.server import GatewayServer
from mcp_gateway.transport.local import create_app


def main() -> int:
    """Run the gateway locally.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        description="MCP HTTP Gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to gateway config YAML file (default: built-in defaults)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", "-p", type=int, default=8080, help="Port to listen on")
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"mcp-gateway {__version__}",
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config) if args.config else GatewayConfig()
        gateway = GatewayServer(config=config)
    except ConfigLoadError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    print(f"[MCP] Gateway listening on http://{args.host}:{args.port}/mcp", file=sys.stderr)

    try:
        uvicorn.run(create_app(gateway), host=args.host, port=args.port, log_level="warning")
    except KeyboardInterrupt:
        print("[MCP] Interrupted, shutting down", file=sys.stderr)
        return 130  # Standard exit code for SIGINT
    finally:
        gateway.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
