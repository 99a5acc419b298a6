"""OAuth discovery metadata."""

from mcp_gateway.discovery.metadata import (
    AUTHORIZATION_SERVER_PATH,
    PROTECTED_RESOURCE_PATH,
    DiscoveryDocuments,
)

__all__ = ["AUTHORIZATION_SERVER_PATH", "PROTECTED_RESOURCE_PATH", "DiscoveryDocuments"]
