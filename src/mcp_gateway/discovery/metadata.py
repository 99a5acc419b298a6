"""OAuth discovery documents.

Static metadata describing how clients authenticate against the gateway:
the protected resource document (RFC 9728) and the authorization server
document (RFC 8414). Both are rendered once from deployment configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PROTECTED_RESOURCE_PATH = "/.well-known/oauth-protected-resource"
AUTHORIZATION_SERVER_PATH = "/.well-known/oauth-authorization-server"

MCP_PATH = "/mcp"
REGISTRATION_PATH = "/connect/register"
AUTHORIZE_SUFFIX = "/oauth2/authorize"

STANDARD_SCOPES = ["openid", "email", "profile"]


def resource_scope(server_name: str) -> str:
    """Return the OAuth scope granting access to an MCP server."""
    return f"mcp-{server_name}/{server_name}"


def issuer_from_auth_url(auth_url: str) -> str:
    """Derive the issuer URL from an authorization endpoint URL.

    Args:
        auth_url: Authorization endpoint, e.g. ``https://x/oauth2/authorize``.

    Returns:
        Everything before ``/oauth2/authorize``.
    """
    return auth_url.split(AUTHORIZE_SUFFIX)[0]


@dataclass(frozen=True)
class DiscoveryDocuments:
    """Discovery documents keyed by the path they are served on."""

    protected_resource: dict[str, Any]
    authorization_server: dict[str, Any]
    protected_resource_url: str

    @classmethod
    def build(
        cls, server_name: str, domain: str, auth_url: str, token_url: str
    ) -> DiscoveryDocuments:
        """Render both documents.

        Args:
            server_name: Short server name used in scope identifiers.
            domain: Public custom domain serving the gateway.
            auth_url: OAuth authorization endpoint.
            token_url: OAuth token endpoint.

        Returns:
            DiscoveryDocuments instance.
        """
        base_url = f"https://{domain}"
        scope = resource_scope(server_name)

        protected_resource = {
            "resource_name": f"{server_name} MCP Server",
            "resource": f"{base_url}{MCP_PATH}",
            "authorization_servers": [f"{base_url}{AUTHORIZATION_SERVER_PATH}"],
            "scopes_supported": [scope],
            "bearer_methods_supported": ["header"],
        }

        authorization_server = {
            "issuer": issuer_from_auth_url(auth_url),
            "authorization_endpoint": auth_url,
            "token_endpoint": token_url,
            "registration_endpoint": f"{base_url}{REGISTRATION_PATH}",
            "response_types_supported": ["code"],
            "grant_types_supported": ["authorization_code", "client_credentials"],
            "code_challenge_methods_supported": ["S256"],
            "scopes_supported": [scope, *STANDARD_SCOPES],
            "token_endpoint_auth_methods_supported": [
                "client_secret_post",
                "client_secret_basic",
                "none",
            ],
        }

        return cls(
            protected_resource=protected_resource,
            authorization_server=authorization_server,
            protected_resource_url=f"{base_url}{PROTECTED_RESOURCE_PATH}",
        )

    def for_path(self, path: str) -> dict[str, Any] | None:
        """Return the document served at ``path``, if any."""
        normalized = path.rstrip("/")
        if normalized == PROTECTED_RESOURCE_PATH:
            return self.protected_resource
        if normalized == AUTHORIZATION_SERVER_PATH:
            return self.authorization_server
        return None
