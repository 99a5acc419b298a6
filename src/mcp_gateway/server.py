"""MCP gateway server.

Integrates the provider, dispatcher, batch coordinator and HTTP transport
into one object built once per process.
"""

from __future__ import annotations

import asyncio
import binascii
from pathlib import Path
from typing import Any

from mcp_gateway.config import GatewayConfig, load_config
from mcp_gateway.discovery.metadata import DiscoveryDocuments
from mcp_gateway.observability.eventlog import EventLog
from mcp_gateway.protocol.batch import BatchCoordinator
from mcp_gateway.protocol.dispatcher import Dispatcher
from mcp_gateway.protocol.jsonrpc import PARSE_ERROR
from mcp_gateway.providers import PROVIDERS, CapabilityProvider
from mcp_gateway.transport.http import HttpRequest, HttpResponse, HttpTransport, error_response


def build_provider(config: GatewayConfig) -> CapabilityProvider:
    """Instantiate the configured provider.

    Args:
        config: Gateway configuration.

    Returns:
        Provider instance built from its settings block.
    """
    provider_cls = PROVIDERS[config.provider]
    return provider_cls(**config.provider_settings())


def build_event_log(config: GatewayConfig) -> EventLog:
    """Create the event log described by the configuration."""
    if config.log_file:
        return EventLog.to_file(Path(config.log_file), level=config.log_level)
    return EventLog(level=config.log_level)


class GatewayServer:
    """MCP gateway server.

    Holds the component chain HTTP transport -> batch coordinator ->
    dispatcher -> provider. None of them keep per-request state.
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        provider: CapabilityProvider | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            config: Gateway configuration (defaults apply when omitted).
            provider: Provider to serve. Built from config when omitted.
            event_log: Event log. Built from config when omitted.
        """
        self._config = config or GatewayConfig()
        self._config.validate(list(PROVIDERS))

        self._event_log = event_log or build_event_log(self._config)
        self._provider = provider or build_provider(self._config)

        discovery = None
        if self._config.discovery_enabled:
            discovery = DiscoveryDocuments.build(
                server_name=self._config.server_name,
                domain=self._config.domain,
                auth_url=self._config.auth_url,
                token_url=self._config.token_url,
            )

        self._dispatcher = Dispatcher(
            self._provider,
            redact_errors=self._config.redact_errors,
            event_log=self._event_log,
        )
        self._coordinator = BatchCoordinator(
            self._dispatcher, concurrent=self._config.concurrent_batches
        )
        self._transport = HttpTransport(
            self._coordinator,
            discovery=discovery,
            event_log=self._event_log,
            realm=self._config.realm,
            max_body_bytes=self._config.max_body_bytes,
        )
        self._runner: asyncio.Runner | None = None

    @classmethod
    def from_config_file(cls, path: Path) -> GatewayServer:
        """Create a server from a YAML configuration file.

        Args:
            path: Path to the configuration file.

        Returns:
            GatewayServer instance.
        """
        return cls(config=load_config(path))

    @property
    def config(self) -> GatewayConfig:
        """The active configuration."""
        return self._config

    @property
    def provider(self) -> CapabilityProvider:
        """The provider being served."""
        return self._provider

    async def handle(self, request: HttpRequest) -> HttpResponse:
        """Handle one HTTP request.

        Args:
            request: Inbound request.

        Returns:
            HTTP response.
        """
        return await self._transport.handle(request)

    async def handle_event(self, event: dict[str, Any]) -> dict[str, Any]:
        """Handle an API Gateway proxy event.

        Args:
            event: Lambda proxy integration event.

        Returns:
            Lambda proxy integration result.
        """
        try:
            request = HttpRequest.from_api_gateway_event(event)
        except (binascii.Error, UnicodeDecodeError) as e:
            self._event_log.log_error("decode", e)
            return error_response(400, PARSE_ERROR, "Invalid request body encoding").to_api_gateway()

        response = await self.handle(request)
        return response.to_api_gateway()

    def run(self, coro: Any) -> Any:
        """Run a coroutine on the server's event loop.

        The loop outlives single calls so that pooled connections in the
        provider's HTTP client stay usable across invocations.

        Args:
            coro: Coroutine to run.

        Returns:
            The coroutine's result.
        """
        if self._runner is None:
            self._runner = asyncio.Runner()
        return self._runner.run(coro)

    def close(self) -> None:
        """Close the server and clean up resources."""
        self.run(self._provider.aclose())
        if self._runner is not None:
            self._runner.close()
            self._runner = None
        self._event_log.close()

    def __enter__(self) -> GatewayServer:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
