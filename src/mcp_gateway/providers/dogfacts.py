"""Dog facts provider.

Example tool server backed by the public dogapi.dog API. The HTTP client is
injected so the provider can be exercised without network access.
"""

from __future__ import annotations

from typing import Any

import httpx

from mcp_gateway.providers.arguments import prepare_arguments
from mcp_gateway.providers.base import (
    CapabilityProvider,
    ProviderError,
    ToolCallParams,
    ToolDefinition,
    ToolResult,
    UnknownToolError,
)

DOG_API_BASE_URL = "https://dogapi.dog/api/v2"

# User agent to use for requests
USER_AGENT = "MCP-Gateway/1.0 (Dog Facts Provider)"

DEFAULT_LIMIT = 5
MAX_LIMIT = 10

GET_DOG_FACTS = ToolDefinition(
    name="getDogFacts",
    description="Get random facts about dogs",
    input_schema={
        "type": "object",
        "properties": {
            "limit": {
                "type": "number",
                "description": (
                    f"Maximum number of facts to return "
                    f"(default: {DEFAULT_LIMIT}, max: {MAX_LIMIT})"
                ),
                "minimum": 1,
                "maximum": MAX_LIMIT,
                "default": DEFAULT_LIMIT,
            }
        },
        "additionalProperties": False,
    },
)


class DogFactsError(ProviderError):
    """Raised when the dog facts API cannot be queried."""

    pass


def format_facts(facts: list[str]) -> str:
    """Render facts as a numbered list with a summary line.

    Args:
        facts: Fact texts in API order.

    Returns:
        Text suitable for a single text content block.
    """
    count = len(facts)
    verb = "is" if count == 1 else "are"
    noun = "fact" if count == 1 else "facts"
    numbered = "\n\n".join(f"{i}. {fact}" for i, fact in enumerate(facts, 1))
    return f"Here {verb} {count} dog {noun}:\n\n{numbered}"


class DogFactsProvider(CapabilityProvider):
    """Serves the getDogFacts tool."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str = DOG_API_BASE_URL,
        timeout: float | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            client: HTTP client to use. A client is created (and owned) when
                omitted.
            base_url: Base URL of the dog facts API.
            timeout: Request timeout for an owned client. None leaves the
                hosting platform's limit as the only bound.
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            timeout=timeout,
        )
        self._base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        """Return server name."""
        return "dog-facts-server"

    @property
    def version(self) -> str:
        """Return server version."""
        return "1.0.0"

    def list_tools(self) -> list[ToolDefinition]:
        """Return available tools.

        Returns:
            List containing the getDogFacts tool definition.
        """
        return [GET_DOG_FACTS]

    async def invoke(self, call: ToolCallParams) -> ToolResult:
        """Invoke a tool.

        Args:
            call: Tool name and arguments.

        Returns:
            ToolResult with one text block listing the facts.

        Raises:
            UnknownToolError: If the tool is not getDogFacts.
            InvalidArgumentsError: If the arguments fail schema validation.
            DogFactsError: If the API responds with an error status or an
                unexpected payload.
        """
        if call.name != GET_DOG_FACTS.name:
            raise UnknownToolError(call.name)

        arguments = prepare_arguments(GET_DOG_FACTS, call.arguments)
        facts = await self._fetch_facts(int(arguments["limit"]))

        return ToolResult(content=[{"type": "text", "text": format_facts(facts)}])

    async def _fetch_facts(self, limit: int) -> list[str]:
        """Fetch facts from the API.

        Args:
            limit: Number of facts to request (already clamped).

        Returns:
            Fact texts.
        """
        response = await self._client.get(f"{self._base_url}/facts", params={"limit": limit})
        if not response.is_success:
            raise DogFactsError(f"HTTP error! status: {response.status_code}")

        payload: Any = response.json()
        try:
            return [fact["attributes"]["body"] for fact in payload["data"]]
        except (KeyError, TypeError) as e:
            raise DogFactsError("Unexpected response from dog facts API") from e

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()
