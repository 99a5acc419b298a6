"""Gateway configuration loader.

Loads deployment configuration from a YAML file. String values may reference
environment variables with ``${VAR_NAME}`` so that deployment-specific URLs
can be injected by the hosting platform.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mcp_gateway.observability.eventlog import LEVELS

DEFAULT_MAX_BODY_BYTES = 1_048_576
DEFAULT_REALM = "MCP Server"


class ConfigLoadError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def expand_env_vars(value: str) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.

    Returns:
        String with known environment variables expanded.
    """
    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        return match.group(0)  # Return unchanged if not found

    return pattern.sub(replacer, value)


def _expand(value: Any) -> Any:
    """Recursively expand environment variables in strings."""
    if isinstance(value, str):
        return expand_env_vars(value)
    if isinstance(value, dict):
        return {key: _expand(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand(item) for item in value]
    return value


@dataclass
class GatewayConfig:
    """Gateway configuration.

    Read once at process start; never mutated while serving requests.
    """

    version: str = "1.0"

    # Server settings
    provider: str = "dogfacts"
    realm: str = DEFAULT_REALM
    redact_errors: bool = False
    concurrent_batches: bool = False
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    # Discovery settings
    server_name: str = "dogfacts"
    domain: str = ""
    auth_url: str = ""
    token_url: str = ""

    # Per-provider settings, keyed by provider name
    providers: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Logging settings
    log_level: str = "INFO"
    log_file: str = ""

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> GatewayConfig:
        """Create a GatewayConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML configuration.

        Returns:
            GatewayConfig instance with all settings populated.
        """
        config = _expand(config)
        server = config.get("server") or {}
        discovery = config.get("discovery") or {}
        logging = config.get("logging") or {}

        return cls(
            version=str(config.get("version", "1.0")),
            provider=server.get("provider", "dogfacts"),
            realm=server.get("realm", DEFAULT_REALM),
            redact_errors=bool(server.get("redact_errors", False)),
            concurrent_batches=bool(server.get("concurrent_batches", False)),
            max_body_bytes=int(server.get("max_body_bytes", DEFAULT_MAX_BODY_BYTES)),
            server_name=discovery.get("server_name", "dogfacts"),
            domain=discovery.get("domain", ""),
            auth_url=discovery.get("auth_url", ""),
            token_url=discovery.get("token_url", ""),
            providers=config.get("providers") or {},
            log_level=str(logging.get("level", "INFO")).upper(),
            log_file=logging.get("file", ""),
        )

    @property
    def discovery_enabled(self) -> bool:
        """Whether discovery documents should be served."""
        return bool(self.domain)

    def provider_settings(self, name: str | None = None) -> dict[str, Any]:
        """Get the settings block for a provider.

        Args:
            name: Provider name (defaults to the configured provider).

        Returns:
            Settings dictionary, empty if none were given.
        """
        return dict(self.providers.get(name or self.provider) or {})

    def validate(self, known_providers: list[str]) -> None:
        """Check cross-field constraints.

        Args:
            known_providers: Names accepted for ``server.provider``.

        Raises:
            ConfigLoadError: If the configuration is inconsistent.
        """
        if self.provider not in known_providers:
            raise ConfigLoadError(
                f"Unknown provider '{self.provider}', expected one of: {', '.join(known_providers)}"
            )
        if self.log_level not in LEVELS:
            raise ConfigLoadError(f"Unknown log level: {self.log_level}")
        if self.max_body_bytes <= 0:
            raise ConfigLoadError("server.max_body_bytes must be positive")
        if self.discovery_enabled and not (self.auth_url and self.token_url):
            raise ConfigLoadError("discovery.domain requires auth_url and token_url")


def load_config(path: Path) -> GatewayConfig:
    """Load gateway configuration from a YAML file.

    Args:
        path: Path to the configuration YAML file.

    Returns:
        GatewayConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be found, parsed, or validated.
    """
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse config YAML: {e}") from e

    if not isinstance(config, dict):
        raise ConfigLoadError("Config must be a YAML mapping")

    if "version" not in config:
        raise ConfigLoadError("Config must include 'version' field")

    return GatewayConfig.from_dict(config)
