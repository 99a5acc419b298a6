"""Structured logging."""

from mcp_gateway.observability.eventlog import EventLog, redact

__all__ = ["EventLog", "redact"]
