"""Structured event logging for the gateway.

Append-only JSON Lines log of inbound requests, dispatches and failures.
Records go to stderr by default, which the Lambda runtime forwards to
CloudWatch, or to a file for local runs.
"""

from __future__ import annotations

import json
import re
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TextIO

LEVELS = {"DEBUG": 10, "INFO": 20, "ERROR": 40}

# Patterns for sensitive keys in headers and payloads
SENSITIVE_PATTERNS = [
    re.compile(r"authorization", re.IGNORECASE),
    re.compile(r"cookie", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"credential", re.IGNORECASE),
]


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    return any(pattern.search(key) for pattern in SENSITIVE_PATTERNS)


def redact(data: dict[str, Any]) -> dict[str, Any]:
    """Redact sensitive values in a mapping.

    Args:
        data: Original mapping (headers, claims, arguments).

    Returns:
        New mapping with sensitive values replaced.
    """
    sanitized = {}
    for key, value in data.items():
        if _is_sensitive_key(str(key)):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = redact(value)
        else:
            sanitized[key] = value
    return sanitized


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class EventLog:
    """JSON Lines event log.

    Every record carries ``timestamp``, ``level`` and ``type``. Write
    failures are counted and dropped so that logging can never change the
    outcome of a request.
    """

    def __init__(self, stream: TextIO | None = None, level: str = "INFO") -> None:
        """Initialize the event log.

        Args:
            stream: Text stream to write to (defaults to sys.stderr).
            level: Minimum level to record (DEBUG, INFO or ERROR).

        Raises:
            ValueError: If the level is unknown.
        """
        if level.upper() not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")

        self._stream = stream or sys.stderr
        self._threshold = LEVELS[level.upper()]
        self._owns_stream = False
        self.dropped = 0

    @classmethod
    def to_file(cls, log_path: Path, level: str = "INFO") -> EventLog:
        """Create an event log appending to a file.

        Args:
            log_path: Path to the log file. Parent directories are created.
            level: Minimum level to record.

        Returns:
            EventLog owning the opened file.
        """
        log_path.parent.mkdir(parents=True, exist_ok=True)
        event_log = cls(open(log_path, "a", encoding="utf-8"), level=level)  # noqa: SIM115
        event_log._owns_stream = True
        return event_log

    def enabled_for(self, level: str) -> bool:
        """Return True if records at ``level`` are written."""
        return LEVELS[level] >= self._threshold

    def _write_line(self, level: str, data: dict[str, Any]) -> None:
        """Write a JSON line and flush."""
        if not self.enabled_for(level):
            return

        record = {"timestamp": _get_timestamp(), "level": level, **data}
        try:
            self._stream.write(json.dumps(record, default=str) + "\n")
            self._stream.flush()
        except (OSError, ValueError):
            self.dropped += 1

    def log_request(
        self, method: str, path: str, headers: dict[str, Any], body_size: int
    ) -> None:
        """Log a raw inbound HTTP request at DEBUG level.

        Args:
            method: HTTP verb.
            path: Request path.
            headers: Request headers (will be sanitized).
            body_size: Body length in characters.
        """
        self._write_line(
            "DEBUG",
            {
                "type": "request",
                "method": method,
                "path": path,
                "headers": redact(headers),
                "body_size": body_size,
            },
        )

    def log_dispatch(
        self, request_id: Any, method: str, status: str, duration_ms: float
    ) -> None:
        """Log the outcome of one dispatched envelope.

        Args:
            request_id: Envelope id.
            method: JSON-RPC method.
            status: "success" or "error".
            duration_ms: Dispatch time in milliseconds.
        """
        self._write_line(
            "INFO",
            {
                "type": "dispatch",
                "request_id": request_id,
                "rpc_method": method,
                "status": status,
                "duration_ms": round(duration_ms, 3),
            },
        )

    def log_error(self, stage: str, error: BaseException, **details: Any) -> None:
        """Log a failure.

        Only the exception type and text are recorded, never a traceback.

        Args:
            stage: Pipeline stage where the failure was caught.
            error: The exception.
            **details: Extra context (ids, method names).
        """
        self._write_line(
            "ERROR",
            {
                "type": "error",
                "stage": stage,
                "error_type": type(error).__name__,
                "error": str(error),
                **details,
            },
        )

    def close(self) -> None:
        """Close the underlying file if this log opened it."""
        if self._owns_stream and not self._stream.closed:
            self._stream.close()

    def __enter__(self) -> EventLog:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
