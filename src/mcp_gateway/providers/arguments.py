"""Schema-driven preparation of tool arguments.

Tools declare numeric bounds in their input schema. Out-of-range numbers are
clamped into those bounds rather than rejected, missing or zero values fall
back to the schema default, and the result is then validated with JSON Schema.
"""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from mcp_gateway.providers.base import ProviderError, ToolDefinition

NUMERIC_TYPES = ("number", "integer")


class InvalidArgumentsError(ProviderError):
    """Raised when tool arguments do not satisfy the tool's schema."""

    pass


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _clamp(value: int | float, schema: dict[str, Any]) -> int | float:
    minimum = schema.get("minimum")
    maximum = schema.get("maximum")
    if minimum is not None and value < minimum:
        value = minimum
    if maximum is not None and value > maximum:
        value = maximum
    if schema.get("type") == "integer":
        value = int(value)
    return value


def apply_numeric_bounds(
    arguments: dict[str, Any], schema: dict[str, Any]
) -> dict[str, Any]:
    """Fill numeric defaults and clamp numeric values into schema bounds.

    Non-numeric values are left untouched so that schema validation can
    report them.

    Args:
        arguments: Raw tool arguments from the request.
        schema: The tool's input schema.

    Returns:
        New argument dictionary.
    """
    prepared = dict(arguments)
    properties = schema.get("properties", {})

    for key, prop_schema in properties.items():
        if prop_schema.get("type") not in NUMERIC_TYPES:
            continue

        value = prepared.get(key)
        if not value and "default" in prop_schema:
            prepared[key] = prop_schema["default"]
        elif _is_number(value):
            prepared[key] = _clamp(value, prop_schema)

    return prepared


def validate_arguments(tool: ToolDefinition, arguments: dict[str, Any]) -> None:
    """Validate arguments against a tool's input schema.

    Args:
        tool: The tool being invoked.
        arguments: Arguments to validate.

    Raises:
        InvalidArgumentsError: If validation fails or the schema is invalid.
    """
    try:
        Draft202012Validator.check_schema(tool.input_schema)
        validator = Draft202012Validator(tool.input_schema)
        errors = list(validator.iter_errors(arguments))
    except SchemaError as e:
        raise InvalidArgumentsError(f"Invalid schema for tool {tool.name}: {e}") from e

    if errors:
        # Report first error
        error = errors[0]
        path = ".".join(str(p) for p in error.path) if error.path else "root"
        raise InvalidArgumentsError(
            f"Invalid arguments for tool {tool.name} at '{path}': {error.message}"
        )


def prepare_arguments(tool: ToolDefinition, arguments: dict[str, Any]) -> dict[str, Any]:
    """Clamp and validate arguments for a tool invocation.

    Args:
        tool: The tool being invoked.
        arguments: Raw tool arguments.

    Returns:
        Arguments ready for the tool implementation.

    Raises:
        InvalidArgumentsError: If the prepared arguments fail validation.
    """
    prepared = apply_numeric_bounds(arguments, tool.input_schema)
    validate_arguments(tool, prepared)
    return prepared
