"""Resolve raw tool arguments against a tool's input schema.

This is the single place where the declarative schemas in the registry are
interpreted: defaults are injected, required fields are enforced and each
value is checked against its declared type, enum and array item type.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from gcalendar_mcp.errors import InvalidArgumentsError, MissingArgumentsError
from gcalendar_mcp.tools.registry import ToolDefinition, thaw_schema

logger = logging.getLogger(__name__)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    "string": lambda value: isinstance(value, str),
    "integer": _is_integer,
    "number": _is_number,
    "boolean": lambda value: isinstance(value, bool),
    "array": lambda value: isinstance(value, list),
    "object": lambda value: isinstance(value, dict),
}


def _check_value(tool: str, field: str, schema: Mapping[str, Any], value: Any) -> None:
    """Check one value against its property schema.

    Raises:
        InvalidArgumentsError: If the value has the wrong type or is not allowed.
    """
    expected = schema.get("type")
    check = _TYPE_CHECKS.get(expected) if expected else None
    if check is not None and not check(value):
        raise InvalidArgumentsError(
            f"Argument '{field}' of tool '{tool}' must be of type {expected}, "
            f"got {type(value).__name__}"
        )

    allowed = schema.get("enum")
    if allowed is not None and value not in allowed:
        raise InvalidArgumentsError(
            f"Argument '{field}' of tool '{tool}' must be one of "
            f"{', '.join(map(str, allowed))}; got {value!r}"
        )

    items = schema.get("items")
    if expected == "array" and items:
        for index, item in enumerate(value):
            _check_value(tool, f"{field}[{index}]", items, item)


def resolve_arguments(
    definition: ToolDefinition, arguments: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Produce the argument dict an operation is called with.

    Fields that are absent or null take their schema default when one is
    declared. Fields the schema does not declare are dropped.

    Args:
        definition: Tool whose schema applies.
        arguments: Arguments as sent by the client, or None.

    Returns:
        New dict containing only declared fields, with defaults applied.

    Raises:
        MissingArgumentsError: If a required field is absent after defaulting.
        InvalidArgumentsError: If a value does not match its schema.
    """
    provided = dict(arguments or {})
    resolved: dict[str, Any] = {}

    for field, schema in definition.properties.items():
        value = provided.get(field)
        if value is None:
            if "default" not in schema:
                continue
            value = thaw_schema(schema["default"])
        _check_value(definition.name, field, schema, value)
        resolved[field] = value

    missing = sorted(definition.required_fields - set(resolved))
    if missing:
        raise MissingArgumentsError(
            f"Missing required argument(s) for tool '{definition.name}': {', '.join(missing)}"
        )

    ignored = sorted(set(provided) - set(definition.properties))
    if ignored:
        logger.debug(f"Ignoring undeclared arguments for {definition.name}: {ignored}")

    return resolved
