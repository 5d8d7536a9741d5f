"""Static registry of the calendar tools.

The input schemas are plain JSON-Schema data. They are returned verbatim to
``tools/list`` and interpreted by ``gcalendar_mcp.tools.validation`` when a
call comes in; nothing here executes.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from mcp.types import Tool

CALENDAR_ID_DESCRIPTION = "Calendar ID (use 'primary' for main calendar)"


def freeze_schema(value: Any) -> Any:
    """Return a read-only copy: mappings become proxies, lists become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_schema(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_schema(item) for item in value)
    return value


def thaw_schema(value: Any) -> Any:
    """Return a plain dict/list copy of a frozen schema value."""
    if isinstance(value, Mapping):
        return {key: thaw_schema(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw_schema(item) for item in value]
    return value


@dataclass(frozen=True)
class ToolDefinition:
    """One tool: its name, description and input contract.

    Attributes:
        name: Unique tool name.
        description: Human-readable description shown to the client.
        input_schema: JSON-Schema object describing the arguments.
    """

    name: str
    description: str
    input_schema: Mapping[str, Any]

    def __post_init__(self) -> None:
        # Nested levels are frozen too; schema_dict() hands out editable copies
        object.__setattr__(self, "input_schema", freeze_schema(self.input_schema))

    @property
    def required_fields(self) -> frozenset[str]:
        return frozenset(self.input_schema.get("required", ()))

    @property
    def properties(self) -> Mapping[str, Mapping[str, Any]]:
        return self.input_schema.get("properties", {})

    def schema_dict(self) -> dict[str, Any]:
        """Return a mutable deep copy of the input schema."""
        return thaw_schema(self.input_schema)

    def to_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.schema_dict())


class ToolRegistry:
    """Ordered, read-only collection of ToolDefinitions."""

    def __init__(self, definitions: list[ToolDefinition]) -> None:
        names = [d.name for d in definitions]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate tool names: {', '.join(duplicates)}")
        self._definitions = tuple(definitions)
        self._by_name = {d.name: d for d in self._definitions}

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> ToolDefinition | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [d.name for d in self._definitions]

    def list_tools(self) -> list[Tool]:
        """Build the ``tools/list`` payload, in registry order."""
        return [d.to_tool() for d in self._definitions]


def _calendar_id(**extra: Any) -> dict[str, Any]:
    return {"type": "string", "description": CALENDAR_ID_DESCRIPTION, **extra}


def _event_fields(default_timezone: str) -> dict[str, dict[str, Any]]:
    """Properties shared by create_event and update_event."""
    return {
        "summary": {
            "type": "string",
            "description": "Event title",
        },
        "start_time": {
            "type": "string",
            "description": "Start time (ISO format)",
        },
        "end_time": {
            "type": "string",
            "description": "End time (ISO format)",
        },
        "description": {
            "type": "string",
            "description": "Event description",
        },
        "attendees": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of attendee emails",
        },
        "location": {
            "type": "string",
            "description": "Event location",
        },
        "timezone": {
            "type": "string",
            "description": f"Timezone for the event (default: {default_timezone})",
            "default": default_timezone,
        },
    }


def build_registry(default_timezone: str) -> ToolRegistry:
    """Build the calendar tool registry.

    Args:
        default_timezone: Timezone injected into create/update calls that
            do not name one.

    Returns:
        ToolRegistry with all calendar tools, in their published order.
    """
    return ToolRegistry(
        [
            ToolDefinition(
                name="list_calendars",
                description="List all available calendars",
                input_schema={"type": "object", "properties": {}, "required": []},
            ),
            ToolDefinition(
                name="get_calendar",
                description="Get details of a specific calendar",
                input_schema={
                    "type": "object",
                    "properties": {"calendarId": _calendar_id()},
                    "required": ["calendarId"],
                },
            ),
            ToolDefinition(
                name="list_events",
                description="List events from a calendar with filtering options",
                input_schema={
                    "type": "object",
                    "properties": {
                        "calendarId": _calendar_id(),
                        "timeMin": {
                            "type": "string",
                            "description": "Start time (ISO format, optional)",
                        },
                        "timeMax": {
                            "type": "string",
                            "description": "End time (ISO format, optional)",
                        },
                        "maxResults": {
                            "type": "integer",
                            "description": "Maximum number of events to return (default: 10)",
                            "default": 10,
                        },
                    },
                    "required": ["calendarId"],
                },
            ),
            ToolDefinition(
                name="get_event",
                description="Get detailed information about a specific event",
                input_schema={
                    "type": "object",
                    "properties": {
                        "calendarId": _calendar_id(),
                        "eventId": {"type": "string", "description": "Event ID"},
                    },
                    "required": ["calendarId", "eventId"],
                },
            ),
            ToolDefinition(
                name="create_event",
                description=(
                    "Create a calendar event with specified details. Times should be "
                    f"specified in ISO format. Default timezone is {default_timezone}."
                ),
                input_schema={
                    "type": "object",
                    "properties": {
                        "calendarId": _calendar_id(default="primary"),
                        **_event_fields(default_timezone),
                    },
                    "required": ["summary", "start_time", "end_time"],
                },
            ),
            ToolDefinition(
                name="update_event",
                description=(
                    "Update an existing calendar event. Only the fields given are changed. "
                    f"Default timezone is {default_timezone}."
                ),
                input_schema={
                    "type": "object",
                    "properties": {
                        "calendarId": _calendar_id(),
                        "eventId": {"type": "string", "description": "Event ID to update"},
                        **_event_fields(default_timezone),
                    },
                    "required": ["calendarId", "eventId"],
                },
            ),
            ToolDefinition(
                name="delete_event",
                description="Delete a calendar event",
                input_schema={
                    "type": "object",
                    "properties": {
                        "calendarId": _calendar_id(),
                        "eventId": {"type": "string", "description": "Event ID to delete"},
                        "sendUpdates": {
                            "type": "string",
                            "description": "Send updates to attendees (all, externalOnly, none)",
                            "enum": ["all", "externalOnly", "none"],
                            "default": "all",
                        },
                    },
                    "required": ["calendarId", "eventId"],
                },
            ),
            ToolDefinition(
                name="list_colors",
                description="List available colors for events and calendars",
                input_schema={"type": "object", "properties": {}, "required": []},
            ),
        ]
    )
