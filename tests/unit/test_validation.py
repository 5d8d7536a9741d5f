"""Unit tests for argument resolution."""

import pytest

from gcalendar_mcp.errors import InvalidArgumentsError, MissingArgumentsError
from gcalendar_mcp.tools.registry import ToolRegistry
from gcalendar_mcp.tools.validation import resolve_arguments


@pytest.mark.unit
class TestDefaults:
    """Tests for default injection."""

    def test_should_default_calendar_and_timezone_on_create(self, registry: ToolRegistry) -> None:
        resolved = resolve_arguments(
            registry.get("create_event"),
            {"summary": "Standup", "start_time": "2025-03-01T09:00:00", "end_time": "2025-03-01T09:15:00"},
        )

        assert resolved["calendarId"] == "primary"
        assert resolved["timezone"] == "Europe/Berlin"

    def test_should_default_max_results(self, registry: ToolRegistry) -> None:
        resolved = resolve_arguments(registry.get("list_events"), {"calendarId": "primary"})

        assert resolved == {"calendarId": "primary", "maxResults": 10}

    def test_should_default_send_updates(self, registry: ToolRegistry) -> None:
        resolved = resolve_arguments(
            registry.get("delete_event"), {"calendarId": "primary", "eventId": "e1"}
        )

        assert resolved["sendUpdates"] == "all"

    def test_should_treat_null_as_absent(self, registry: ToolRegistry) -> None:
        resolved = resolve_arguments(
            registry.get("list_events"), {"calendarId": "primary", "maxResults": None, "timeMin": None}
        )

        assert resolved["maxResults"] == 10
        assert "timeMin" not in resolved

    def test_should_keep_explicit_values(self, registry: ToolRegistry) -> None:
        resolved = resolve_arguments(
            registry.get("delete_event"),
            {"calendarId": "work", "eventId": "e1", "sendUpdates": "none"},
        )

        assert resolved == {"calendarId": "work", "eventId": "e1", "sendUpdates": "none"}

    def test_should_not_mutate_input(self, registry: ToolRegistry) -> None:
        arguments = {"calendarId": "primary"}

        resolve_arguments(registry.get("list_events"), arguments)

        assert arguments == {"calendarId": "primary"}

    def test_should_drop_undeclared_arguments(self, registry: ToolRegistry) -> None:
        resolved = resolve_arguments(
            registry.get("get_calendar"), {"calendarId": "primary", "colorRgbFormat": True}
        )

        assert resolved == {"calendarId": "primary"}

    def test_should_accept_none_for_tools_without_required_fields(
        self, registry: ToolRegistry
    ) -> None:
        assert resolve_arguments(registry.get("list_calendars"), None) == {}


@pytest.mark.unit
class TestRequiredFields:
    """Tests for required-field enforcement."""

    def test_should_name_every_missing_field(self, registry: ToolRegistry) -> None:
        with pytest.raises(MissingArgumentsError) as exc_info:
            resolve_arguments(registry.get("create_event"), {"summary": "Lunch"})

        assert exc_info.value.message == (
            "Missing required argument(s) for tool 'create_event': end_time, start_time"
        )

    def test_should_reject_null_required_field(self, registry: ToolRegistry) -> None:
        with pytest.raises(MissingArgumentsError, match="eventId"):
            resolve_arguments(registry.get("get_event"), {"calendarId": "primary", "eventId": None})


@pytest.mark.unit
class TestTypeChecks:
    """Tests for type and enum checks."""

    def test_should_reject_wrong_type(self, registry: ToolRegistry) -> None:
        with pytest.raises(InvalidArgumentsError) as exc_info:
            resolve_arguments(registry.get("list_events"), {"calendarId": "primary", "maxResults": "5"})

        assert exc_info.value.message == (
            "Argument 'maxResults' of tool 'list_events' must be of type integer, got str"
        )

    def test_should_reject_boolean_as_integer(self, registry: ToolRegistry) -> None:
        with pytest.raises(InvalidArgumentsError):
            resolve_arguments(registry.get("list_events"), {"calendarId": "primary", "maxResults": True})

    def test_should_reject_value_outside_enum(self, registry: ToolRegistry) -> None:
        with pytest.raises(InvalidArgumentsError, match="must be one of all, externalOnly, none"):
            resolve_arguments(
                registry.get("delete_event"),
                {"calendarId": "primary", "eventId": "e1", "sendUpdates": "everyone"},
            )

    def test_should_check_array_items(self, registry: ToolRegistry) -> None:
        with pytest.raises(InvalidArgumentsError, match=r"attendees\[1\]"):
            resolve_arguments(
                registry.get("update_event"),
                {"calendarId": "primary", "eventId": "e1", "attendees": ["a@example.com", 42]},
            )
