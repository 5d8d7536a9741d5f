"""Unit tests for CalendarOperations."""

import pytest

from gcalendar_mcp.operations import CalendarOperations, build_event_body


@pytest.mark.unit
class TestBuildEventBody:
    """Tests for build_event_body()."""

    def test_should_build_full_event(self) -> None:
        body = build_event_body(
            {
                "summary": "Planning",
                "description": "Q3 roadmap",
                "location": "Room 4",
                "start_time": "2025-03-01T10:00:00",
                "end_time": "2025-03-01T11:00:00",
                "attendees": ["a@example.com", "b@example.com"],
                "calendarId": "primary",
            },
            "Europe/Berlin",
        )

        assert body == {
            "summary": "Planning",
            "description": "Q3 roadmap",
            "location": "Room 4",
            "start": {"dateTime": "2025-03-01T10:00:00", "timeZone": "Europe/Berlin"},
            "end": {"dateTime": "2025-03-01T11:00:00", "timeZone": "Europe/Berlin"},
            "attendees": [{"email": "a@example.com"}, {"email": "b@example.com"}],
        }

    def test_should_omit_absent_fields(self) -> None:
        assert build_event_body({"summary": "Only a title"}, "UTC") == {"summary": "Only a title"}


@pytest.mark.unit
class TestReadOperations:
    """Tests for the read-only operations."""

    @pytest.mark.asyncio
    async def test_should_list_calendars(self, operations: CalendarOperations, http_client) -> None:
        http_client.queue({"kind": "calendar#calendarList", "items": [{"id": "primary"}]})

        result = await operations.list_calendars({})

        assert result == [{"id": "primary"}]

    @pytest.mark.asyncio
    async def test_should_return_empty_list_without_items(
        self, operations: CalendarOperations, http_client
    ) -> None:
        http_client.queue({"kind": "calendar#calendarList"})

        assert await operations.list_calendars({}) == []

    @pytest.mark.asyncio
    async def test_should_list_events_with_fixed_ordering(
        self, operations: CalendarOperations, http_client
    ) -> None:
        http_client.queue({"items": [{"id": "e1"}, {"id": "e2"}]})

        result = await operations.list_events(
            {"calendarId": "primary", "maxResults": 5, "timeMin": "2025-03-01T00:00:00Z"}
        )

        assert result == [{"id": "e1"}, {"id": "e2"}]
        assert http_client.last_request["params"] == {
            "maxResults": 5,
            "singleEvents": True,
            "orderBy": "startTime",
            "timeMin": "2025-03-01T00:00:00Z",
        }

    @pytest.mark.asyncio
    async def test_should_not_bound_window_with_empty_strings(
        self, operations: CalendarOperations, http_client
    ) -> None:
        await operations.list_events(
            {"calendarId": "primary", "maxResults": 10, "timeMin": "", "timeMax": ""}
        )

        params = http_client.last_request["params"]
        assert "timeMin" not in params
        assert "timeMax" not in params

    @pytest.mark.asyncio
    async def test_should_return_records_unchanged(
        self, operations: CalendarOperations, http_client
    ) -> None:
        event = {"id": "e1", "status": "confirmed", "htmlLink": "https://calendar.google.com/e1"}
        http_client.queue(event)

        assert await operations.get_event({"calendarId": "primary", "eventId": "e1"}) == event

    @pytest.mark.asyncio
    async def test_should_get_calendar_and_colors(
        self, operations: CalendarOperations, http_client
    ) -> None:
        http_client.queue({"id": "work@example.com", "timeZone": "Europe/Berlin"})
        http_client.queue({"calendar": {"1": {"background": "#ac725e"}}, "event": {}})

        calendar = await operations.get_calendar({"calendarId": "work@example.com"})
        colors = await operations.list_colors({})

        assert calendar["timeZone"] == "Europe/Berlin"
        assert colors["calendar"]["1"]["background"] == "#ac725e"
        assert http_client.last_request["url"].endswith("/colors")


@pytest.mark.unit
class TestWriteOperations:
    """Tests for create, update and delete."""

    @pytest.mark.asyncio
    async def test_should_create_event(self, operations: CalendarOperations, http_client) -> None:
        http_client.queue({"id": "new1", "summary": "Lunch"})

        result = await operations.create_event(
            {
                "calendarId": "primary",
                "timezone": "Asia/Tokyo",
                "summary": "Lunch",
                "start_time": "2025-03-01T12:00:00",
                "end_time": "2025-03-01T13:00:00",
            }
        )

        request = http_client.last_request
        assert result["id"] == "new1"
        assert request["method"] == "POST"
        assert request["url"].endswith("/calendars/primary/events")
        assert request["json"]["start"] == {"dateTime": "2025-03-01T12:00:00", "timeZone": "Asia/Tokyo"}
        assert "attendees" not in request["json"]

    @pytest.mark.asyncio
    async def test_should_send_only_changed_fields_on_update(
        self, operations: CalendarOperations, http_client
    ) -> None:
        await operations.update_event(
            {"calendarId": "primary", "eventId": "e1", "timezone": "UTC", "location": "Room 9"}
        )

        request = http_client.last_request
        assert request["method"] == "PATCH"
        assert request["url"].endswith("/calendars/primary/events/e1")
        assert request["json"] == {"location": "Room 9"}

    @pytest.mark.asyncio
    async def test_should_confirm_delete(self, operations: CalendarOperations, http_client) -> None:
        http_client.queue(status_code=204)

        result = await operations.delete_event(
            {"calendarId": "primary", "eventId": "e1", "sendUpdates": "externalOnly"}
        )

        assert result == {"success": True, "message": "Event e1 deleted successfully"}
        assert http_client.last_request["params"] == {"sendUpdates": "externalOnly"}

    def test_should_bind_every_tool(self, operations: CalendarOperations, registry) -> None:
        assert sorted(operations.handlers()) == sorted(registry.names())
