"""Calendar operations bound to the MCP tools.

Each operation receives arguments already resolved against its tool schema
(required fields present, defaults applied) and only shapes them into a
Calendar API request. What the request means is up to Google.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from gcalendar_mcp.client import CalendarClient

logger = logging.getLogger(__name__)

Operation = Callable[[dict[str, Any]], Awaitable[Any]]

# Event fields copied verbatim from the tool arguments when supplied
_PLAIN_EVENT_FIELDS = ("summary", "description", "location")


def _time_slot(date_time: str, timezone: str) -> dict[str, str]:
    return {"dateTime": date_time, "timeZone": timezone}


def _attendees(addresses: list[str]) -> list[dict[str, str]]:
    return [{"email": address} for address in addresses]


def build_event_body(arguments: dict[str, Any], timezone: str) -> dict[str, Any]:
    """Build an event resource from tool arguments.

    Only fields present in ``arguments`` end up in the body, which makes the
    result usable both for inserts and for partial updates.

    Args:
        arguments: Resolved tool arguments.
        timezone: Timezone attached to start and end times.

    Returns:
        Event resource in Calendar API shape.
    """
    event: dict[str, Any] = {}
    for field in _PLAIN_EVENT_FIELDS:
        if field in arguments:
            event[field] = arguments[field]
    if "start_time" in arguments:
        event["start"] = _time_slot(arguments["start_time"], timezone)
    if "end_time" in arguments:
        event["end"] = _time_slot(arguments["end_time"], timezone)
    if "attendees" in arguments:
        event["attendees"] = _attendees(arguments["attendees"])
    return event


class CalendarOperations:
    """The operation set behind the calendar tools.

    Attributes:
        client: Calendar API client used for every call.
    """

    def __init__(self, client: CalendarClient) -> None:
        self.client = client

    def handlers(self) -> dict[str, Operation]:
        """Map tool names to their bound operations."""
        return {
            "list_calendars": self.list_calendars,
            "get_calendar": self.get_calendar,
            "list_events": self.list_events,
            "get_event": self.get_event,
            "create_event": self.create_event,
            "update_event": self.update_event,
            "delete_event": self.delete_event,
            "list_colors": self.list_colors,
        }

    async def list_calendars(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        """List calendars on the user's calendar list.

        Returns:
            Calendar list entries; empty when the user has none.
        """
        logger.debug("Listing calendars")
        response = await self.client.list_calendar_list()
        return response.get("items") or []

    async def get_calendar(self, arguments: dict[str, Any]) -> dict[str, Any]:
        calendar_id = arguments["calendarId"]
        logger.debug(f"Getting calendar: {calendar_id}")
        return await self.client.get_calendar(calendar_id)

    async def list_events(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        """List events in start-time order with recurring events expanded.

        The time window is only bounded on the sides the caller supplied.
        """
        calendar_id = arguments["calendarId"]
        logger.debug(f"Listing events for calendar: {calendar_id}")

        params: dict[str, Any] = {
            "maxResults": arguments["maxResults"],
            "singleEvents": True,
            "orderBy": "startTime",
        }
        if arguments.get("timeMin"):
            params["timeMin"] = arguments["timeMin"]
        if arguments.get("timeMax"):
            params["timeMax"] = arguments["timeMax"]

        response = await self.client.list_events(calendar_id, params)
        return response.get("items") or []

    async def get_event(self, arguments: dict[str, Any]) -> dict[str, Any]:
        calendar_id = arguments["calendarId"]
        event_id = arguments["eventId"]
        logger.debug(f"Getting event: {event_id} from calendar: {calendar_id}")
        return await self.client.get_event(calendar_id, event_id)

    async def create_event(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Create an event.

        Args:
            arguments: summary, start_time, end_time, calendarId and timezone,
                plus optional description, location and attendees.

        Returns:
            The created event, including its Google-assigned id.
        """
        calendar_id = arguments["calendarId"]
        timezone = arguments["timezone"]

        event = build_event_body(arguments, timezone)
        logger.debug(f"Creating event in {calendar_id} with timezone: {timezone}")
        return await self.client.insert_event(calendar_id, event)

    async def update_event(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Partially update an event.

        Only fields present in the call are sent; everything else on the
        event is left untouched. The timezone only applies when start_time
        or end_time is being changed.
        """
        calendar_id = arguments["calendarId"]
        event_id = arguments["eventId"]
        timezone = arguments["timezone"]

        changes = build_event_body(arguments, timezone)
        logger.debug(f"Updating event {event_id} fields: {sorted(changes)}")
        return await self.client.patch_event(calendar_id, event_id, changes)

    async def delete_event(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Delete an event.

        Returns:
            Confirmation dict; Google returns no body for deletes.
        """
        calendar_id = arguments["calendarId"]
        event_id = arguments["eventId"]
        logger.debug(f"Deleting event: {event_id} from calendar: {calendar_id}")

        await self.client.delete_event(calendar_id, event_id, arguments["sendUpdates"])
        return {"success": True, "message": f"Event {event_id} deleted successfully"}

    async def list_colors(self, arguments: dict[str, Any]) -> dict[str, Any]:
        logger.debug("Listing colors")
        return await self.client.get_colors()
