"""MCP server implementation for Google Calendar.

Provides 8 tools:

- list_calendars, get_calendar
- list_events, get_event
- create_event, update_event, delete_event
- list_colors

Transport: Stdio (for Claude Desktop)
Authentication: OAuth 2.0 refresh token, exchanged on every call
"""

from gcalendar_mcp.config import CalendarSettings, load_settings
from gcalendar_mcp.server.calendar_server import (
    GoogleCalendarServer,
    main,
    run_server,
)


def create_server(settings: CalendarSettings | None = None) -> GoogleCalendarServer:
    """Create and configure a Google Calendar MCP server.

    Args:
        settings: Configuration to use; loaded from the environment if omitted.

    Returns:
        GoogleCalendarServer: Configured server instance ready to run.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return GoogleCalendarServer(settings or load_settings())


__all__ = ["create_server", "GoogleCalendarServer", "main", "run_server"]
