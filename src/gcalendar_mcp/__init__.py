"""Google Calendar MCP Server.

Exposes Google Calendar (calendars, events, colors) to MCP clients as a
fixed set of tools.
"""

from gcalendar_mcp.__version__ import __version__

__all__ = ["__version__"]
