"""Command-line interface for gcalendar-mcp."""
