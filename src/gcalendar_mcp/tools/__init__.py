"""Tool registry and argument resolution."""

from gcalendar_mcp.tools.registry import ToolDefinition, ToolRegistry, build_registry
from gcalendar_mcp.tools.validation import resolve_arguments

__all__ = ["ToolDefinition", "ToolRegistry", "build_registry", "resolve_arguments"]
