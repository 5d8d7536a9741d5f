"""Uniform response envelopes for tool calls.

Every call, successful or not, is answered with exactly one
``CallToolResult`` holding a single text item.
"""

import json
from typing import Any

from mcp.types import CallToolResult, TextContent

from gcalendar_mcp.errors import CalendarMCPError, UnknownToolError


def _text_result(text: str, is_error: bool) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def _safe_repr(value: object) -> str:
    try:
        return repr(value)
    except Exception:
        return object.__repr__(value)


def render_value(value: Any) -> str:
    """Render an operation result as text.

    Strings pass through unchanged; anything else becomes indented JSON.
    Never raises, even when a nested value cannot be stringified.
    """
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, indent=2, default=str, ensure_ascii=False)
    except Exception:
        # e.g. circular references, or a nested __str__ that raises
        return _safe_repr(value)


def error_message(error: object) -> str:
    """Extract a human-readable message from whatever a call failed with.

    Never raises, even when the error's own ``__str__`` does.
    """
    if isinstance(error, CalendarMCPError):
        return error.message
    try:
        message = str(error)
    except Exception:
        message = ""
    if message:
        return message
    if isinstance(error, BaseException):
        return type(error).__name__
    return _safe_repr(error)


def success_envelope(value: Any) -> CallToolResult:
    return _text_result(render_value(value), is_error=False)


def failure_envelope(error: object) -> CallToolResult:
    """Wrap a failure as ``Error: <message>``.

    Unknown tools keep the bare ``Unknown tool: <name>`` text existing
    clients match on.
    """
    if isinstance(error, UnknownToolError):
        return _text_result(error.message, is_error=True)
    return _text_result(f"Error: {error_message(error)}", is_error=True)
