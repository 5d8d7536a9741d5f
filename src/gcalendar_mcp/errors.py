"""Error taxonomy for tool dispatch.

Every failure a tool call can end in maps to one ``ErrorKind``. The
dispatcher converts all of them into ``isError`` envelopes; only the
startup checks in the CLI and server entry point treat
``ConfigurationError`` as fatal.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced to MCP clients."""

    MISSING_ARGUMENTS = "missing_arguments"
    INVALID_ARGUMENTS = "invalid_arguments"
    UNKNOWN_TOOL = "unknown_tool"
    UPSTREAM_FAILURE = "upstream_failure"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    AUTH_FAILURE = "auth_failure"
    CONFIGURATION_FAILURE = "configuration_failure"


class CalendarMCPError(Exception):
    """Base class for all errors raised by gcalendar-mcp.

    Attributes:
        kind: The ErrorKind this error belongs to.
        message: Human-readable message shown to the MCP client.
    """

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingArgumentsError(CalendarMCPError):
    """Required arguments were not supplied."""

    kind = ErrorKind.MISSING_ARGUMENTS


class InvalidArgumentsError(CalendarMCPError):
    """An argument does not match the tool's input schema."""

    kind = ErrorKind.INVALID_ARGUMENTS


class UnknownToolError(CalendarMCPError):
    """The requested tool name is not registered."""

    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class UpstreamError(CalendarMCPError):
    """Google Calendar rejected or failed the request.

    Attributes:
        status_code: HTTP status returned by Google, None for network faults.
    """

    kind = ErrorKind.UPSTREAM_FAILURE

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DeadlineExceededError(CalendarMCPError):
    """The call did not complete before its deadline."""

    kind = ErrorKind.DEADLINE_EXCEEDED


class AuthError(CalendarMCPError):
    """Exchanging the refresh token for an access token failed."""

    kind = ErrorKind.AUTH_FAILURE


class ConfigurationError(CalendarMCPError):
    """Required credentials or settings are missing."""

    kind = ErrorKind.CONFIGURATION_FAILURE
