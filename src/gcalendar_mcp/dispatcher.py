"""Route tool calls to calendar operations.

``ToolDispatcher.dispatch`` is the boundary between the MCP protocol layer
and the operation set: it validates the call, runs the operation under a
deadline and turns every outcome into a ``CallToolResult``.
"""

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

from mcp.types import CallToolResult

from gcalendar_mcp.config import DEFAULT_CALL_TIMEOUT
from gcalendar_mcp.envelope import failure_envelope, success_envelope
from gcalendar_mcp.errors import (
    CalendarMCPError,
    DeadlineExceededError,
    MissingArgumentsError,
    UnknownToolError,
)
from gcalendar_mcp.operations import Operation
from gcalendar_mcp.tools.registry import ToolRegistry
from gcalendar_mcp.tools.validation import resolve_arguments

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Validate, route and envelope tool calls.

    Holds no per-call state, so concurrent dispatches need no locking.

    Attributes:
        registry: Tool definitions used for lookup and argument resolution.
        call_timeout: Seconds an operation may run before it is cancelled.
            None disables the deadline.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        handlers: Mapping[str, Operation],
        call_timeout: float | None = DEFAULT_CALL_TIMEOUT,
    ) -> None:
        unbound = [name for name in registry.names() if name not in handlers]
        if unbound:
            raise ValueError(f"No operation bound for tool(s): {', '.join(unbound)}")
        self.registry = registry
        self.call_timeout = call_timeout
        self._handlers = dict(handlers)

    async def dispatch(
        self, name: str, arguments: Mapping[str, Any] | None
    ) -> CallToolResult:
        """Handle one tool call.

        Args:
            name: Requested tool name.
            arguments: Raw arguments from the client, None when absent.

        Returns:
            Envelope describing the outcome; never raises for call failures.
        """
        logger.info(f"Call tool request received: {name}")
        try:
            result = await self._execute(name, arguments)
        except UnknownToolError as e:
            logger.warning(f"Unknown tool requested: {e.tool_name}")
            return failure_envelope(e)
        except CalendarMCPError as e:
            logger.warning(f"Tool {name} failed ({e.kind.value}): {e.message}")
            return failure_envelope(e)
        except Exception as e:
            logger.exception(f"Unexpected error calling tool {name}")
            return failure_envelope(e)

        logger.info(f"Tool execution successful for: {name}")
        return success_envelope(result)

    async def _execute(self, name: str, arguments: Mapping[str, Any] | None) -> Any:
        definition = self.registry.get(name)
        if definition is None:
            raise UnknownToolError(name)

        if arguments is None and definition.required_fields:
            raise MissingArgumentsError(f"No arguments provided for tool '{name}'")

        resolved = resolve_arguments(definition, arguments)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Dispatching {name} with arguments: {json.dumps(resolved, indent=2)}")

        operation = self._handlers[name]
        try:
            return await asyncio.wait_for(operation(resolved), timeout=self.call_timeout)
        except asyncio.TimeoutError as e:
            raise DeadlineExceededError(
                f"Tool '{name}' did not complete within {self.call_timeout:g} seconds"
            ) from e
