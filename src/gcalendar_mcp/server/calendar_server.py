"""Google Calendar MCP server for Claude Desktop and other MCP clients.

Serves two requests over stdio:

* ``tools/list`` returns the static tool registry,
* ``tools/call`` runs one calendar operation through the dispatcher.

Google credentials come from the environment (see gcalendar_mcp.config);
access tokens are minted from the refresh token on every call.
"""

import asyncio
import logging
import sys

import httpx
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolRequest, ServerResult, Tool

from gcalendar_mcp.__version__ import __version__
from gcalendar_mcp.auth.token_provider import AccessTokenProvider, RefreshTokenProvider
from gcalendar_mcp.client import CalendarClient
from gcalendar_mcp.config import CalendarSettings, configure_logging, load_settings
from gcalendar_mcp.dispatcher import ToolDispatcher
from gcalendar_mcp.errors import ConfigurationError
from gcalendar_mcp.operations import CalendarOperations
from gcalendar_mcp.tools.registry import build_registry

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp_google_calendar"


class GoogleCalendarServer:
    """MCP server exposing Google Calendar tools.

    Attributes:
        settings: Process configuration.
        server: MCP Server instance.
        registry: Tool registry served by ``tools/list``.
        client: Calendar API client shared by all calls.
        dispatcher: Routes ``tools/call`` requests to operations.
    """

    def __init__(
        self,
        settings: CalendarSettings,
        token_provider: AccessTokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            settings: Loaded configuration.
            token_provider: Access-token source; defaults to exchanging the
                configured refresh token.
            http_client: Pre-built HTTP client, mainly for tests.
        """
        self.settings = settings
        self.server = Server(SERVER_NAME, version=__version__)
        self.registry = build_registry(settings.default_timezone)

        if token_provider is None:
            token_provider = RefreshTokenProvider(
                client_id=settings.client_id,
                client_secret=settings.client_secret,
                refresh_token=settings.refresh_token,
            )
        self.client = CalendarClient(
            token_provider, timeout=settings.call_timeout, http_client=http_client
        )
        operations = CalendarOperations(self.client)
        self.dispatcher = ToolDispatcher(
            self.registry, operations.handlers(), call_timeout=settings.call_timeout
        )
        self._setup_handlers()
        logger.info(f"Server initialized with {len(self.registry)} tools")

    def _setup_handlers(self) -> None:
        """Register MCP request handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return list of available tools."""
            logger.info(f"List tools request received - returning {len(self.registry)} tools")
            return self.registry.list_tools()

        # Registered on the raw request so that a call without "arguments"
        # reaches the dispatcher as None rather than an empty dict.
        self.server.request_handlers[CallToolRequest] = self._handle_call_tool

    async def _handle_call_tool(self, request: CallToolRequest) -> ServerResult:
        params = request.params
        result = await self.dispatcher.dispatch(params.name, params.arguments)
        return ServerResult(result)

    async def close(self) -> None:
        await self.client.close()

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        logger.info(f"Starting server with {len(self.registry)} tools")
        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info("Server connected to stdio transport")
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def run_server(settings: CalendarSettings) -> None:
    """Validate startup configuration and serve until stdin closes.

    Raises:
        ConfigurationError: If the OAuth client is not configured.
    """
    settings.require_client_credentials()
    if not settings.refresh_token:
        logger.warning(
            "GOOGLE_REFRESH_TOKEN is not set; calendar tools will fail until it is configured"
        )
    server = GoogleCalendarServer(settings)
    asyncio.run(server.run())


def main() -> None:
    """Entry point for the Google Calendar MCP server."""
    settings = load_settings()
    configure_logging(settings.log_level)
    try:
        run_server(settings)
    except ConfigurationError as e:
        logger.critical(f"Error: {e.message}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Server stopped")


if __name__ == "__main__":
    main()
