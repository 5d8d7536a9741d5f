"""Command-line interface for gcalendar-mcp."""

import asyncio
import json
import sys

import click
from dotenv import load_dotenv

from gcalendar_mcp.__version__ import __version__


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Google Calendar MCP Server - Connect MCP clients to Google Calendar.

    Provides 8 tools: list/get calendars, list/get/create/update/delete
    events and list colors.
    """
    # Loaded before subcommand options are parsed so their envvars see .env
    load_dotenv(".env", override=False)


@main.command()
@click.option("--client-id", envvar="GOOGLE_CLIENT_ID", help="Google OAuth client ID")
@click.option("--client-secret", envvar="GOOGLE_CLIENT_SECRET", help="Google OAuth client secret")
def setup(client_id: str | None, client_secret: str | None) -> None:
    """Authorize access to Google Calendar and obtain a refresh token.

    This will:
    1. Open the browser for the Google consent screen
    2. Store the tokens at ./.gcalendar-mcp/tokens.json
    3. Print the refresh token to export as GOOGLE_REFRESH_TOKEN

    Requires GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET (environment, .env or options).
    """
    from gcalendar_mcp.auth import OAuthManager
    from gcalendar_mcp.errors import CalendarMCPError

    if not client_id or not client_secret:
        click.echo("❌ Error: OAuth client credentials required")
        click.echo("")
        click.echo("Set environment variables:")
        click.echo("  export GOOGLE_CLIENT_ID='your-client-id'")
        click.echo("  export GOOGLE_CLIENT_SECRET='your-client-secret'")
        click.echo("")
        click.echo("Or pass as options:")
        click.echo("  gcalendar-mcp setup --client-id=... --client-secret=...")
        sys.exit(1)

    manager = OAuthManager()

    click.echo("Starting OAuth authorization flow...")
    click.echo("Browser will open for Google consent...")
    click.echo("")

    try:
        token = asyncio.run(manager.authenticate(client_id=client_id, client_secret=client_secret))
    except CalendarMCPError as e:
        click.echo(f"❌ Authorization failed: {e.message}")
        sys.exit(1)
    except Exception as e:
        click.echo(f"❌ Authorization failed: {e}")
        sys.exit(1)

    click.echo("✓ Authorization successful!")
    click.echo(f"Token stored at: {manager.token_path}")
    click.echo("")
    click.echo(f"Your refresh token: {token.refresh_token}")
    click.echo("")
    click.echo("Add it to your MCP client configuration or .env file:")
    click.echo(f"  GOOGLE_REFRESH_TOKEN={token.refresh_token}")


@main.command()
def mcp() -> None:
    """Start the MCP server on stdio.

    GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be set. The refresh token
    is read from GOOGLE_REFRESH_TOKEN, or from the token stored by 'setup'.

    This command is typically invoked by the MCP client itself.
    """
    from gcalendar_mcp.config import configure_logging, load_settings
    from gcalendar_mcp.errors import ConfigurationError
    from gcalendar_mcp.server import run_server

    settings = load_settings(env_file=None)
    configure_logging(settings.log_level)

    try:
        click.echo("Starting Google Calendar MCP server...", err=True)
        run_server(settings)
    except ConfigurationError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


@main.command()
def doctor() -> None:
    """Check configuration and authorization status.

    Verifies:
    1. OAuth client credentials configured
    2. Refresh token available
    3. Default timezone and call timeout
    """
    from gcalendar_mcp.auth import OAuthManager, TokenStatus
    from gcalendar_mcp.config import load_settings

    manager = OAuthManager()
    settings = load_settings(env_file=None, storage=manager.storage)

    click.echo("Google Calendar MCP Status:")
    click.echo("")

    click.echo("OAuth client:")
    for var in ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"):
        if var in settings.missing_env_vars:
            click.echo(f"  ❌ {var} not set")
        else:
            click.echo(f"  ✓ {var} set")
    click.echo("")

    click.echo("Refresh token:")
    if settings.refresh_token:
        click.echo(f"  ✓ Found ({settings.refresh_token_source})")
    else:
        click.echo("  ❌ Not configured")
    status, stored = manager.get_status()
    click.echo(f"  Token file: {manager.token_path} ({status.value})")
    if status == TokenStatus.INVALID:
        click.echo("  ⚠️  Token file corrupted; run 'gcalendar-mcp setup' again")
    elif stored is not None and stored.metadata.created_at:
        click.echo(f"  Authorized: {stored.metadata.created_at.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    click.echo("")

    click.echo("Defaults:")
    click.echo(f"  Timezone: {settings.default_timezone}")
    click.echo(f"  Call timeout: {settings.call_timeout:g}s")
    click.echo("")

    if settings.missing_env_vars or not settings.refresh_token:
        click.echo("❌ Setup required. Run 'gcalendar-mcp setup' to authorize.")
        sys.exit(1)
    click.echo("✓ Ready to use!")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print the full tools/list payload as JSON")
def tools(as_json: bool) -> None:
    """List the tools the server exposes."""
    from gcalendar_mcp.config import load_settings
    from gcalendar_mcp.tools import build_registry

    settings = load_settings(env_file=None)
    registry = build_registry(settings.default_timezone)

    if as_json:
        payload = [
            {"name": d.name, "description": d.description, "inputSchema": d.schema_dict()}
            for d in registry
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    for definition in registry:
        required = ", ".join(sorted(definition.required_fields)) or "-"
        click.echo(f"{definition.name:<16} {definition.description}")
        click.echo(f"{'':<16} required: {required}")


if __name__ == "__main__":
    main()
