"""Runtime configuration for gcalendar-mcp.

Environment Variables:
    GOOGLE_CLIENT_ID: Google OAuth client ID (required)
    GOOGLE_CLIENT_SECRET: Google OAuth client secret (required)
    GOOGLE_REFRESH_TOKEN: Long-lived refresh token. Falls back to the token
        stored by ``gcalendar-mcp setup`` when unset.
    GOOGLE_CALENDAR_TIMEZONE: Default event timezone (default: America/Chicago)
    GOOGLE_CALENDAR_TIMEOUT: Per-call deadline in seconds (default: 30)
    GCALENDAR_MCP_LOG_LEVEL: Log level for stderr diagnostics (default: INFO)

A ``.env`` file in the working directory is loaded first; variables already
present in the environment take precedence.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from gcalendar_mcp.auth.oauth_manager import OAuthManager
from gcalendar_mcp.auth.token_storage import TokenStorage
from gcalendar_mcp.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Chicago"
DEFAULT_CALL_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class CalendarSettings:
    """Settings shared read-only by every tool call.

    Attributes:
        client_id: Google OAuth client ID.
        client_secret: Google OAuth client secret.
        refresh_token: Refresh credential exchanged for access tokens.
        default_timezone: Timezone applied to event times when none is given.
        call_timeout: Deadline in seconds for a single tool call.
        log_level: Logging level name.
        refresh_token_source: Where the refresh token came from
            ("environment", "token store" or "missing").
    """

    client_id: str | None
    client_secret: str | None
    refresh_token: str | None
    default_timezone: str = DEFAULT_TIMEZONE
    call_timeout: float = DEFAULT_CALL_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    refresh_token_source: str = "missing"

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.client_id:
            missing.append("GOOGLE_CLIENT_ID")
        if not self.client_secret:
            missing.append("GOOGLE_CLIENT_SECRET")
        return missing

    def require_client_credentials(self) -> None:
        """Fail fast when the OAuth client is not configured.

        Raises:
            ConfigurationError: If the client ID or secret is missing.
        """
        missing = self.missing_env_vars
        if missing:
            raise ConfigurationError(
                f"{' and '.join(missing)} environment variable(s) are required"
            )


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {name}={raw!r}, using {default}")
        return default
    return value


def load_settings(
    env_file: str | Path | None = ".env",
    storage: TokenStorage | None = None,
) -> CalendarSettings:
    """Load settings from the environment (and an optional .env file).

    Args:
        env_file: Path of the .env file to load. None skips .env loading.
        storage: Token storage consulted when GOOGLE_REFRESH_TOKEN is unset.

    Returns:
        CalendarSettings for this process.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)

    refresh_token = os.getenv("GOOGLE_REFRESH_TOKEN") or None
    source = "environment" if refresh_token else "missing"
    if refresh_token is None:
        refresh_token = OAuthManager(storage=storage).get_refresh_token() or None
        if refresh_token:
            source = "token store"

    return CalendarSettings(
        client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
        client_secret=os.getenv("GOOGLE_CLIENT_SECRET") or None,
        refresh_token=refresh_token,
        default_timezone=os.getenv("GOOGLE_CALENDAR_TIMEZONE") or DEFAULT_TIMEZONE,
        call_timeout=_float_from_env("GOOGLE_CALENDAR_TIMEOUT", DEFAULT_CALL_TIMEOUT),
        log_level=(os.getenv("GCALENDAR_MCP_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        refresh_token_source=source,
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Send timestamped diagnostics to stderr.

    stdout carries the MCP protocol stream, so nothing may log there.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
