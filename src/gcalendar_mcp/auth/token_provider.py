"""Access-token providers for Google Calendar requests.

The calendar client never builds credentials itself; it asks an injected
``AccessTokenProvider`` for a bearer token before every request. The
production provider exchanges the refresh token on every call and keeps no
token cache, so a rotated refresh token takes effect immediately.
"""

import asyncio
import logging
from typing import Protocol

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from gcalendar_mcp.auth.oauth_manager import CALENDAR_SCOPES, GOOGLE_TOKEN_URI
from gcalendar_mcp.errors import AuthError, ConfigurationError

logger = logging.getLogger(__name__)


class AccessTokenProvider(Protocol):
    """Anything that can hand out a valid Google access token."""

    async def get_access_token(self) -> str:
        """Return a bearer token, raising AuthError on failure."""
        ...


class RefreshTokenProvider:
    """Exchanges a long-lived refresh token for a short-lived access token.

    Attributes:
        client_id: Google OAuth client ID.
        client_secret: Google OAuth client secret.
        refresh_token: Refresh credential obtained through ``gcalendar-mcp setup``.
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        refresh_token: str | None,
        token_uri: str = GOOGLE_TOKEN_URI,
        scopes: list[str] | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.token_uri = token_uri
        self.scopes = scopes or CALENDAR_SCOPES

    def _build_credentials(self) -> Credentials:
        return Credentials(  # nosec B106 - token_uri is the public Google endpoint
            token=None,
            refresh_token=self.refresh_token,
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_uri=self.token_uri,
            scopes=self.scopes,
        )

    async def get_access_token(self) -> str:
        """Mint a fresh access token.

        Returns:
            Access token string.

        Raises:
            ConfigurationError: If no refresh token is configured.
            AuthError: If Google rejects the refresh or cannot be reached.
        """
        if not self.refresh_token:
            raise ConfigurationError(
                "GOOGLE_REFRESH_TOKEN environment variable is required. "
                "Run 'gcalendar-mcp setup' first to obtain your refresh token."
            )

        credentials = self._build_credentials()

        # google-auth refresh is blocking
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, credentials.refresh, Request())
        except RefreshError as e:
            raise AuthError(f"Google rejected the refresh token: {e}") from e
        except TransportError as e:
            raise AuthError(f"Could not reach Google's token endpoint: {e}") from e

        if not credentials.token:
            raise AuthError("Token refresh returned no access token")

        logger.debug("Access token refreshed")
        return credentials.token
