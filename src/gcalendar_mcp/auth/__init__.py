"""OAuth authentication for Google Calendar MCP.

Two separate concerns live here:

* the one-time consent flow (``OAuthManager``) that obtains a refresh token,
* the per-call exchange of that refresh token for an access token
  (``RefreshTokenProvider``), injected into the calendar client.

Quick Start:
    ```python
    from gcalendar_mcp.auth import OAuthManager, RefreshTokenProvider

    token = await OAuthManager().authenticate(
        client_id="your-client-id",
        client_secret="your-client-secret",  # pragma: allowlist secret
    )

    provider = RefreshTokenProvider("your-client-id", "your-client-secret", token.refresh_token)
    access_token = await provider.get_access_token()
    ```
"""

from gcalendar_mcp.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)
from gcalendar_mcp.auth.oauth_manager import CALENDAR_SCOPES, OAuthManager
from gcalendar_mcp.auth.token_provider import AccessTokenProvider, RefreshTokenProvider
from gcalendar_mcp.auth.token_storage import SERVICE_NAME, TokenStorage

__all__ = [
    "AccessTokenProvider",
    "CALENDAR_SCOPES",
    "OAuthManager",
    "OAuthToken",
    "RefreshTokenProvider",
    "SERVICE_NAME",
    "StoredToken",
    "TokenMetadata",
    "TokenStatus",
    "TokenStorage",
]
