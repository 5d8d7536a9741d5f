"""One-time OAuth consent flow for Google Calendar.

Runs the installed-app style authorization once, interactively, to obtain
the long-lived refresh token the MCP server needs. The server itself never
runs this flow; it only exchanges the refresh token (see token_provider).

Environment Variables:
    GOOGLE_CLIENT_ID: Google OAuth client ID (required)
    GOOGLE_CLIENT_SECRET: Google OAuth client secret (required)
    GOOGLE_OAUTH_REDIRECT_URI: Redirect URI (default: http://localhost:8080/)
"""

import asyncio
import logging
import os
import secrets
import webbrowser
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from gcalendar_mcp.auth.models import OAuthToken, StoredToken, TokenMetadata, TokenStatus
from gcalendar_mcp.auth.token_storage import SERVICE_NAME, TokenStorage
from gcalendar_mcp.errors import AuthError, ConfigurationError

logger = logging.getLogger(__name__)

CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"  # nosec B105 - public endpoint

DEFAULT_OAUTH_HOST = "localhost"
DEFAULT_OAUTH_PORT = 8080
DEFAULT_REDIRECT_URI = "http://localhost:8080/"

# Seconds to wait for the browser redirect
CALLBACK_TIMEOUT = 300

_SUCCESS_PAGE = (
    b"<html><body><h1>Google Calendar connected</h1>"
    b"<p>You can close this window and return to the terminal.</p></body></html>"
)
_FAILURE_PAGE = (
    b"<html><body><h1>Authorization failed</h1>"
    b"<p>Close this window and run the setup again.</p></body></html>"
)


def _make_callback_handler(callback_path: str, outcome: dict[str, str]) -> type:
    """Build a request handler that captures the OAuth redirect into ``outcome``."""

    class CallbackHandler(BaseHTTPRequestHandler):
        def log_message(self, format: str, *args) -> None:
            """Keep the access log out of the terminal."""

        def _reply(self, status: int, body: bytes) -> None:
            self.send_response(status)
            self.send_header("Content-type", "text/html")
            self.end_headers()
            self.wfile.write(body)

        def do_GET(self) -> None:
            request = urlparse(self.path)
            if request.path != callback_path:
                self.send_response(404)
                self.end_headers()
                return

            query = parse_qs(request.query)
            if "error" in query:
                outcome["error"] = query["error"][0]
                self._reply(400, _FAILURE_PAGE)
            elif "code" in query:
                outcome["code"] = query["code"][0]
                outcome["state"] = query.get("state", [""])[0]
                self._reply(200, _SUCCESS_PAGE)
            else:
                outcome["error"] = "no authorization code in redirect"
                self._reply(400, _FAILURE_PAGE)

    return CallbackHandler


class OAuthManager:
    """Runs the consent flow and keeps the resulting tokens on disk.

    Attributes:
        storage: Token storage instance for persisting credentials.

    Example:
        ```python
        manager = OAuthManager()
        token = await manager.authenticate(client_id="...", client_secret="...")
        print(token.refresh_token)
        ```
    """

    def __init__(self, storage: TokenStorage | None = None) -> None:
        self.storage = storage or TokenStorage()
        self._service_name = SERVICE_NAME

    @property
    def token_path(self) -> Path:
        """Path of the tokens.json file."""
        return self.storage.token_path

    def get_status(self) -> tuple[TokenStatus, StoredToken | None]:
        """Get the status of the stored token.

        Returns:
            Tuple of (TokenStatus, StoredToken or None).
        """
        status = self.storage.get_status(self._service_name)
        stored = self.storage.retrieve(self._service_name)
        return (status, stored)

    def get_refresh_token(self) -> str | None:
        """Return the stored refresh token, if setup has been run."""
        stored = self.storage.retrieve(self._service_name)
        if stored is None:
            return None
        return stored.token.refresh_token

    def _credentials_to_token(self, credentials: Credentials, scopes: list[str]) -> OAuthToken:
        """Convert google-auth Credentials to OAuthToken."""
        if credentials.expiry:
            expires_at = credentials.expiry
            # google-auth reports naive UTC datetimes
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
        else:
            expires_at = datetime.now(timezone.utc) + timedelta(hours=1)

        return OAuthToken(  # nosec B106 - "Bearer" is the OAuth token type
            access_token=credentials.token,
            refresh_token=credentials.refresh_token,
            expires_at=expires_at,
            scopes=scopes,
            token_type="Bearer",
        )

    async def authenticate(
        self,
        client_id: str | None,
        client_secret: str | None,
        scopes: list[str] | None = None,
    ) -> OAuthToken:
        """Run the consent flow and store the resulting token.

        Args:
            client_id: Google OAuth client ID.
            client_secret: Google OAuth client secret.
            scopes: Scopes to request. Defaults to CALENDAR_SCOPES.

        Returns:
            OAuthToken containing the access and refresh tokens.

        Raises:
            ConfigurationError: If client ID or secret is missing.
            AuthError: If authorization is denied or yields no refresh token.
        """
        if not client_id or not client_secret:
            raise ConfigurationError(
                "GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET are required to authorize"
            )

        scopes = scopes or CALENDAR_SCOPES
        redirect_uri = os.environ.get("GOOGLE_OAUTH_REDIRECT_URI", DEFAULT_REDIRECT_URI)
        client_config = {
            "web": {
                "client_id": client_id,
                "client_secret": client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
                "redirect_uris": [redirect_uri],
            }
        }

        # The flow blocks on a local HTTP server
        loop = asyncio.get_running_loop()
        credentials = await loop.run_in_executor(
            None, self._run_oauth_flow, client_config, scopes, redirect_uri
        )

        if not credentials.refresh_token:
            raise AuthError(
                "Google did not return a refresh token. Revoke the app's access at "
                "https://myaccount.google.com/permissions and run setup again."
            )

        token = self._credentials_to_token(credentials, scopes)
        metadata = TokenMetadata(service_name=self._service_name, provider="google")
        self.storage.store(self._service_name, token, metadata)
        return token

    def _run_oauth_flow(
        self, client_config: dict, scopes: list[str], redirect_uri: str
    ) -> Credentials:
        """Open the consent page and wait for the redirect (blocking).

        Args:
            client_config: Google OAuth client configuration (web type).
            scopes: OAuth scopes to request.
            redirect_uri: Redirect URI the local server listens on.

        Returns:
            Google OAuth2 credentials with a refresh token.
        """
        flow = Flow.from_client_config(client_config, scopes=scopes, redirect_uri=redirect_uri)

        state = secrets.token_urlsafe(32)
        # offline + consent makes Google issue a refresh token every time
        auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent", state=state)

        parsed = urlparse(redirect_uri)
        host = parsed.hostname or DEFAULT_OAUTH_HOST
        port = parsed.port or DEFAULT_OAUTH_PORT
        callback_path = parsed.path or "/"

        outcome: dict[str, str] = {}
        server = HTTPServer((host, port), _make_callback_handler(callback_path, outcome))
        server.timeout = CALLBACK_TIMEOUT

        print("Authorize this app by visiting this url:")
        print(auth_url)
        webbrowser.open(auth_url)

        try:
            server.handle_request()
        finally:
            server.server_close()

        if "error" in outcome:
            raise AuthError(f"OAuth authorization failed: {outcome['error']}")
        if "code" not in outcome:
            raise AuthError("No authorization code received from Google")
        if outcome.get("state") != state:
            raise AuthError("OAuth state mismatch; possible CSRF, aborting")

        flow.fetch_token(code=outcome["code"])
        logger.info("Authorization code exchanged for tokens")
        return flow.credentials
