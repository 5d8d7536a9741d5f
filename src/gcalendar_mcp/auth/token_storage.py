"""JSON token storage for tokens obtained by ``gcalendar-mcp setup``.

Storage Location: ./.gcalendar-mcp/tokens.json (project level)

The stored refresh token is only a fallback: GOOGLE_REFRESH_TOKEN in the
environment always takes precedence when the server starts.
"""

import json
import logging
from pathlib import Path

from gcalendar_mcp.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)

logger = logging.getLogger(__name__)

# Service key under which setup stores its token
SERVICE_NAME = "gcalendar-mcp"

CREDENTIALS_DIR_NAME = ".gcalendar-mcp"
TOKEN_FILE_NAME = "tokens.json"


def get_token_path() -> Path:
    """Get the project-level token storage path.

    Returns:
        Path to tokens.json inside ./.gcalendar-mcp/
    """
    return Path.cwd() / CREDENTIALS_DIR_NAME / TOKEN_FILE_NAME


class TokenStorage:
    """Plain JSON storage for OAuth tokens, keyed by service name.

    The credentials directory is created lazily on first write with 0700
    permissions; the token file is written with 0600.

    Attributes:
        token_path: Path to the tokens.json file.

    Example:
        ```python
        storage = TokenStorage()
        stored = storage.retrieve("gcalendar-mcp")
        if stored:
            print(stored.token.refresh_token)
        ```
    """

    def __init__(self, token_path: Path | None = None) -> None:
        """Initialize token storage.

        Args:
            token_path: Custom path for tokens.json. Defaults to
                ./.gcalendar-mcp/tokens.json in the working directory.
        """
        self.token_path = token_path or get_token_path()

    def _ensure_credentials_dir(self) -> None:
        """Create credentials directory with owner-only permissions."""
        creds_dir = self.token_path.parent
        if not creds_dir.exists():
            creds_dir.mkdir(parents=True, mode=0o700)
        else:
            creds_dir.chmod(0o700)

    def _load_tokens(self) -> dict[str, dict]:
        if not self.token_path.exists():
            return {}

        try:
            with open(self.token_path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read token file {self.token_path}: {e}")
            return {}

        if not isinstance(data, dict):
            return {}
        return data

    def _save_tokens(self, tokens: dict[str, dict]) -> None:
        self._ensure_credentials_dir()

        with open(self.token_path, "w") as f:
            json.dump(tokens, f, indent=2, default=str)

        self.token_path.chmod(0o600)

    def store(self, service_name: str, token: OAuthToken, metadata: TokenMetadata) -> None:
        """Store (or replace) the token for a service.

        Args:
            service_name: Unique identifier for the service.
            token: OAuth token data to store.
            metadata: Token metadata including provider info.
        """
        stored_token = StoredToken(version=1, metadata=metadata, token=token)

        tokens = self._load_tokens()
        tokens[service_name] = json.loads(stored_token.model_dump_json())
        self._save_tokens(tokens)
        logger.info(f"Stored OAuth token for '{service_name}' at {self.token_path}")

    def retrieve(self, service_name: str) -> StoredToken | None:
        """Retrieve a stored token.

        Args:
            service_name: Unique identifier for the service.

        Returns:
            StoredToken if present and well-formed, None otherwise.
        """
        tokens = self._load_tokens()

        if service_name not in tokens:
            return None

        try:
            return StoredToken.model_validate(tokens[service_name])
        except (ValueError, KeyError):
            return None

    def get_status(self, service_name: str) -> TokenStatus:
        """Get the status of a stored token.

        Args:
            service_name: Unique identifier for the service.

        Returns:
            TokenStatus indicating the token's current state.
        """
        stored = self.retrieve(service_name)

        if stored is None:
            if service_name in self._load_tokens():
                return TokenStatus.INVALID
            return TokenStatus.MISSING

        if stored.token.is_expired():
            return TokenStatus.EXPIRED

        return TokenStatus.VALID
