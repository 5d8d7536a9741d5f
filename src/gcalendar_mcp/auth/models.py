"""Pydantic models for persisted OAuth tokens."""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenStatus(str, Enum):
    """State of the token stored for a service."""

    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"
    INVALID = "invalid"


class OAuthToken(BaseModel):
    """Access/refresh token pair returned by Google's token endpoint.

    Attributes:
        access_token: Short-lived bearer token.
        refresh_token: Long-lived credential used to mint new access tokens.
        expires_at: When the access token expires (UTC).
        scopes: Scopes granted to the token.
        token_type: OAuth token type, always "Bearer" for Google.
    """

    access_token: str = Field(..., description="Short-lived bearer token")
    refresh_token: str | None = Field(default=None, description="Long-lived refresh token")
    expires_at: datetime = Field(..., description="Access token expiry (UTC)")
    scopes: list[str] = Field(default_factory=list, description="Granted scopes")
    token_type: str = Field(default="Bearer", description="OAuth token type")

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """Check whether the access token is expired or about to expire.

        Args:
            buffer_seconds: Treat the token as expired this many seconds early.

        Returns:
            True if the token should no longer be used.
        """
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return _utcnow() + timedelta(seconds=buffer_seconds) >= expires_at


class TokenMetadata(BaseModel):
    """Bookkeeping stored next to a token."""

    service_name: str = Field(..., description="Service the token belongs to")
    provider: str = Field(default="google", description="OAuth provider")
    created_at: datetime = Field(default_factory=_utcnow)
    last_refreshed: datetime | None = None


class StoredToken(BaseModel):
    """On-disk record: a token plus its metadata."""

    version: int = 1
    metadata: TokenMetadata
    token: OAuthToken
