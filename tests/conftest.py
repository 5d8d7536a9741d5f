"""Shared pytest fixtures for gcalendar-mcp tests.

This module provides reusable fixtures for token storage, a fake
access-token provider and a fake HTTP client standing in for the Google
Calendar API.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest

from gcalendar_mcp.auth.models import OAuthToken, StoredToken, TokenMetadata
from gcalendar_mcp.client import CalendarClient
from gcalendar_mcp.config import CalendarSettings
from gcalendar_mcp.dispatcher import ToolDispatcher
from gcalendar_mcp.operations import CalendarOperations
from gcalendar_mcp.tools.registry import ToolRegistry, build_registry

TEST_TIMEZONE = "Europe/Berlin"

# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def valid_token() -> OAuthToken:
    """Create a valid, non-expired OAuth token."""
    return OAuthToken(
        access_token="test_access_token_abc123",
        refresh_token="test_refresh_token_xyz789",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        scopes=["https://www.googleapis.com/auth/calendar"],
        token_type="Bearer",
    )


@pytest.fixture
def expired_token() -> OAuthToken:
    """Create an expired OAuth token."""
    return OAuthToken(
        access_token="expired_access_token",
        refresh_token="test_refresh_token",
        expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        scopes=["https://www.googleapis.com/auth/calendar"],
        token_type="Bearer",
    )


@pytest.fixture
def token_metadata() -> TokenMetadata:
    """Create token metadata for testing."""
    return TokenMetadata(
        service_name="gcalendar-mcp",
        provider="google",
        created_at=datetime.now(timezone.utc) - timedelta(days=1),
    )


@pytest.fixture
def stored_token(valid_token: OAuthToken, token_metadata: TokenMetadata) -> StoredToken:
    """Create a complete stored token for testing."""
    return StoredToken(version=1, metadata=token_metadata, token=valid_token)


# =============================================================================
# Token Storage Fixtures
# =============================================================================


@pytest.fixture
def temp_token_path(tmp_path: Path) -> Path:
    """Path for a tokens.json file inside a not-yet-created credentials dir."""
    return tmp_path / ".gcalendar-mcp" / "tokens.json"


@pytest.fixture
def token_storage(temp_token_path: Path):
    """Create a TokenStorage instance with temporary storage."""
    from gcalendar_mcp.auth.token_storage import TokenStorage

    return TokenStorage(token_path=temp_token_path)


# =============================================================================
# Google API Fakes
# =============================================================================


class FakeTokenProvider:
    """Access-token provider that never talks to Google."""

    def __init__(self, token: str = "mock_access_token_12345") -> None:
        self.token = token
        self.calls = 0

    async def get_access_token(self) -> str:
        self.calls += 1
        return self.token


class FakeHTTPClient:
    """Stand-in for httpx.AsyncClient that records requests.

    Queued responses are returned in order; an exception instance in the
    queue is raised instead. With an empty queue every request gets
    ``200 {}``.
    """

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self._responses: list[Any] = []
        self.closed = False

    def queue(self, json_data: Any = None, status_code: int = 200) -> None:
        self._responses.append((status_code, json_data))

    def queue_error(self, error: Exception) -> None:
        self._responses.append(error)

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        self.requests.append({"method": method, "url": url, **kwargs})
        item = self._responses.pop(0) if self._responses else (200, {})
        if isinstance(item, Exception):
            raise item

        status_code, json_data = item
        request = httpx.Request(method, url)
        if json_data is None:
            return httpx.Response(status_code, request=request)
        return httpx.Response(status_code, json=json_data, request=request)

    async def aclose(self) -> None:
        self.closed = True

    @property
    def last_request(self) -> dict[str, Any]:
        return self.requests[-1]


@pytest.fixture
def token_provider() -> FakeTokenProvider:
    return FakeTokenProvider()


@pytest.fixture
def http_client() -> FakeHTTPClient:
    return FakeHTTPClient()


@pytest.fixture
def calendar_client(token_provider: FakeTokenProvider, http_client: FakeHTTPClient) -> CalendarClient:
    """CalendarClient wired to the fakes."""
    return CalendarClient(token_provider, http_client=http_client)  # type: ignore[arg-type]


@pytest.fixture
def operations(calendar_client: CalendarClient) -> CalendarOperations:
    return CalendarOperations(calendar_client)


# =============================================================================
# Registry / Dispatcher Fixtures
# =============================================================================


@pytest.fixture
def registry() -> ToolRegistry:
    return build_registry(TEST_TIMEZONE)


@pytest.fixture
def dispatcher(registry: ToolRegistry, operations: CalendarOperations) -> ToolDispatcher:
    return ToolDispatcher(registry, operations.handlers(), call_timeout=5.0)


@pytest.fixture
def settings() -> CalendarSettings:
    return CalendarSettings(
        client_id="test_client_id",
        client_secret="test_client_secret",  # pragma: allowlist secret
        refresh_token="test_refresh_token",
        default_timezone=TEST_TIMEZONE,
        call_timeout=5.0,
        refresh_token_source="environment",
    )
