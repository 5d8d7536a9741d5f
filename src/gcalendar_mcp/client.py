"""Thin async client for the Google Calendar REST API (v3).

Each method maps to exactly one API call and returns Google's JSON payload
untouched. Failures are translated into the gcalendar-mcp error taxonomy so
the dispatcher only ever sees ``CalendarMCPError`` subclasses.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from gcalendar_mcp.auth.token_provider import AccessTokenProvider
from gcalendar_mcp.errors import DeadlineExceededError, UpstreamError

logger = logging.getLogger(__name__)

CALENDAR_API_BASE = "https://www.googleapis.com/calendar/v3"

DEFAULT_HTTP_TIMEOUT = 30.0


def _segment(value: str) -> str:
    """Encode an id for use as a single path segment.

    Calendar ids routinely contain '@' and '#'.
    """
    return quote(value, safe="")


def _describe_http_error(response: httpx.Response) -> str:
    """Extract Google's error message from a failed response."""
    message = ""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            message = error.get("message") or ""
        elif isinstance(error, str):
            message = payload.get("error_description") or error

    if not message:
        message = response.reason_phrase or "request failed"
    return f"Google Calendar API error ({response.status_code}): {message}"


class CalendarClient:
    """Authenticated access to the Calendar API.

    Attributes:
        token_provider: Source of bearer tokens, consulted before every request.
        base_url: API root, overridable for tests.
        timeout: HTTP timeout in seconds for a single request.
    """

    def __init__(
        self,
        token_provider: AccessTokenProvider,
        base_url: str = CALENDAR_API_BASE,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.token_provider = token_provider
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create shared HTTP client with connection pooling."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
                timeout=httpx.Timeout(self.timeout, connect=10.0),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and return the decoded JSON body.

        Returns:
            Response JSON, or an empty dict for bodiless responses (204).

        Raises:
            UpstreamError: If Google returns an error status or the network fails.
            DeadlineExceededError: If the HTTP request times out.
        """
        access_token = await self.token_provider.get_access_token()
        client = await self._get_http_client()
        url = f"{self.base_url}{path}"

        logger.debug(f"{method} {url} params={params}")
        try:
            response = await client.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                _describe_http_error(e.response), status_code=e.response.status_code
            ) from e
        except httpx.TimeoutException as e:
            raise DeadlineExceededError(
                f"Google Calendar did not respond within {self.timeout:g} seconds"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to Google Calendar failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return {}
        try:
            result: dict[str, Any] = response.json()
        except ValueError as e:
            raise UpstreamError(
                "Google Calendar returned a malformed response", status_code=response.status_code
            ) from e
        return result

    async def list_calendar_list(self) -> dict[str, Any]:
        return await self._request("GET", "/users/me/calendarList")

    async def get_calendar(self, calendar_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/calendars/{_segment(calendar_id)}")

    async def list_events(self, calendar_id: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "GET", f"/calendars/{_segment(calendar_id)}/events", params=params
        )

    async def get_event(self, calendar_id: str, event_id: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/calendars/{_segment(calendar_id)}/events/{_segment(event_id)}"
        )

    async def insert_event(self, calendar_id: str, event: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "POST", f"/calendars/{_segment(calendar_id)}/events", json_data=event
        )

    async def patch_event(
        self, calendar_id: str, event_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """Apply a partial update; fields missing from ``changes`` are left as they are."""
        return await self._request(
            "PATCH",
            f"/calendars/{_segment(calendar_id)}/events/{_segment(event_id)}",
            json_data=changes,
        )

    async def delete_event(self, calendar_id: str, event_id: str, send_updates: str) -> None:
        await self._request(
            "DELETE",
            f"/calendars/{_segment(calendar_id)}/events/{_segment(event_id)}",
            params={"sendUpdates": send_updates},
        )

    async def get_colors(self) -> dict[str, Any]:
        return await self._request("GET", "/colors")
