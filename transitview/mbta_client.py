"""
Async MBTA v3 API client.

Thin wrapper around httpx. Fetches routes, route patterns, vehicles and alerts.
Raises MBTAError on failures.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong while contacting the MBTA."


class MBTAError(Exception):
    """Raised when an MBTA API call fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        malformed: bool = False,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.malformed = malformed


def error_detail(body: Any) -> Optional[str]:
    """Return the detail of the first structured error in an MBTA error body."""
    try:
        detail = body["errors"][0]["detail"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(detail, str) and detail:
        return detail
    return None


class MBTAClient:
    """Async client for the MBTA v3 API."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api-v3.mbta.com",
        api_key: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        if self._api_key:
            return {"x-api-key": self._api_key}
        return {}

    async def fetch_route(self, route_id: str) -> Optional[dict]:
        """
        Fetch a single route record.

        Returns the `data` object, or None if the response has none.
        """
        data = await self._fetch(f"/routes/{quote(route_id, safe='')}")
        return data if isinstance(data, dict) else None

    async def fetch_route_patterns(self, route_id: str) -> list[dict]:
        """Fetch all route patterns of a route. Returns the `data` array."""
        data = await self._fetch("/route_patterns", {"filter[route]": route_id})
        return _as_list(data)

    async def fetch_vehicle(self, vehicle_id: str) -> Optional[dict]:
        """Fetch a single vehicle record, or None if the response has none."""
        data = await self._fetch(f"/vehicles/{quote(vehicle_id, safe='')}")
        return data if isinstance(data, dict) else None

    async def fetch_alerts(
        self, activities: Iterable[str] = ("BOARD", "EXIT", "RIDE")
    ) -> list[dict]:
        """Fetch alerts affecting the given rider activities. Returns the `data` array."""
        params = {"filter[activity]": ",".join(activities)}
        return _as_list(await self._fetch("/alerts", params))

    async def _fetch(self, path: str, params: Optional[dict] = None) -> Any:
        """
        Make an HTTP GET request to the MBTA API and return the `data` member.

        A body without `data` yields None.
        """
        url = f"{self._base_url}{path}"
        try:
            response = await self._http.get(
                url, params=params, headers=self._headers(), timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            logger.error("MBTA request failed: %s %s -> %s", "GET", url, exc)
            raise MBTAError(str(exc) or GENERIC_ERROR) from exc

        if response.status_code != 200:
            raise MBTAError(
                _message_for(response),
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            logger.error("MBTA returned a non-JSON body for %s", url)
            raise MBTAError(
                "MBTA returned a malformed response", malformed=True
            ) from exc

        if not isinstance(body, dict):
            return None
        return body.get("data")


def _message_for(response: httpx.Response) -> str:
    try:
        detail = error_detail(response.json())
    except ValueError:
        detail = None
    if detail:
        return detail
    if response.status_code == 429:
        return "Rate limited by MBTA"
    return f"MBTA returned {response.status_code}"


def _as_list(data: Any) -> list[dict]:
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]
