from __future__ import annotations

import logging
from typing import Any

import httpx

from heweather.core.errors import ApiError, TransportError
from heweather.core.security import CredentialProvider

logger = logging.getLogger(__name__)

QWEATHER_DEFAULT_HOST = "https://api.qweather.com"

CITY_LOOKUP_PATH = "/geo/v2/city/lookup"
WEATHER_NOW_PATH = "/v7/weather/now"
WEATHER_HOURLY_PATH = "/v7/weather/24h"
AIR_NOW_PATH = "/v7/air/now"
WARNING_NOW_PATH = "/v7/warning/now"


def daily_forecast_path(days: int) -> str:
    return f"/v7/weather/{int(days)}d"


class QWeatherClient:
    def __init__(
        self,
        *,
        credentials: CredentialProvider,
        timeout_seconds: float,
        base_url: str = QWEATHER_DEFAULT_HOST,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        headers = self._credentials.headers()
        logger.debug("GET %s params=%s", path, params)
        try:
            resp = await self._client.get(path, params=params, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning("QWeather %s answered HTTP %s", path, status_code)
            raise TransportError(f"HTTP Error: {status_code}", status_code=status_code) from e
        except httpx.HTTPError as e:
            logger.warning("QWeather %s request failed: %s", path, e)
            raise TransportError("Network request failed") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise ApiError(f"Unexpected QWeather response body from {path}") from e
        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected QWeather response shape from {path}")
        return payload
