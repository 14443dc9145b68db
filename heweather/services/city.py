from __future__ import annotations

import logging

from heweather.clients.qweather import CITY_LOOKUP_PATH, QWeatherClient
from heweather.core.errors import STATUS_CODE_REFERENCE, ApiError, CityNotFoundError
from heweather.models.weather import ResolvedCity
from heweather.schemas.qweather import CityLookupResponse, parse_response

logger = logging.getLogger(__name__)


class CityResolver:
    def __init__(self, client: QWeatherClient) -> None:
        self._client = client

    async def resolve(self, location: str) -> ResolvedCity:
        payload = await self._client.request(
            CITY_LOOKUP_PATH, params={"location": location, "number": 1}
        )
        response = parse_response(CityLookupResponse, payload, source="city lookup")

        if response.code == "404":
            raise CityNotFoundError(location)
        if response.code != "200":
            raise ApiError(
                f"Error code: {response.code} - Refer to: {STATUS_CODE_REFERENCE}",
                code=response.code,
            )
        if not response.location:
            raise CityNotFoundError(location)

        match = response.location[0]
        logger.info("Resolved %r to %s (%s)", location, match.name, match.id)
        return ResolvedCity(id=match.id, name=match.name)
