from __future__ import annotations

import asyncio
import logging

from heweather.clients.qweather import (
    AIR_NOW_PATH,
    WARNING_NOW_PATH,
    WEATHER_HOURLY_PATH,
    WEATHER_NOW_PATH,
    QWeatherClient,
    daily_forecast_path,
)
from heweather.core.config import ApiType, Settings
from heweather.core.errors import STATUS_CODE_REFERENCE, ApiError, ConfigurationError
from heweather.models.weather import ResolvedCity, WeatherSnapshot
from heweather.schemas.qweather import (
    AirResponse,
    DailyResponse,
    HourlyResponse,
    NowResponse,
    ResponseEnvelope,
    ResponseT,
    WarningResponse,
    parse_response,
)
from heweather.services.city import CityResolver

logger = logging.getLogger(__name__)

FREE_FORECAST_DAYS = (3, 7)
FACETS = ("Now", "Daily", "Air", "Warning", "Hourly")


def validate_forecast_days(*, api_type: ApiType, forecast_days: int) -> None:
    low, high = FREE_FORECAST_DAYS
    if api_type == ApiType.FREE and not low <= forecast_days <= high:
        raise ConfigurationError(
            f"When api type is 0 (free subscription), forecast days must be {low}<=x<={high}"
        )


class WeatherAggregator:
    """Fetches the five weather facets of a resolved city.

    The facets are requested concurrently and all of them are awaited before
    anything is inspected, so one failing or slow facet never cancels the
    others. A snapshot is only returned when every facet validated.
    """

    def __init__(self, *, client: QWeatherClient, settings: Settings) -> None:
        validate_forecast_days(
            api_type=settings.qweather_apitype,
            forecast_days=settings.qweather_forecast_days,
        )
        self._client = client
        self._forecast_days = settings.qweather_forecast_days

    async def fetch_all(self, city: ResolvedCity) -> WeatherSnapshot:
        results = await asyncio.gather(
            self._get_now(city.id),
            self._get_daily(city.id),
            self._get_air(city.id),
            self._get_warning(city.id),
            self._get_hourly(city.id),
            return_exceptions=True,
        )

        errors = [
            (facet, result)
            for facet, result in zip(FACETS, results)
            if isinstance(result, BaseException)
        ]
        if errors:
            for facet, error in errors[1:]:
                logger.warning("%s facet for %s also failed: %r", facet, city.id, error)
            raise errors[0][1]

        now, daily, air, warning, hourly = results
        self._validate(now=now, daily=daily, air=air, warning=warning, hourly=hourly)
        return WeatherSnapshot(
            city=city,
            now=now,
            daily=daily,
            air=air,
            warning=warning,
            hourly=hourly,
        )

    async def _get(
        self,
        path: str,
        city_id: str,
        model: type[ResponseT],
        *,
        source: str,
        ok_codes: tuple[str, ...] = ("200",),
    ) -> ResponseT | ResponseEnvelope:
        payload = await self._client.request(path, params={"location": city_id})
        envelope = parse_response(ResponseEnvelope, payload, source=source)
        # Failing facets are left to _validate, whatever the rest of the body holds.
        if envelope.code not in ok_codes:
            return envelope
        return parse_response(model, payload, source=source)

    async def _get_now(self, city_id: str) -> NowResponse | ResponseEnvelope:
        return await self._get(WEATHER_NOW_PATH, city_id, NowResponse, source="current weather")

    async def _get_daily(self, city_id: str) -> DailyResponse | ResponseEnvelope:
        return await self._get(
            daily_forecast_path(self._forecast_days),
            city_id,
            DailyResponse,
            source="daily forecast",
        )

    async def _get_air(self, city_id: str) -> AirResponse | ResponseEnvelope:
        return await self._get(AIR_NOW_PATH, city_id, AirResponse, source="air quality")

    async def _get_warning(self, city_id: str) -> WarningResponse | ResponseEnvelope | None:
        response = await self._get(
            WARNING_NOW_PATH,
            city_id,
            WarningResponse,
            source="warning",
            ok_codes=("200", "204"),
        )
        # 204: no active warnings for this city.
        if response.code == "204":
            return None
        return response

    async def _get_hourly(self, city_id: str) -> HourlyResponse | ResponseEnvelope:
        return await self._get(
            WEATHER_HOURLY_PATH, city_id, HourlyResponse, source="hourly forecast"
        )

    @staticmethod
    def _validate(
        *,
        now: ResponseEnvelope | NowResponse,
        daily: ResponseEnvelope | DailyResponse,
        air: ResponseEnvelope | AirResponse,
        warning: ResponseEnvelope | WarningResponse | None,
        hourly: ResponseEnvelope | HourlyResponse,
    ) -> None:
        failures: dict[str, str] = {}
        for facet, response in zip(FACETS, (now, daily, air, warning, hourly)):
            if response is None:
                continue
            if response.code != "200":
                failures[facet] = response.code

        if failures:
            summary = ", ".join(f"{facet}: {code}" for facet, code in failures.items())
            raise ApiError(
                f"API validation failed: {summary}\nRefer to: {STATUS_CODE_REFERENCE}",
                failures=failures,
            )


class WeatherService:
    def __init__(self, *, client: QWeatherClient, settings: Settings) -> None:
        self._resolver = CityResolver(client)
        self._aggregator = WeatherAggregator(client=client, settings=settings)

    async def load(self, location: str) -> WeatherSnapshot:
        city = await self._resolver.resolve(location)
        return await self._aggregator.fetch_all(city)
