from __future__ import annotations

from dataclasses import dataclass

from heweather.schemas.qweather import (
    AirResponse,
    DailyResponse,
    HourlyResponse,
    Now,
    NowResponse,
    WarningResponse,
    WeatherWarning,
)


@dataclass(frozen=True)
class ResolvedCity:
    id: str
    name: str


@dataclass(frozen=True)
class WeatherSnapshot:
    city: ResolvedCity
    now: NowResponse
    daily: DailyResponse
    air: AirResponse
    warning: WarningResponse | None
    hourly: HourlyResponse

    @property
    def city_name(self) -> str:
        return self.city.name


@dataclass(frozen=True)
class AirQualityView:
    category: str
    aqi: str
    pm2p5: str
    pm10: str
    o3: str
    co: str
    no2: str
    so2: str
    tag_color: str | None


@dataclass(frozen=True)
class DailyRow:
    fx_date: str
    temp_max: str
    temp_min: str
    text_day: str
    text_night: str
    icon_day: str
    icon_night: str
    weekday_label: str
    formatted_date: str


@dataclass(frozen=True)
class HourlyRow:
    time: str
    temperature: int
    icon: str
    description: str
    label: str
    height_percent: int


@dataclass(frozen=True)
class RenderContext:
    now: Now | None
    days: list[DailyRow]
    city: str
    warning: list[WeatherWarning] | None
    air: AirQualityView | None
    hours: list[HourlyRow]

    def as_template_context(self) -> dict[str, object]:
        return {
            "now": self.now,
            "days": self.days,
            "city": self.city,
            "warning": self.warning,
            "air": self.air,
            "hours": self.hours,
        }
