from __future__ import annotations

import math
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from heweather.core.config import HourlyType, Settings
from heweather.models.weather import (
    AirQualityView,
    DailyRow,
    HourlyRow,
    RenderContext,
    WeatherSnapshot,
)
from heweather.schemas.qweather import Air, Daily, Hourly

AIR_CATEGORY_COLORS: dict[str, str] = {
    "优": "#95B359",
    "良": "#A9A538",
    "轻度污染": "#E0991D",
    "中度污染": "#D96161",
    "重度污染": "#A257D0",
    "严重污染": "#D94371",
}

TODAY_LABEL = "今日"
# Sunday-indexed, like date.isoweekday() % 7.
WEEKDAY_LABELS = ("周日", "周一", "周二", "周三", "周四", "周五", "周六")


def tag_color(category: str) -> str | None:
    return AIR_CATEGORY_COLORS.get(category)


def tag_air(air: Air) -> AirQualityView:
    return AirQualityView(
        category=air.category,
        aqi=air.aqi,
        pm2p5=air.pm2p5,
        pm10=air.pm10,
        o3=air.o3,
        co=air.co,
        no2=air.no2,
        so2=air.so2,
        tag_color=tag_color(air.category),
    )


def weekday_label(day: date) -> str:
    return WEEKDAY_LABELS[day.isoweekday() % 7]


def label_days(daily: list[Daily]) -> list[DailyRow]:
    rows: list[DailyRow] = []
    for idx, day in enumerate(daily):
        fx_date = date.fromisoformat(day.fx_date)
        rows.append(
            DailyRow(
                fx_date=day.fx_date,
                temp_max=day.temp_max,
                temp_min=day.temp_min,
                text_day=day.text_day,
                text_night=day.text_night,
                icon_day=day.icon_day,
                icon_night=day.icon_night,
                weekday_label=TODAY_LABEL if idx == 0 else weekday_label(fx_date),
                formatted_date=f"{fx_date.month}月{fx_date.day}日",
            )
        )
    return rows


def _parse_temperature(value: str) -> int:
    return int(float(value))


def _parse_time(value: str) -> datetime:
    # Example: "2021-02-16T15:00+08:00"
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def hour_label(value: str, tz: ZoneInfo) -> str:
    hour = _parse_time(value).astimezone(tz).hour
    clock = 12 if hour % 12 == 0 else hour % 12
    return f"{clock}{'AM' if hour < 12 else 'PM'}"


def height_percent(temperature: int, *, low: int, high: int) -> int:
    if high == low:
        return 100
    return math.floor((temperature - low) / (high - low) * 100 + 0.5)


def build_hourly_rows(
    hourly: list[Hourly], hourly_type: HourlyType, timezone_name: str
) -> list[HourlyRow]:
    """Label and scale the hourly forecast, then pick the rows to display.

    ``low`` sits one full temperature range below the minimum so the coldest
    hour is drawn at half height rather than at the bottom. Scale bounds come
    from the whole series, before the 12h/24h selection is applied.
    """
    if not hourly:
        return []

    temps = [_parse_temperature(hour.temp) for hour in hourly]
    high = max(temps)
    low = min(temps) - (high - min(temps))
    tz = ZoneInfo(timezone_name)

    rows = [
        HourlyRow(
            time=hour.fx_time,
            temperature=temp,
            icon=hour.icon,
            description=hour.text,
            label=hour_label(hour.fx_time, tz),
            height_percent=height_percent(temp, low=low, high=high),
        )
        for hour, temp in zip(hourly, temps)
    ]

    if hourly_type == HourlyType.CURRENT_12H:
        return rows[:12]
    if hourly_type == HourlyType.CURRENT_24H:
        return rows[::2]
    return rows


def build_render_context(snapshot: WeatherSnapshot, settings: Settings) -> RenderContext:
    air = snapshot.air.now
    return RenderContext(
        now=snapshot.now.now,
        days=label_days(snapshot.daily.daily),
        city=snapshot.city_name,
        warning=snapshot.warning.warning if snapshot.warning is not None else None,
        air=tag_air(air) if air is not None else None,
        hours=build_hourly_rows(
            snapshot.hourly.hourly, settings.qweather_hourlytype, settings.timezone
        ),
    )
