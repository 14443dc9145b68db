from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from heweather.core.errors import ApiError


class QWeatherModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ResponseEnvelope(QWeatherModel):
    """Just the status code; error bodies carry nothing else reliable."""

    code: str


class Location(QWeatherModel):
    id: str = Field(min_length=1)
    name: str
    adm1: str | None = None
    adm2: str | None = None
    country: str | None = None


class CityLookupResponse(QWeatherModel):
    code: str
    location: list[Location] = Field(default_factory=list)


class Now(QWeatherModel):
    obs_time: str = Field(alias="obsTime")
    temp: str
    icon: str
    text: str
    wind_scale: str = Field(default="", alias="windScale")
    wind_dir: str = Field(default="", alias="windDir")
    humidity: str = ""
    precip: str = ""
    vis: str = ""


class NowResponse(QWeatherModel):
    code: str
    now: Now | None = None


class Daily(QWeatherModel):
    fx_date: str = Field(alias="fxDate")
    temp_max: str = Field(alias="tempMax")
    temp_min: str = Field(alias="tempMin")
    text_day: str = Field(alias="textDay")
    text_night: str = Field(alias="textNight")
    icon_day: str = Field(alias="iconDay")
    icon_night: str = Field(alias="iconNight")


class DailyResponse(QWeatherModel):
    code: str
    daily: list[Daily] = Field(default_factory=list)


class Air(QWeatherModel):
    category: str
    aqi: str
    pm2p5: str = ""
    pm10: str = ""
    o3: str = ""
    co: str = ""
    no2: str = ""
    so2: str = ""


class AirResponse(QWeatherModel):
    code: str
    now: Air | None = None


class WeatherWarning(QWeatherModel):
    title: str
    type: str = ""
    pub_time: str = Field(default="", alias="pubTime")
    text: str = ""


class WarningResponse(QWeatherModel):
    code: str
    warning: list[WeatherWarning] = Field(default_factory=list)


class Hourly(QWeatherModel):
    fx_time: str = Field(alias="fxTime")
    temp: str
    icon: str
    text: str


class HourlyResponse(QWeatherModel):
    code: str
    hourly: list[Hourly] = Field(default_factory=list)


ResponseT = TypeVar("ResponseT", bound=QWeatherModel)


def parse_response(model: type[ResponseT], payload: dict[str, Any], *, source: str) -> ResponseT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ApiError(f"Unexpected QWeather {source} response shape") from e
