from __future__ import annotations

from enum import IntEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiType(IntEnum):
    FREE = 0
    STANDARD = 1
    PREMIUM = 2


class HourlyType(IntEnum):
    CURRENT_12H = 1
    CURRENT_24H = 2


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HEWEATHER_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    timezone: str = Field(default="Asia/Shanghai", min_length=1)

    qweather_apihost: AnyHttpUrl = Field(default="https://api.qweather.com")
    qweather_apitype: ApiType = Field(default=ApiType.FREE)
    qweather_hourlytype: HourlyType = Field(default=HourlyType.CURRENT_12H)
    qweather_forecast_days: int = Field(default=3, ge=3, le=30)
    qweather_timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)

    qweather_use_jwt: bool = Field(default=True)
    qweather_apikey: str | None = Field(default=None)
    qweather_jwt_sub: str | None = Field(default=None)
    qweather_jwt_kid: str | None = Field(default=None)
    qweather_jwt_private_key: str | None = Field(default=None)

    render_template: str = Field(default="weather.html", min_length=1)
    render_viewport_width: int = Field(default=1000, ge=100, le=4000)
    render_viewport_height: int = Field(default=1250, ge=100, le=4000)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def render_viewport(self) -> tuple[int, int]:
        return self.render_viewport_width, self.render_viewport_height


def load_settings() -> Settings:
    return Settings()
