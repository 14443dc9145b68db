from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from heweather.api import deps
from heweather.core.config import HourlyType, Settings
from heweather.factory import create_app
from tests.fakes import FakeQWeatherClient, FakeRenderer


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        timezone="Asia/Shanghai",
        qweather_apihost="https://api.qweather.com",
        qweather_apitype=0,
        qweather_hourlytype=HourlyType.CURRENT_12H,
        qweather_forecast_days=3,
        qweather_timeout_seconds=1.0,
        qweather_use_jwt=False,
        qweather_apikey="test-api-key",
    )


@pytest.fixture()
def fake_qweather() -> FakeQWeatherClient:
    return FakeQWeatherClient()


@pytest.fixture()
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture()
def client(
    settings: Settings, fake_qweather: FakeQWeatherClient, fake_renderer: FakeRenderer
) -> TestClient:
    app = create_app(settings, renderer=fake_renderer)
    app.dependency_overrides[deps.get_qweather_client] = lambda: fake_qweather
    with TestClient(app) as client:
        yield client
