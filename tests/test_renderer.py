from __future__ import annotations

import asyncio

import pytest

from heweather.core.errors import RenderError
from heweather.rendering import renderer as renderer_module
from heweather.rendering.renderer import PlaywrightRenderer, TemplateRenderer
from heweather.services.presentation import build_render_context
from heweather.services.weather import WeatherService
from tests.fakes import FAKE_PNG, FakeQWeatherClient


@pytest.fixture()
def template_context(settings) -> dict[str, object]:
    snapshot = asyncio.run(
        WeatherService(client=FakeQWeatherClient(), settings=settings).load("Shanghai")
    )
    return build_render_context(snapshot, settings).as_template_context()


def test_template_renders_card(template_context: dict[str, object]) -> None:
    html = TemplateRenderer().render("weather.html", template_context)
    assert "Shanghai" in html
    assert "今日" in html
    assert "#A9A538" in html
    assert "上海市气象台发布大风蓝色预警" in html
    assert "12AM" in html


def test_template_escapes_city_name(template_context: dict[str, object]) -> None:
    context = dict(template_context, city="<b>x</b>")
    html = TemplateRenderer().render("weather.html", context)
    assert "<b>x</b>" not in html
    assert "&lt;b&gt;x&lt;/b&gt;" in html


class _FakePage:
    def __init__(self, log: list) -> None:
        self._log = log

    async def set_content(self, html: str, wait_until: str) -> None:
        self._log.append(("set_content", wait_until, "Shanghai" in html))

    async def screenshot(self, **kwargs) -> bytes:
        self._log.append(("screenshot", kwargs))
        return FAKE_PNG


class _FakeBrowser:
    def __init__(self, log: list) -> None:
        self._log = log

    async def new_page(self, viewport: dict[str, int]) -> _FakePage:
        self._log.append(("new_page", viewport))
        return _FakePage(self._log)

    async def close(self) -> None:
        self._log.append(("close",))


class _FakeChromium:
    def __init__(self, log: list) -> None:
        self._log = log

    async def launch(self, **kwargs) -> _FakeBrowser:
        self._log.append(("launch", kwargs["headless"]))
        return _FakeBrowser(self._log)


class _FakePlaywrightManager:
    def __init__(self, log: list) -> None:
        self.chromium = _FakeChromium(log)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc) -> None:
        return None


def test_playwright_renderer_screenshots_rendered_html(
    monkeypatch: pytest.MonkeyPatch, template_context: dict[str, object]
) -> None:
    log: list = []
    monkeypatch.setattr(renderer_module, "async_playwright", lambda: _FakePlaywrightManager(log))

    image = asyncio.run(
        PlaywrightRenderer().render("weather.html", template_context, viewport=(1000, 1250))
    )

    assert image == FAKE_PNG
    assert ("launch", True) in log
    assert ("new_page", {"width": 1000, "height": 1250}) in log
    assert ("set_content", "networkidle", True) in log
    assert ("screenshot", {"type": "png", "full_page": True}) in log
    assert log[-1] == ("close",)


class _BrokenChromium:
    async def launch(self, **kwargs):
        raise RuntimeError("Executable doesn't exist")


def test_playwright_failures_become_render_errors(
    monkeypatch: pytest.MonkeyPatch, template_context: dict[str, object]
) -> None:
    manager = _FakePlaywrightManager([])
    manager.chromium = _BrokenChromium()
    monkeypatch.setattr(renderer_module, "async_playwright", lambda: manager)

    with pytest.raises(RenderError) as excinfo:
        asyncio.run(
            PlaywrightRenderer().render("weather.html", template_context, viewport=(1000, 1250))
        )
    assert isinstance(excinfo.value.__cause__, RuntimeError)
