"""HTML-to-image rendering of the weather card.

The card is a Jinja2 template rendered to HTML and then screenshotted with a
headless Chromium driven by Playwright. Anything that implements
:class:`Renderer` can replace the Playwright backend.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from jinja2 import Environment, FileSystemLoader, select_autoescape

from heweather.core.errors import RenderError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

# Lazy import of Playwright; the module-level variable can be patched in tests.
async_playwright: Any | None = None


class Renderer(Protocol):
    async def render(
        self,
        template: str,
        context: Mapping[str, Any],
        *,
        viewport: tuple[int, int],
    ) -> bytes: ...


class TemplateRenderer:
    def __init__(self, templates_dir: Path = TEMPLATES_DIR) -> None:
        self.templates_dir = templates_dir
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        return self._env.get_template(template).render(**context)


class PlaywrightRenderer:
    def __init__(self, templates: TemplateRenderer | None = None) -> None:
        self._templates = templates or TemplateRenderer()

    async def render(
        self,
        template: str,
        context: Mapping[str, Any],
        *,
        viewport: tuple[int, int],
    ) -> bytes:
        try:
            return await self._screenshot(template, context, viewport)
        except Exception as e:
            raise RenderError(f"Failed to render {template}: {e}") from e

    async def _screenshot(
        self,
        template: str,
        context: Mapping[str, Any],
        viewport: tuple[int, int],
    ) -> bytes:
        html = self._templates.render(template, context)

        global async_playwright
        if async_playwright is None:
            from playwright.async_api import async_playwright as _ap

            async_playwright = _ap

        width, height = viewport
        logger.debug("Rendering %s at %sx%s", template, width, height)
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-dev-shm-usage"],
            )
            try:
                page = await browser.new_page(viewport={"width": width, "height": height})
                await page.set_content(html, wait_until="networkidle")
                return await page.screenshot(type="png", full_page=True)
            finally:
                await browser.close()
