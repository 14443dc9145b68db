from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from heweather.api.router import api_router
from heweather.clients.qweather import QWeatherClient
from heweather.core.config import Settings, load_settings
from heweather.core.logging_config import setup_logging
from heweather.core.security import CredentialProvider
from heweather.rendering.renderer import PlaywrightRenderer, Renderer
from heweather.web.router import ui_router


def create_app(settings: Settings | None = None, renderer: Renderer | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.qweather_client = QWeatherClient(
            credentials=CredentialProvider(settings),
            timeout_seconds=settings.qweather_timeout_seconds,
            base_url=str(settings.qweather_apihost),
        )
        app.state.renderer = renderer or PlaywrightRenderer()
        yield
        await app.state.qweather_client.aclose()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="HeWeather",
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=1024)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response

    @app.get("/", tags=["meta"])
    def root():
        return {"name": "heweather", "status": "ok"}

    @app.get("/health", tags=["meta"])
    def health():
        return {"status": "ok"}

    app.include_router(api_router)
    app.include_router(ui_router)
    return app
