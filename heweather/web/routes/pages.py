from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from heweather.api.deps import get_qweather_client, get_settings
from heweather.api.routes.weather import load_snapshot
from heweather.clients.qweather import QWeatherClient
from heweather.core.config import Settings
from heweather.services.presentation import build_render_context
from heweather.web.templates import templates

router = APIRouter()


@router.get("/weather", include_in_schema=False)
async def weather_page(
    request: Request,
    location: Annotated[str, Query(min_length=1, max_length=256)],
    client: Annotated[QWeatherClient, Depends(get_qweather_client)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    snapshot = await load_snapshot(location=location, client=client, settings=settings)
    context = build_render_context(snapshot, settings)
    return templates.TemplateResponse(
        request,
        settings.render_template,
        context.as_template_context(),
    )
