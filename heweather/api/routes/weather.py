from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.encoders import jsonable_encoder

from heweather.api.deps import get_qweather_client, get_renderer, get_settings
from heweather.clients.qweather import QWeatherClient
from heweather.core.config import Settings
from heweather.core.errors import (
    ApiError,
    CityNotFoundError,
    ConfigurationError,
    RenderError,
    TransportError,
)
from heweather.models.weather import WeatherSnapshot
from heweather.rendering.renderer import Renderer
from heweather.services.presentation import build_render_context
from heweather.services.weather import WeatherService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weather")

Location = Annotated[str, Query(min_length=1, max_length=256)]


async def load_snapshot(
    *, location: str, client: QWeatherClient, settings: Settings
) -> WeatherSnapshot:
    try:
        service = WeatherService(client=client, settings=settings)
        return await service.load(location.strip())
    except CityNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"City not found: {location}",
        ) from e
    except ConfigurationError as e:
        logger.error("Weather plugin misconfigured: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Weather plugin misconfigured",
        ) from e
    except (ApiError, TransportError) as e:
        logger.warning("Weather query for %r failed: %s", location, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Weather provider unavailable",
        ) from e


@router.get("")
async def weather_report(
    location: Location,
    client: Annotated[QWeatherClient, Depends(get_qweather_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    snapshot = await load_snapshot(location=location, client=client, settings=settings)
    context = build_render_context(snapshot, settings)
    return jsonable_encoder(context.as_template_context())


@router.get("/image", response_class=Response)
async def weather_image(
    location: Location,
    client: Annotated[QWeatherClient, Depends(get_qweather_client)],
    renderer: Annotated[Renderer, Depends(get_renderer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    snapshot = await load_snapshot(location=location, client=client, settings=settings)
    context = build_render_context(snapshot, settings)
    try:
        image = await renderer.render(
            settings.render_template,
            context.as_template_context(),
            viewport=settings.render_viewport,
        )
    except RenderError as e:
        logger.error("Weather image for %r failed: %s", location, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Weather image rendering failed",
        ) from e
    return Response(content=image, media_type="image/png")
