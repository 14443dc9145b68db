from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from heweather.clients.qweather import QWeatherClient
from heweather.core.config import Settings
from heweather.rendering.renderer import Renderer
from heweather.services.chat import ChatDispatcher, WeatherCommand


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_qweather_client(request: Request) -> QWeatherClient:
    return request.app.state.qweather_client


def get_renderer(request: Request) -> Renderer:
    return request.app.state.renderer


def get_weather_command(
    client: Annotated[QWeatherClient, Depends(get_qweather_client)],
    renderer: Annotated[Renderer, Depends(get_renderer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WeatherCommand:
    return WeatherCommand(client=client, renderer=renderer, settings=settings)


def get_chat_dispatcher(
    command: Annotated[WeatherCommand, Depends(get_weather_command)],
) -> ChatDispatcher:
    return ChatDispatcher(command)
