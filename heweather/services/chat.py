from __future__ import annotations

import logging
import re
from typing import Protocol

from heweather.clients.qweather import QWeatherClient
from heweather.core.config import Settings
from heweather.core.errors import CityNotFoundError
from heweather.models.chat import ChatReply
from heweather.rendering.renderer import Renderer
from heweather.services.presentation import build_render_context
from heweather.services.weather import WeatherService

logger = logging.getLogger(__name__)

COMMAND_NAME = "heweather"
COMMAND_ALIASES = (COMMAND_NAME, "天气")

WEATHER_PATTERN = re.compile(r"^(.+?)天气\s*$|^天气(.+?)\s*$")

INVALID_LOCATION_MESSAGE = "请输入一个有效的地点"
QUERY_FAILED_MESSAGE = "查询天气信息失败"


class ChatSession(Protocol):
    async def send(self, reply: ChatReply) -> None: ...


class CollectingSession:
    """Session that keeps every reply, for surfaces that answer in one response."""

    def __init__(self) -> None:
        self.replies: list[ChatReply] = []

    async def send(self, reply: ChatReply) -> None:
        self.replies.append(reply)


def extract_location(content: str) -> str | None:
    """Return the location of a "<location>天气" / "天气<location>" message.

    ``None`` means the message is not a weather query; an empty string means
    it is one, but the location is blank.
    """
    match = WEATHER_PATTERN.match(content)
    if not match:
        return None
    return (match.group(1) or match.group(2) or "").strip()


def split_command(content: str) -> tuple[str, str] | None:
    parts = content.strip().split(maxsplit=1)
    if not parts:
        return None
    name = parts[0].lstrip("/")
    if name not in COMMAND_ALIASES:
        return None
    return name, (parts[1].strip() if len(parts) > 1 else "")


class WeatherCommand:
    def __init__(
        self,
        *,
        client: QWeatherClient,
        renderer: Renderer,
        settings: Settings,
    ) -> None:
        self._client = client
        self._renderer = renderer
        self._settings = settings

    async def run(self, session: ChatSession, location: str) -> None:
        location = location.strip()
        if not location:
            await session.send(ChatReply.of_text(INVALID_LOCATION_MESSAGE))
            return

        await session.send(ChatReply.of_text(f"查询 {location} 的天气信息..."))
        try:
            service = WeatherService(client=self._client, settings=self._settings)
            snapshot = await service.load(location)
            context = build_render_context(snapshot, self._settings)
            image = await self._renderer.render(
                self._settings.render_template,
                context.as_template_context(),
                viewport=self._settings.render_viewport,
            )
        except CityNotFoundError:
            await session.send(ChatReply.of_text(f"未找到城市: {location}"))
            return
        except Exception:
            await session.send(ChatReply.of_text(QUERY_FAILED_MESSAGE))
            logger.exception("Weather query for %r failed", location)
            raise

        await session.send(ChatReply.of_image(image))


class ChatDispatcher:
    def __init__(self, command: WeatherCommand) -> None:
        self._command = command

    async def handle_message(self, session: ChatSession, content: str) -> bool:
        """Answer ``content`` if it is a weather query; return whether it was one."""
        command = split_command(content)
        if command is not None:
            _, location = command
            await self._command.run(session, location)
            return True

        location = extract_location(content)
        if location is None:
            return False
        await self._command.run(session, location)
        return True
