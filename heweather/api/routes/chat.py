from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from heweather.api.deps import get_chat_dispatcher, get_weather_command
from heweather.core.errors import WeatherError
from heweather.schemas.chat import ChatMessageIn, ChatReplyOut, ChatResponse, WeatherCommandIn
from heweather.services.chat import COMMAND_NAME, ChatDispatcher, CollectingSession, WeatherCommand

router = APIRouter(prefix="/chat")


def _response(
    session: CollectingSession, *, handled: bool, error: str | None = None
) -> ChatResponse:
    return ChatResponse(
        handled=handled,
        replies=[ChatReplyOut.from_reply(r) for r in session.replies],
        error=error,
    )


@router.post("/messages", response_model=ChatResponse)
async def post_message(
    payload: ChatMessageIn,
    dispatcher: Annotated[ChatDispatcher, Depends(get_chat_dispatcher)],
) -> ChatResponse:
    session = CollectingSession()
    try:
        handled = await dispatcher.handle_message(session, payload.content)
    except WeatherError as e:
        # The user-facing failure reply is already in the session; the
        # command logged the details.
        return _response(session, handled=True, error=type(e).__name__)
    return _response(session, handled=handled)


@router.post(f"/commands/{COMMAND_NAME}", response_model=ChatResponse)
async def run_weather_command(
    payload: WeatherCommandIn,
    command: Annotated[WeatherCommand, Depends(get_weather_command)],
) -> ChatResponse:
    session = CollectingSession()
    try:
        await command.run(session, payload.location)
    except WeatherError as e:
        return _response(session, handled=True, error=type(e).__name__)
    return _response(session, handled=True)
