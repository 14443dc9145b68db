from __future__ import annotations

import base64
from typing import Literal

from pydantic import BaseModel, Field

from heweather.models.chat import ChatReply


class ChatMessageIn(BaseModel):
    content: str = Field(min_length=1, max_length=512)


class WeatherCommandIn(BaseModel):
    location: str = Field(default="", max_length=256)


class ChatReplyOut(BaseModel):
    type: Literal["text", "image"]
    text: str | None = None
    mime_type: str | None = None
    data: str | None = None

    @classmethod
    def from_reply(cls, reply: ChatReply) -> ChatReplyOut:
        if reply.kind == "image":
            return cls(
                type="image",
                mime_type=reply.mime_type,
                data=base64.b64encode(reply.image or b"").decode("ascii"),
            )
        return cls(type="text", text=reply.text)


class ChatResponse(BaseModel):
    handled: bool
    replies: list[ChatReplyOut] = Field(default_factory=list)
    error: str | None = None
