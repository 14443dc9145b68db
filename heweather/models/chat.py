from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ChatReply:
    kind: Literal["text", "image"]
    text: str | None = None
    image: bytes | None = None
    mime_type: str | None = None

    @classmethod
    def of_text(cls, text: str) -> ChatReply:
        return cls(kind="text", text=text)

    @classmethod
    def of_image(cls, image: bytes, mime_type: str = "image/png") -> ChatReply:
        return cls(kind="image", image=image, mime_type=mime_type)
