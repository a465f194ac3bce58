"""Chat message models."""

from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """One turn of the nutrition chat."""

    role: Literal["user", "assistant"]
    content: str
