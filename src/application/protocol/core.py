"""
Chat Streaming Protocol - Outbound Envelope

The client only ever sends one message shape: a chat turn.
"""

from typing import Literal

from pydantic import BaseModel, Field

from .enums import EventTypes


class ChatRequest(BaseModel):
    """Outbound chat turn: ``{"type": "chat", "message": <text>}``."""

    type: Literal["chat"] = Field(default=EventTypes.CHAT, description="Envelope type")
    message: str = Field(..., description="The user's input text")


def create_chat_message(text: str) -> str:
    """
    Serialize a user turn into the outbound wire format.

    Args:
        text: The user's (already trimmed) input

    Returns:
        The JSON frame to transmit
    """
    return ChatRequest(message=text).model_dump_json()
