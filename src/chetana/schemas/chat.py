# src/chetana/schemas/chat.py
"""Chat request and response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import RequestModel


class ChatRequest(RequestModel):
    """Message sent to the assistant."""

    user_message: str = Field(..., alias="userMessage", min_length=1)
    user_id: str | None = Field(None, alias="userId", max_length=64)


class ChatResponse(BaseModel):
    """Assistant reply and detected emotion."""

    reply: str
    emotion: str


class ChatMessageOut(BaseModel):
    """Stored chat turn."""

    model_config = ConfigDict(from_attributes=True)

    role: str
    content: str
    emotion: str | None = None
    created_at: datetime


class ChatHistoryResponse(BaseModel):
    """Conversation history, oldest first."""

    history: list[ChatMessageOut]
