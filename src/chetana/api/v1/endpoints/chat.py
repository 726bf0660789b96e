# src/chetana/api/v1/endpoints/chat.py
"""Chat assistant endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from chetana.api.v1.dependencies import ChatPipelineDep, HistoryStoreDep
from chetana.schemas.chat import (
    ChatHistoryResponse,
    ChatMessageOut,
    ChatRequest,
    ChatResponse,
)
from chetana.services.gemini import ChatServiceDisabledError, ChatServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat(payload: ChatRequest, pipeline: ChatPipelineDep) -> ChatResponse:
    """Reply to the user's message and report the emotion detected in it."""
    try:
        result = await pipeline.handle(payload.user_message, payload.user_id)
    except ChatServiceDisabledError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat assistant is not configured",
        ) from exc
    except ChatServiceError as exc:
        logger.error("Chat generation failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate response",
        ) from exc
    return ChatResponse(reply=result.reply, emotion=result.emotion)


@router.get("/history", response_model=ChatHistoryResponse)
def chat_history(
    history: HistoryStoreDep,
    user_id: Annotated[str, Query(alias="userId", min_length=1, max_length=64)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> ChatHistoryResponse:
    """Return the saved conversation, or nothing while the store is unavailable."""
    messages = history.load_history(user_id, limit)
    return ChatHistoryResponse(
        history=[ChatMessageOut.model_validate(message) for message in messages]
    )
