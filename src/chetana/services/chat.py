# src/chetana/services/chat.py
"""Chat pipeline: classify the user's emotion, then answer empathetically."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from starlette.concurrency import run_in_threadpool

from chetana.services.chat_history import ChatHistoryStore
from chetana.services.gemini import GeminiClient

logger = logging.getLogger(__name__)

EMOTIONS = ("neutral", "anger", "fear", "sadness", "happiness", "surprise", "disgust")
DEFAULT_EMOTION = "neutral"

_PERSONA = """You are "Chetana", an emotionally intelligent conversational assistant.
Tagline: "Your mental health companion."

You provide emotional support and guidance in natural human conversation.
You do NOT diagnose, treat, or replace professional care."""

_CLASSIFY_PROMPT = """Classify the emotion of the following message.
Answer with exactly one word from this list: {emotions}.

Message: "{message}"
"""

_RESPOND_PROMPT = """{persona}

STRICT RULES:
- Do NOT diagnose or label mental health conditions
- Do NOT role-play as medical, legal, or authority figures
- Do NOT give medical, legal, or diagnostic advice
- Do NOT issue commands, orders, or instructions
- Do NOT argue, judge, mock, or shame
- Do NOT promise guaranteed outcomes
- Do NOT use religious, spiritual, or transactional language
- Ask only ONE open-ended question per response
- Suggest at most ONE gentle coping idea, framed as optional

The user's message reads as: {emotion}.
Reply to the user directly, without any labels or preamble.

User message: "{message}"
"""


@dataclass(frozen=True)
class ChatReply:
    """Assistant reply with the emotion detected in the user's message."""

    reply: str
    emotion: str


def parse_emotion(raw: str) -> str:
    """Map the classifier's answer onto a known emotion."""
    words = raw.strip().lower().replace(".", " ").replace(":", " ").split()
    for word in words:
        if word in EMOTIONS:
            return word
    return DEFAULT_EMOTION


class ChatPipeline:
    """Two sequential model calls plus best-effort transcript persistence."""

    def __init__(self, client: GeminiClient, history: ChatHistoryStore) -> None:
        self.client = client
        self.history = history

    async def classify(self, message: str) -> str:
        """Return one of ``EMOTIONS`` for ``message``."""
        raw = await self.client.generate(
            _CLASSIFY_PROMPT.format(emotions=", ".join(EMOTIONS), message=message)
        )
        return parse_emotion(raw)

    async def respond(self, message: str, emotion: str) -> str:
        """Generate the assistant's reply to ``message``."""
        return await self.client.generate(
            _RESPOND_PROMPT.format(persona=_PERSONA, emotion=emotion, message=message)
        )

    async def handle(self, message: str, user_id: str | None = None) -> ChatReply:
        """Answer ``message`` and save the exchange for signed-in users.

        Raises:
            ChatServiceError: If either model call fails
        """
        emotion = await self.classify(message)
        reply = await self.respond(message, emotion)

        if user_id:
            # Store writes are blocking; keep them off the event loop.
            await run_in_threadpool(self.history.save_message, user_id, "user", message, emotion)
            await run_in_threadpool(self.history.save_message, user_id, "assistant", reply)

        logger.debug("Chat reply generated (emotion=%s)", emotion)
        return ChatReply(reply=reply, emotion=emotion)
