# src/chetana/services/chat_history.py
"""Best-effort persistence of chat transcripts.

Saving or loading history must never fail a chat request. Store errors are
classified into ``HistoryStoreError`` at this boundary and counted by a
circuit breaker; while the breaker is open the store is skipped entirely.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chetana.core.settings import settings
from chetana.models import ChatMessage
from chetana.services.circuit_breaker import CircuitBreaker, CircuitState

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "... [truncated]"
ANONYMOUS_USER = "anonymous"

# C0/C1 control characters except tab and newline, plus zero-width characters.
_UNSAFE_CHARACTERS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f\u200b-\u200f\u2028\u2029\ufeff]")


class HistoryStoreError(Exception):
    """The history store could not complete an operation."""


def sanitize_message(message: str, max_length: int | None = None) -> str:
    """Strip unsafe characters and cap the length of a stored message."""
    limit = max_length or settings.chat_history_max_message_length
    cleaned = _UNSAFE_CHARACTERS.sub("", message).strip()
    if len(cleaned) > limit:
        cleaned = cleaned[:limit] + TRUNCATION_MARKER
    return cleaned


class ChatHistoryStore:
    """Relational chat history behind a circuit breaker."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        breaker: CircuitBreaker | None = None,
        enabled: bool | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=settings.chat_history_failure_threshold,
            recovery_timeout=settings.chat_history_recovery_seconds,
        )
        self.enabled = settings.chat_history_enabled if enabled is None else enabled

    @property
    def available(self) -> bool:
        return self.enabled and self.breaker.allow_request()

    def _write(self, user_id: str, role: str, content: str, emotion: str | None) -> None:
        db = self._session_factory()
        try:
            db.add(
                ChatMessage(
                    user_id=user_id,
                    role=role,
                    content=sanitize_message(content),
                    emotion=emotion,
                )
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise HistoryStoreError(str(exc)) from exc
        finally:
            db.close()

    def _read(self, user_id: str, limit: int) -> list[ChatMessage]:
        db = self._session_factory()
        try:
            rows = db.scalars(
                select(ChatMessage)
                .where(ChatMessage.user_id == user_id)
                .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
                .limit(limit)
            )
            messages = list(rows)
            for message in messages:
                db.expunge(message)
        except SQLAlchemyError as exc:
            raise HistoryStoreError(str(exc)) from exc
        finally:
            db.close()
        messages.reverse()
        return messages

    def save_message(
        self,
        user_id: str | None,
        role: str,
        content: str,
        emotion: str | None = None,
    ) -> bool:
        """Persist one message; returns False when it was skipped or failed."""
        if not user_id or user_id == ANONYMOUS_USER or not self.available:
            return False
        try:
            self._write(user_id, role, content, emotion)
        except HistoryStoreError:
            self.breaker.record_failure()
            logger.warning(
                "Chat history save failed for %s (circuit %s)",
                user_id,
                self.breaker.state.value,
                exc_info=True,
            )
            return False
        self.breaker.record_success()
        return True

    def load_history(self, user_id: str, limit: int = 50) -> list[ChatMessage]:
        """Return up to ``limit`` most recent messages, oldest first.

        Returns an empty list while the store is unavailable or failing.
        """
        if not self.available:
            return []
        try:
            messages = self._read(user_id, limit)
        except HistoryStoreError:
            self.breaker.record_failure()
            logger.warning("Chat history load failed for %s", user_id, exc_info=True)
            return []
        self.breaker.record_success()
        return messages

    def status(self) -> dict[str, object]:
        """Describe the store for health reporting."""
        state = self.breaker.state
        return {
            "enabled": self.enabled,
            "circuit": state.value,
            "available": self.enabled and state != CircuitState.OPEN,
        }


_store: ChatHistoryStore | None = None


def get_history_store() -> ChatHistoryStore:
    """Return the shared history store bound to the application engine."""
    global _store
    if _store is None:
        from chetana.db.session import SessionLocal

        _store = ChatHistoryStore(SessionLocal)
    return _store
