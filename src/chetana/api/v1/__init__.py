# src/chetana/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    chat_router,
    data_router,
    forum_router,
    session_router,
    streaks_router,
    users_router,
)

__all__ = [
    "admin_router",
    "chat_router",
    "data_router",
    "forum_router",
    "session_router",
    "streaks_router",
    "users_router",
]
