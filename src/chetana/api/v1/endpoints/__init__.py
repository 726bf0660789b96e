# src/chetana/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .chat import router as chat_router
from .data import router as data_router
from .forum import router as forum_router
from .session import router as session_router
from .streaks import router as streaks_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "chat_router",
    "data_router",
    "forum_router",
    "session_router",
    "streaks_router",
    "users_router",
]
