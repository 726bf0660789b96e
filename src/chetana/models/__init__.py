# src/chetana/models/__init__.py
"""Database models for the Chetana application."""

from .chat import ChatMessage
from .community import CommunityRules, ForumMembership
from .forum import ForumAura, ForumComment, ForumPost, ForumVote
from .moderation import ForumReport
from .tracker import Assessment, MoodEntry, UserLocation, UserStreak
from .user import User

__all__ = [
    "Assessment",
    "ChatMessage",
    "CommunityRules",
    "ForumAura",
    "ForumComment",
    "ForumMembership",
    "ForumPost",
    "ForumReport",
    "ForumVote",
    "MoodEntry",
    "User",
    "UserLocation",
    "UserStreak",
]
