# src/chetana/models/community.py
"""Community membership and rules models."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from chetana.db.session import Base
from chetana.db.time import utcnow


class ForumMembership(Base):
    """A user's membership in a forum community."""

    __tablename__ = "forum_memberships"
    __table_args__ = (
        UniqueConstraint("user_uid", "community", name="uq_forum_memberships_user_community"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_uid: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    community: Mapped[str] = mapped_column(String(50), nullable=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )


class CommunityRules(Base):
    """Rules text shown before a member's first contribution to a community."""

    __tablename__ = "forum_community_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    rules: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
