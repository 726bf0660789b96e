# src/chetana/models/forum.py
"""Forum content and the vote/aura ledger tables."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chetana.db.session import Base
from chetana.db.time import utcnow


class ForumPost(Base):
    """Top-level forum post inside a community."""

    __tablename__ = "forum_posts"
    __table_args__ = (Index("ix_forum_posts_community_listing", "community", "pinned", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    community: Mapped[str] = mapped_column(String(50), nullable=False)
    author_uid: Mapped[str] = mapped_column(String(255), nullable=False)
    upvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    comments: Mapped[list["ForumComment"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def votes(self) -> int:
        """Net score shown next to the post."""
        return self.upvotes - self.downvotes


class ForumComment(Base):
    """Reply attached to a post."""

    __tablename__ = "forum_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forum_posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_uid: Mapped[str] = mapped_column(String(255), nullable=False)
    upvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    post: Mapped[ForumPost] = relationship(back_populates="comments")

    @property
    def votes(self) -> int:
        """Net score shown next to the comment."""
        return self.upvotes - self.downvotes


class ForumVote(Base):
    """One voter's current vote on a post or comment.

    The unique constraint keeps a single row per (voter, target); toggling a
    vote off deletes the row rather than storing a neutral state.
    """

    __tablename__ = "forum_votes"
    __table_args__ = (
        UniqueConstraint("voter_uid", "target_type", "target_id", name="uq_forum_votes_voter_target"),
        CheckConstraint("target_type IN ('post', 'comment')", name="ck_forum_votes_target_type"),
        CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_forum_votes_vote_type"),
        Index("ix_forum_votes_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    voter_uid: Mapped[str] = mapped_column(String(255), nullable=False)
    target_type: Mapped[str] = mapped_column(String(10), nullable=False)
    # Polymorphic reference; no foreign key since it points at either table.
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    vote_type: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )


class ForumAura(Base):
    """Reputation score per forum identity, floored at zero."""

    __tablename__ = "forum_aura"
    __table_args__ = (CheckConstraint("aura_points >= 0", name="ck_forum_aura_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_uid: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    aura_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
