# src/chetana/models/moderation.py
"""Moderation models for reported forum content."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chetana.db.session import Base
from chetana.db.time import utcnow

REPORT_PENDING = "pending"
REPORT_DELETED = "deleted"
REPORT_DISMISSED = "dismissed"


class ForumReport(Base):
    """User report against a post or comment.

    Reports start ``pending`` and move to ``deleted`` or ``dismissed`` when a
    moderator resolves them.
    """

    __tablename__ = "forum_reports"
    __table_args__ = (
        CheckConstraint("type IN ('post', 'comment')", name="ck_forum_reports_type"),
        CheckConstraint(
            "status IN ('pending', 'deleted', 'dismissed')",
            name="ck_forum_reports_status",
        ),
        Index("ix_forum_reports_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    content_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    reporter_uid: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=REPORT_PENDING, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
