# src/chetana/models/tracker.py
"""Models backing the wellness tracker: streaks, assessments, moods, locations."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from chetana.db.session import Base
from chetana.db.time import utcnow


class UserStreak(Base):
    """Consecutive-day assessment streak for one user."""

    __tablename__ = "user_streaks"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    current_streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_assessment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


class Assessment(Base):
    """Scored PHQ-9 / GAD-7 / PSS questionnaire submission."""

    __tablename__ = "assessments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    phq9_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gad7_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    pss_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    responses: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    assessment_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )


class MoodEntry(Base):
    """Daily mood rating; one row per user per day."""

    __tablename__ = "mood_entries"
    __table_args__ = (UniqueConstraint("user_id", "mood_date", name="uq_mood_entries_user_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    mood_date: Mapped[date] = mapped_column(Date, nullable=False)
    mood_rating: Mapped[int] = mapped_column(Integer, nullable=False)


class UserLocation(Base):
    """Location shared by a user from the help-finder page."""

    __tablename__ = "user_locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    accuracy: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
