# src/chetana/schemas/tracker.py
"""Schemas for streaks, assessments, moods and locations."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .common import PositiveId, RequestModel


class StreakOut(BaseModel):
    """Current and best streak of a user."""

    model_config = ConfigDict(from_attributes=True)

    current_streak: int
    longest_streak: int
    last_assessment_date: date | None = None


class StreakSubmit(RequestModel):
    """Body for recording today's assessment toward the streak."""

    user_id: PositiveId = Field(..., alias="userId")


class AssessmentCreate(RequestModel):
    """Scored questionnaire submission."""

    user_id: PositiveId = Field(..., alias="userId")
    phq9: int | None = Field(None, ge=0, le=27)
    gad7: int | None = Field(None, ge=0, le=21)
    pss: int | None = Field(None, ge=0, le=40)
    responses: dict[str, Any] | None = None
    assessment_date: date = Field(..., alias="assessmentDate")


class AssessmentOut(BaseModel):
    """Stored assessment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    phq9_score: int | None
    gad7_score: int | None
    pss_score: int | None
    responses: dict[str, Any] | None
    assessment_date: date
    created_at: datetime


class MoodCreate(RequestModel):
    """Daily mood rating; resubmitting a day overwrites it."""

    user_id: PositiveId = Field(..., alias="userId")
    mood_date: date = Field(..., alias="moodDate")
    mood_rating: int = Field(..., alias="moodRating", ge=1, le=10)


class MoodOut(BaseModel):
    """Stored mood rating."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    mood_date: date
    mood_rating: int


class LocationCreate(RequestModel):
    """Location shared from the help-finder page."""

    user_id: PositiveId = Field(..., alias="userId")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: float | None = Field(None, ge=0)


class LocationOut(BaseModel):
    """Saved location with the owner's name and email."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    latitude: float
    longitude: float
    accuracy: float | None = None
    created_at: datetime
    name: str | None = None
    email: str | None = None
