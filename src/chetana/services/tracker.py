# src/chetana/services/tracker.py
"""Assessment, mood and location records."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from chetana.db.session import atomic
from chetana.models import Assessment, MoodEntry, User, UserLocation
from chetana.schemas.tracker import (
    AssessmentCreate,
    LocationCreate,
    LocationOut,
    MoodCreate,
)
from chetana.services.errors import NotFoundError


def _require_user(db: Session, user_id: int) -> None:
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")


def save_assessment(db: Session, data: AssessmentCreate) -> Assessment:
    """Store a scored assessment."""
    _require_user(db, data.user_id)
    assessment = Assessment(
        user_id=data.user_id,
        phq9_score=data.phq9,
        gad7_score=data.gad7,
        pss_score=data.pss,
        responses=data.responses,
        assessment_date=data.assessment_date,
    )
    with atomic(db):
        db.add(assessment)
    return assessment


def list_assessments(db: Session, user_id: int) -> list[Assessment]:
    """Return a user's assessments, most recent first."""
    return list(
        db.scalars(
            select(Assessment)
            .where(Assessment.user_id == user_id)
            .order_by(Assessment.assessment_date.desc(), Assessment.id.desc())
        )
    )


def save_mood(db: Session, data: MoodCreate) -> MoodEntry:
    """Store the mood for a day, replacing an earlier rating of the same day."""
    _require_user(db, data.user_id)
    with atomic(db):
        entry = db.scalars(
            select(MoodEntry)
            .where(MoodEntry.user_id == data.user_id, MoodEntry.mood_date == data.mood_date)
            .with_for_update()
        ).first()
        if entry is None:
            entry = MoodEntry(user_id=data.user_id, mood_date=data.mood_date)
            db.add(entry)
        entry.mood_rating = data.mood_rating
    return entry


def list_moods(db: Session, user_id: int) -> list[MoodEntry]:
    """Return a user's mood ratings, most recent first."""
    return list(
        db.scalars(
            select(MoodEntry)
            .where(MoodEntry.user_id == user_id)
            .order_by(MoodEntry.mood_date.desc())
        )
    )


def save_location(db: Session, data: LocationCreate) -> UserLocation:
    """Store a shared location."""
    _require_user(db, data.user_id)
    location = UserLocation(
        user_id=data.user_id,
        latitude=data.latitude,
        longitude=data.longitude,
        accuracy=data.accuracy,
    )
    with atomic(db):
        db.add(location)
    return location


def list_locations(db: Session, user_id: int | None = None) -> list[LocationOut]:
    """Return saved locations with owner details, newest first."""
    stmt = (
        select(UserLocation, User.name, User.email)
        .outerjoin(User, User.id == UserLocation.user_id)
        .order_by(UserLocation.created_at.desc(), UserLocation.id.desc())
    )
    if user_id is not None:
        stmt = stmt.where(UserLocation.user_id == user_id)

    locations = []
    for location, name, email in db.execute(stmt):
        out = LocationOut.model_validate(location)
        out.name, out.email = name, email
        locations.append(out)
    return locations


def user_report(db: Session, user_id: int) -> dict[str, Any]:
    """Return an account with its full assessment history."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return {"user": user, "assessments": list_assessments(db, user_id)}
