# src/chetana/api/v1/endpoints/data.py
"""Tracker data endpoints: assessments, moods and locations."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from chetana.api.v1.dependencies import SessionDep
from chetana.schemas.tracker import (
    AssessmentCreate,
    AssessmentOut,
    LocationCreate,
    MoodCreate,
    MoodOut,
)
from chetana.services import tracker

router = APIRouter(prefix="/data", tags=["data"])

UserIdQuery = Annotated[int, Query(alias="userId", gt=0)]


@router.post("/assessments")
def save_assessment(payload: AssessmentCreate, db: SessionDep) -> dict[str, Any]:
    """Store a completed assessment."""
    assessment = tracker.save_assessment(db, payload)
    return {"success": True, "message": "Assessment saved", "id": assessment.id}


@router.get("/assessments")
def list_assessments(db: SessionDep, user_id: UserIdQuery) -> dict[str, Any]:
    """Return the user's assessments, most recent first."""
    return {
        "success": True,
        "assessments": [
            AssessmentOut.model_validate(row) for row in tracker.list_assessments(db, user_id)
        ],
    }


@router.post("/moods")
def save_mood(payload: MoodCreate, db: SessionDep) -> dict[str, Any]:
    """Store the user's mood for a day."""
    tracker.save_mood(db, payload)
    return {"success": True, "message": "Mood saved"}


@router.get("/moods")
def list_moods(db: SessionDep, user_id: UserIdQuery) -> dict[str, Any]:
    """Return the user's mood history."""
    return {
        "success": True,
        "moods": [MoodOut.model_validate(row) for row in tracker.list_moods(db, user_id)],
    }


@router.post("/locations")
def save_location(payload: LocationCreate, db: SessionDep) -> dict[str, Any]:
    """Store a location shared by the user."""
    tracker.save_location(db, payload)
    return {"success": True, "message": "Location saved successfully"}
