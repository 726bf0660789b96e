# src/chetana/api/v1/endpoints/streaks.py
"""Assessment streak endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from chetana.api.v1.dependencies import SessionDep, StreakTrackerDep
from chetana.schemas.tracker import StreakOut, StreakSubmit

router = APIRouter(prefix="/streaks", tags=["streaks"])


@router.get("")
def get_streak(
    db: SessionDep,
    tracker: StreakTrackerDep,
    user_id: Annotated[int, Query(alias="userId", gt=0)],
) -> dict[str, Any]:
    """Return the user's streak, starting an empty one on first visit."""
    streak = tracker.get(db, user_id)
    return {"success": True, "streak": StreakOut.model_validate(streak)}


@router.post("")
def submit_streak(
    payload: StreakSubmit,
    db: SessionDep,
    tracker: StreakTrackerDep,
) -> dict[str, Any]:
    """Count today's completed assessment toward the user's streak."""
    update = tracker.record_submission(db, payload.user_id)
    response: dict[str, Any] = {
        "success": True,
        "streak": StreakOut.model_validate(update.streak),
    }
    if update.same_day:
        response["same_day"] = True
    return response
