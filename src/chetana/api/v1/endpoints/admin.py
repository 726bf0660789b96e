# src/chetana/api/v1/endpoints/admin.py
"""Administrator dashboard endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from chetana.api.v1.dependencies import AdminDep, SessionDep
from chetana.schemas.tracker import AssessmentOut
from chetana.schemas.user import AdminUsersResponse, UserOut
from chetana.services import tracker
from chetana.services.errors import InvalidRequestError
from chetana.services.users import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=AdminUsersResponse)
def list_users(db: SessionDep, admin: AdminDep) -> AdminUsersResponse:
    """Return every non-admin account with assessment activity."""
    return UserService.admin_overview(db)


@router.get("/users/{user_id}/reports")
def user_reports(user_id: int, db: SessionDep, admin: AdminDep) -> dict[str, Any]:
    """Return an account and all of its assessments."""
    report = tracker.user_report(db, user_id)
    return {
        "success": True,
        "user": UserOut.model_validate(report["user"]),
        "assessments": [AssessmentOut.model_validate(row) for row in report["assessments"]],
    }


@router.delete("/users/{user_id}")
def delete_user(user_id: int, db: SessionDep, admin: AdminDep) -> dict[str, Any]:
    """Delete an account."""
    if user_id == admin.id:
        raise InvalidRequestError("Cannot delete your own account")
    UserService.delete(db, user_id)
    return {"success": True, "message": "User deleted successfully"}


@router.get("/locations")
def list_locations(
    db: SessionDep,
    admin: AdminDep,
    user_id: Annotated[int | None, Query(alias="userId", gt=0)] = None,
) -> dict[str, Any]:
    """Return shared locations, optionally for a single user."""
    return {"success": True, "locations": tracker.list_locations(db, user_id)}
