# src/chetana/api/v1/endpoints/session.py
"""Session endpoints backed by stateless bearer tokens."""

from typing import Any

from fastapi import APIRouter

from chetana.api.v1.dependencies import CurrentUserDep
from chetana.schemas.user import UserOut
from chetana.services.users import UserService

router = APIRouter(prefix="/session", tags=["session"])


@router.get("")
def current_session(current_user: CurrentUserDep) -> dict[str, Any]:
    """Return the account the bearer token belongs to."""
    return {
        "success": True,
        "user": UserOut.model_validate(current_user),
        "isAdmin": UserService.has_admin_role(current_user),
    }


@router.post("/logout")
def logout() -> dict[str, Any]:
    """Acknowledge logout; the client discards its token."""
    return {"success": True, "message": "Session cleared"}
