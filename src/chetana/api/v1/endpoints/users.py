# src/chetana/api/v1/endpoints/users.py
"""Account endpoints for the Chetana API."""

from typing import Any

from fastapi import APIRouter, HTTPException, status

from chetana.api.v1.dependencies import CurrentUserDep, SessionDep
from chetana.core.security import create_access_token
from chetana.schemas.user import LoginResponse, UserLogin, UserOut, UserRegister
from chetana.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register")
def register(payload: UserRegister, db: SessionDep) -> dict[str, Any]:
    """Create an account."""
    user = UserService.register(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        dob=payload.dob,
    )
    return {"success": True, "message": "Account created successfully", "userId": user.id}


@router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, db: SessionDep) -> LoginResponse:
    """Exchange credentials for a signed session token."""
    user = UserService.authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    is_admin = UserService.has_admin_role(user)
    return LoginResponse(
        token=create_access_token(user.id, is_admin=is_admin),
        user=UserOut.model_validate(user),
        is_admin=is_admin,
    )


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: SessionDep, current_user: CurrentUserDep) -> UserOut:
    """Return an account profile; users may only read their own unless admin."""
    if current_user.id != user_id and not UserService.has_admin_role(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this user",
        )
    return UserOut.model_validate(UserService.get(db, user_id))
