# src/chetana/schemas/user.py
"""Account, session and admin schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .common import RequestModel


class UserRegister(RequestModel):
    """Schema for creating an account."""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    dob: date


class UserLogin(RequestModel):
    """Credentials exchanged for a session token."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    """Public account profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    dob: date | None = None
    created_at: datetime


class LoginResponse(BaseModel):
    """Session token issued after a successful login."""

    success: bool = True
    token: str
    user: UserOut
    is_admin: bool = Field(..., serialization_alias="isAdmin")


class AdminUserSummary(UserOut):
    """Account row in the admin dashboard."""

    assessment_count: int = 0
    last_assessment: date | None = None


class AdminUsersResponse(BaseModel):
    """Admin dashboard overview."""

    users: list[AdminUserSummary]
    total_users: int = Field(..., serialization_alias="totalUsers")
    total_assessments: int = Field(..., serialization_alias="totalAssessments")
