# src/chetana/services/users.py
"""Account registration, authentication and admin reporting."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chetana.core.security import hash_password, verify_password
from chetana.db.session import atomic
from chetana.models import Assessment, MoodEntry, User, UserLocation, UserStreak
from chetana.schemas.user import AdminUserSummary, AdminUsersResponse
from chetana.services.errors import InvalidRequestError, NotFoundError
from chetana.services.roles import is_admin

logger = logging.getLogger(__name__)


class UserService:
    """Service for account lifecycle operations."""

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    @staticmethod
    def get_by_email(db: Session, email: str) -> User | None:
        """Look an account up by email, ignoring case and surrounding spaces."""
        return db.scalars(
            select(User).where(User.email == UserService.normalize_email(email))
        ).first()

    @staticmethod
    def register(db: Session, *, name: str, email: str, password: str, dob: date) -> User:
        """Create an account.

        Raises:
            InvalidRequestError: If the email is already registered
        """
        email = UserService.normalize_email(email)
        if UserService.get_by_email(db, email) is not None:
            raise InvalidRequestError("Email already registered")

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            dob=dob,
            is_admin=is_admin(email),
        )
        try:
            with atomic(db):
                db.add(user)
        except IntegrityError as exc:
            raise InvalidRequestError("Email already registered") from exc

        logger.info("Registered user %d", user.id)
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User | None:
        """Return the account matching the credentials, or None."""
        user = UserService.get_by_email(db, email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    @staticmethod
    def has_admin_role(user: User) -> bool:
        """Return True if the account may use moderator features."""
        return user.is_admin or is_admin(user.email) or is_admin(user.forum_uid)

    @staticmethod
    def get(db: Session, user_id: int) -> User:
        """Return the account with ``user_id``."""
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def delete(db: Session, user_id: int) -> None:
        """Delete an account and its tracker data."""
        with atomic(db):
            user = UserService.get(db, user_id)
            for model in (Assessment, MoodEntry, UserLocation, UserStreak):
                db.execute(delete(model).where(model.user_id == user_id))
            db.delete(user)
        logger.info("Deleted user %d", user_id)

    @staticmethod
    def admin_overview(db: Session) -> AdminUsersResponse:
        """Summarize non-admin accounts with their assessment activity."""
        rows = db.execute(
            select(
                User,
                func.count(Assessment.id),
                func.max(Assessment.assessment_date),
            )
            .outerjoin(Assessment, Assessment.user_id == User.id)
            .where(User.is_admin.is_(False))
            .group_by(User.id)
            .order_by(User.created_at.desc(), User.id.desc())
        )
        users = []
        for user, assessment_count, last_assessment in rows:
            summary = AdminUserSummary.model_validate(user)
            summary.assessment_count = assessment_count
            summary.last_assessment = last_assessment
            users.append(summary)

        total_assessments = db.scalar(select(func.count()).select_from(Assessment)) or 0
        return AdminUsersResponse(
            users=users,
            total_users=len(users),
            total_assessments=total_assessments,
        )
