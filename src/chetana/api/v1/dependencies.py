"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from chetana.core.security import decode_access_token
from chetana.db.session import get_db
from chetana.models import User
from chetana.services.chat import ChatPipeline
from chetana.services.chat_history import ChatHistoryStore, get_history_store
from chetana.services.gemini import GeminiClient, get_gemini_client
from chetana.services.rate_limit import SlidingWindowRateLimiter, get_rate_limiter
from chetana.services.streaks import StreakTracker
from chetana.services.users import UserService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        payload = decode_access_token(credentials.credentials)
        subject = payload.get("sub")
        user_id = int(subject) if subject is not None else None
    except (JWTError, ValueError) as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_current_admin(current_user: CurrentUserDep) -> User:
    """Require the authenticated user to hold the admin role."""
    if not UserService.has_admin_role(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


AdminDep = Annotated[User, Depends(get_current_admin)]


def client_address(request: Request) -> str:
    """Return the caller's address, preferring the first proxy hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def get_rate_limiter_dep() -> SlidingWindowRateLimiter:
    """Return the shared forum rate limiter."""
    return get_rate_limiter()


def enforce_rate_limit(
    request: Request,
    limiter: Annotated[SlidingWindowRateLimiter, Depends(get_rate_limiter_dep)],
) -> None:
    """Count this request against the caller's action budget."""
    limiter.check(client_address(request))


def get_history_store_dep() -> ChatHistoryStore:
    """Return the shared chat history store."""
    return get_history_store()


def get_gemini_client_dep() -> GeminiClient:
    """Return the shared language model client."""
    return get_gemini_client()


HistoryStoreDep = Annotated[ChatHistoryStore, Depends(get_history_store_dep)]


def get_chat_pipeline(
    client: Annotated[GeminiClient, Depends(get_gemini_client_dep)],
    history: HistoryStoreDep,
) -> ChatPipeline:
    """Assemble the chat pipeline from its collaborators."""
    return ChatPipeline(client, history)


ChatPipelineDep = Annotated[ChatPipeline, Depends(get_chat_pipeline)]


def get_streak_tracker() -> StreakTracker:
    """Return a streak tracker using the configured deadline and time zone."""
    return StreakTracker()


StreakTrackerDep = Annotated[StreakTracker, Depends(get_streak_tracker)]
