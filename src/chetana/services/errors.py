# src/chetana/services/errors.py
"""Typed errors raised by the service layer.

Each error carries the HTTP status it maps to; the application's exception
handlers turn them into ``{"success": false, "error": ...}`` responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import status


class ChetanaError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent to the client."""
        return {"success": False, "error": self.message, **self.extra}


class InvalidRequestError(ChetanaError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class PermissionDeniedError(ChetanaError):
    """The actor may not perform this operation."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ChetanaError):
    """The referenced row does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class DeadlinePassedError(ChetanaError):
    """A streak submission arrived after the daily cutoff."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, current_time: str) -> None:
        super().__init__(
            "Assessment must be completed before 11:59 PM to count for streak",
            deadline_passed=True,
            current_time=current_time,
        )
        self.current_time = current_time


class RateLimitExceededError(ChetanaError):
    """The client exceeded its action budget for the current window."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str = "Too many requests. Please slow down.") -> None:
        super().__init__(message)

