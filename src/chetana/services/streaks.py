# src/chetana/services/streaks.py
"""Daily assessment streak tracking."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, time
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.orm import Session

from chetana.core.settings import settings
from chetana.db.session import atomic
from chetana.models import User, UserStreak
from chetana.services.errors import DeadlinePassedError, NotFoundError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_clock() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class StreakUpdate:
    """Streak state after a submission."""

    streak: UserStreak
    same_day: bool = False


def is_before_deadline(moment: datetime, deadline: time) -> bool:
    """Return True if the wall-clock ``moment`` is at or before ``deadline``.

    Only hours and minutes are compared, so every second of the deadline
    minute still counts.
    """
    return moment.hour < deadline.hour or (
        moment.hour == deadline.hour and moment.minute <= deadline.minute
    )


class StreakTracker:
    """Per-user consecutive-day counter with a daily submission cutoff."""

    def __init__(
        self,
        *,
        clock: Clock = _utc_clock,
        deadline: time | None = None,
        timezone: str | None = None,
    ) -> None:
        self._clock = clock
        self._deadline = deadline or settings.streak_deadline
        self._zone = ZoneInfo(timezone or settings.streak_timezone)

    def now(self) -> datetime:
        """Return the current time in the streak time zone."""
        return self._clock().astimezone(self._zone)

    def get(self, db: Session, user_id: int) -> UserStreak:
        """Return the streak of ``user_id``, creating an empty one if absent."""
        _require_user(db, user_id)
        streak = db.get(UserStreak, user_id)
        if streak is None:
            with atomic(db):
                streak = UserStreak(user_id=user_id, current_streak=0, longest_streak=0)
                db.add(streak)
        return streak

    def record_submission(self, db: Session, user_id: int) -> StreakUpdate:
        """Count today's assessment toward the streak of ``user_id``.

        Raises:
            DeadlinePassedError: If the submission arrives after the daily
                cutoff; the stored streak is left unchanged
        """
        now = self.now()
        if not is_before_deadline(now, self._deadline):
            raise DeadlinePassedError(current_time=now.strftime("%H:%M"))

        today = now.date()
        _require_user(db, user_id)
        with atomic(db):
            streak = db.scalars(
                select(UserStreak).where(UserStreak.user_id == user_id).with_for_update()
            ).first()

            if streak is None:
                streak = UserStreak(
                    user_id=user_id,
                    current_streak=1,
                    longest_streak=1,
                    last_assessment_date=today,
                )
                db.add(streak)
                return StreakUpdate(streak=streak)

            last = streak.last_assessment_date
            gap = (today - last).days if last is not None else None
            if gap == 0:
                return StreakUpdate(streak=streak, same_day=True)

            # A first scored day on an empty row, or a missed day, restarts at one.
            streak.current_streak = streak.current_streak + 1 if gap == 1 else 1
            streak.longest_streak = max(streak.longest_streak, streak.current_streak)
            streak.last_assessment_date = today

        logger.debug("Streak for user %d is now %d", user_id, streak.current_streak)
        return StreakUpdate(streak=streak)


def _require_user(db: Session, user_id: int) -> None:
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")
