# src/chetana/services/ledger.py
"""Vote and aura ledger for forum content.

Every public mutation runs in a single transaction. Rows are locked in a
fixed order (target, vote, aura) so concurrent voters on the same target
serialize instead of losing counter or aura updates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from chetana.db.session import atomic
from chetana.models import ForumAura, ForumComment, ForumPost, ForumVote
from chetana.schemas.common import TargetType, VoteType
from chetana.services.errors import NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)

# Aura awarded for publishing content together with the author's own upvote.
CONTENT_CREATION_AURA = 2

ForumTarget = ForumPost | ForumComment


@dataclass(frozen=True)
class VoteOutcome:
    """Result of applying a vote to a target."""

    aura_change: int
    upvotes: int
    downvotes: int
    user_vote: VoteType | None

    @property
    def votes(self) -> int:
        return self.upvotes - self.downvotes


def _target_model(target_type: TargetType) -> type[ForumPost] | type[ForumComment]:
    return ForumPost if target_type == "post" else ForumComment


def get_target(
    db: Session,
    target_type: TargetType,
    target_id: int,
    *,
    for_update: bool = False,
) -> ForumTarget:
    """Load a post or comment, raising ``NotFoundError`` when it is missing."""
    stmt = select(_target_model(target_type)).where(_target_model(target_type).id == target_id)
    if for_update:
        stmt = stmt.with_for_update()
    target = db.scalars(stmt).first()
    if target is None:
        raise NotFoundError(f"{target_type.capitalize()} not found")
    return target


def get_aura(db: Session, user_uid: str) -> int:
    """Return the aura of ``user_uid`` without creating a row."""
    points = db.scalar(select(ForumAura.aura_points).where(ForumAura.user_uid == user_uid))
    return points or 0


def ensure_aura(db: Session, user_uid: str, *, for_update: bool = False) -> ForumAura:
    """Return the aura row for ``user_uid``, creating it at zero if needed."""
    stmt = select(ForumAura).where(ForumAura.user_uid == user_uid)
    if for_update:
        stmt = stmt.with_for_update()
    aura = db.scalars(stmt).first()
    if aura is None:
        aura = ForumAura(user_uid=user_uid, aura_points=0)
        db.add(aura)
        db.flush()
    return aura


def adjust_aura(db: Session, user_uid: str, delta: int) -> int:
    """Apply ``delta`` to a user's aura, clamping at zero.

    Runs inside the caller's transaction; the row is locked until it commits.
    """
    aura = ensure_aura(db, user_uid, for_update=True)
    aura.aura_points = max(0, aura.aura_points + delta)
    return aura.aura_points


def _bump(target: ForumTarget, vote_type: str, amount: int) -> None:
    if vote_type == "upvote":
        target.upvotes += amount
    else:
        target.downvotes += amount


def _handle_existing_vote(
    *,
    db: Session,
    existing_vote: ForumVote,
    vote_type: VoteType,
    target: ForumTarget,
) -> tuple[int, VoteType | None]:
    if existing_vote.vote_type == vote_type:
        # Same vote again withdraws it.
        db.delete(existing_vote)
        _bump(target, vote_type, -1)
        return (-1 if vote_type == "upvote" else 1), None

    _bump(target, existing_vote.vote_type, -1)
    _bump(target, vote_type, 1)
    existing_vote.vote_type = vote_type
    return (2 if vote_type == "upvote" else -2), vote_type


def _create_vote(
    *,
    db: Session,
    target_type: TargetType,
    target: ForumTarget,
    vote_type: VoteType,
    voter_uid: str,
) -> tuple[int, VoteType]:
    db.add(
        ForumVote(
            voter_uid=voter_uid,
            target_type=target_type,
            target_id=target.id,
            vote_type=vote_type,
        )
    )
    _bump(target, vote_type, 1)
    return (1 if vote_type == "upvote" else -1), vote_type


def apply_vote(
    db: Session,
    target_type: TargetType,
    target_id: int,
    vote_type: VoteType,
    voter_uid: str,
) -> VoteOutcome:
    """Cast, withdraw or switch ``voter_uid``'s vote on a post or comment.

    Args:
        db: Database session
        target_type: ``"post"`` or ``"comment"``
        target_id: ID of the voted row
        vote_type: ``"upvote"`` or ``"downvote"``
        voter_uid: Forum identity of the voter

    Returns:
        The aura change applied to the target's author and the new counters.

    Raises:
        NotFoundError: If the target does not exist
        PermissionDeniedError: If the voter authored the target
    """
    with atomic(db):
        target = get_target(db, target_type, target_id, for_update=True)
        if target.author_uid == voter_uid:
            raise PermissionDeniedError("Cannot vote on your own content")

        existing_vote = db.scalars(
            select(ForumVote)
            .where(
                ForumVote.voter_uid == voter_uid,
                ForumVote.target_type == target_type,
                ForumVote.target_id == target_id,
            )
            .with_for_update()
        ).first()

        if existing_vote is not None:
            aura_change, user_vote = _handle_existing_vote(
                db=db,
                existing_vote=existing_vote,
                vote_type=vote_type,
                target=target,
            )
        else:
            aura_change, user_vote = _create_vote(
                db=db,
                target_type=target_type,
                target=target,
                vote_type=vote_type,
                voter_uid=voter_uid,
            )

        adjust_aura(db, target.author_uid, aura_change)
        outcome = VoteOutcome(
            aura_change=aura_change,
            upvotes=target.upvotes,
            downvotes=target.downvotes,
            user_vote=user_vote,
        )

    logger.debug(
        "Vote %s by %s on %s %d: aura %+d",
        vote_type,
        voter_uid,
        target_type,
        target_id,
        aura_change,
    )
    return outcome


def record_authored_content(
    db: Session,
    target_type: TargetType,
    target: ForumTarget,
) -> None:
    """Book the author's automatic upvote and creation aura for new content.

    The target must already be flushed so that it has an id; runs inside the
    caller's transaction.
    """
    db.add(
        ForumVote(
            voter_uid=target.author_uid,
            target_type=target_type,
            target_id=target.id,
            vote_type="upvote",
        )
    )
    adjust_aura(db, target.author_uid, CONTENT_CREATION_AURA)


def forget_votes(db: Session, target_type: TargetType, target_ids: list[int]) -> None:
    """Drop vote rows that point at deleted content."""
    if not target_ids:
        return
    db.query(ForumVote).filter(
        ForumVote.target_type == target_type,
        ForumVote.target_id.in_(target_ids),
    ).delete(synchronize_session=False)


def votes_by(
    db: Session,
    voter_uid: str,
    target_type: TargetType,
    target_ids: list[int],
) -> dict[int, VoteType]:
    """Map target id to ``voter_uid``'s current vote for the given targets."""
    if not target_ids:
        return {}
    rows = db.execute(
        select(ForumVote.target_id, ForumVote.vote_type).where(
            ForumVote.voter_uid == voter_uid,
            ForumVote.target_type == target_type,
            ForumVote.target_id.in_(target_ids),
        )
    )
    return {target_id: vote_type for target_id, vote_type in rows}
