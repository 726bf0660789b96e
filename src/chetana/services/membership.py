# src/chetana/services/membership.py
"""Community membership and rules gating."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chetana.core.settings import settings
from chetana.db.session import atomic
from chetana.models import CommunityRules, ForumMembership
from chetana.services.errors import InvalidRequestError, PermissionDeniedError
from chetana.services.roles import is_admin

logger = logging.getLogger(__name__)

NO_RULES_TEXT = "No rules found for this community."


def validate_community(community: str) -> str:
    """Return ``community`` if it is one of the configured communities."""
    if community not in settings.communities:
        raise InvalidRequestError("Invalid community")
    return community


def is_member(db: Session, user_uid: str, community: str) -> bool:
    """Return True if ``user_uid`` has joined ``community``."""
    return (
        db.scalar(
            select(ForumMembership.id).where(
                ForumMembership.user_uid == user_uid,
                ForumMembership.community == community,
            )
        )
        is not None
    )


def join(db: Session, user_uid: str, community: str) -> None:
    """Add ``user_uid`` to ``community``; joining twice is a no-op."""
    validate_community(community)
    if is_member(db, user_uid, community):
        return
    try:
        with atomic(db):
            db.add(ForumMembership(user_uid=user_uid, community=community))
    except IntegrityError:
        # A concurrent join won the insert; the membership exists either way.
        logger.debug("Membership %s/%s already present", user_uid, community)


def leave(db: Session, user_uid: str, community: str) -> None:
    """Remove ``user_uid`` from ``community``; leaving as a non-member is a no-op."""
    validate_community(community)
    with atomic(db):
        db.query(ForumMembership).filter(
            ForumMembership.user_uid == user_uid,
            ForumMembership.community == community,
        ).delete(synchronize_session=False)


def memberships_for(db: Session, user_uid: str) -> list[str]:
    """Return the communities ``user_uid`` belongs to."""
    return list(
        db.scalars(
            select(ForumMembership.community)
            .where(ForumMembership.user_uid == user_uid)
            .order_by(ForumMembership.community)
        )
    )


def require_membership(db: Session, user_uid: str, community: str) -> None:
    """Refuse contributions from non-members unless the gate is disabled.

    Administrators may post anywhere. The per-community rules acknowledgment
    is held by the client and is not checked here.
    """
    if not settings.require_membership_to_post or is_admin(user_uid):
        return
    if not is_member(db, user_uid, community):
        raise PermissionDeniedError(f"Join the {community} community to contribute")


def member_counts(db: Session) -> tuple[int, dict[str, int]]:
    """Return the number of distinct members and the member count per community."""
    total = db.scalar(select(func.count(func.distinct(ForumMembership.user_uid)))) or 0
    rows = db.execute(
        select(ForumMembership.community, func.count())
        .group_by(ForumMembership.community)
    )
    return total, {community: count for community, count in rows}


def get_rules(db: Session, community: str) -> str:
    """Return the rules text of ``community``."""
    validate_community(community)
    rules = db.scalar(select(CommunityRules.rules).where(CommunityRules.community == community))
    return rules if rules is not None else NO_RULES_TEXT


def seed_rules(db: Session, rules_by_community: dict[str, str]) -> int:
    """Insert rules for communities that have none yet; returns rows added.

    Runs inside the caller's transaction.
    """
    existing = set(db.scalars(select(CommunityRules.community)))
    added = 0
    for community, rules in rules_by_community.items():
        if community in existing:
            continue
        db.add(CommunityRules(community=community, rules=rules))
        added += 1
    return added
