# tests/services/test_membership_service.py
"""Community membership, rules and seeding."""

import pytest
from sqlalchemy import select

from chetana.models import ForumPost
from chetana.services import forum, membership, seed
from chetana.services.errors import InvalidRequestError, PermissionDeniedError


def test_join_and_leave_are_idempotent(db_session) -> None:
    membership.join(db_session, "u/member", "anxiety")
    membership.join(db_session, "u/member", "anxiety")
    assert membership.memberships_for(db_session, "u/member") == ["anxiety"]

    membership.leave(db_session, "u/member", "anxiety")
    membership.leave(db_session, "u/member", "anxiety")
    assert membership.memberships_for(db_session, "u/member") == []


def test_unknown_community_is_rejected(db_session) -> None:
    with pytest.raises(InvalidRequestError, match="Invalid community"):
        membership.join(db_session, "u/member", "gaming")


def test_posting_requires_membership(db_session) -> None:
    with pytest.raises(PermissionDeniedError, match="Join the stress community"):
        forum.create_post(
            db_session,
            title="Deadline week",
            content="How do you all wind down at night?",
            community="stress",
            author_uid="u/outsider",
        )

    membership.join(db_session, "u/outsider", "stress")
    post = forum.create_post(
        db_session,
        title="Deadline week",
        content="How do you all wind down at night?",
        community="stress",
        author_uid="u/outsider",
    )
    assert post.id is not None


def test_commenting_uses_parent_post_community(db_session, member) -> None:
    member("u/author", "anxiety")
    post = forum.create_post(
        db_session,
        title="First therapy session",
        content="Nervous about tomorrow, any tips?",
        community="anxiety",
        author_uid="u/author",
    )
    member("u/reader", "depression")

    with pytest.raises(PermissionDeniedError):
        forum.create_comment(db_session, post_id=post.id, content="Good luck!", author_uid="u/reader")


def test_rules_fall_back_when_missing(db_session) -> None:
    assert membership.get_rules(db_session, "general") == membership.NO_RULES_TEXT


def test_seed_is_idempotent(db_session) -> None:
    first = seed.seed_forum(db_session)
    second = seed.seed_forum(db_session)

    assert first["rules_added"] == 3
    assert first["posts_added"] == 3
    assert second == {"rules_added": 0, "posts_added": 0, "duplicates_removed": 0}
    assert "Be respectful" in membership.get_rules(db_session, "depression")
    welcome = db_session.scalars(select(ForumPost).where(ForumPost.community == "anxiety")).one()
    assert welcome.pinned is True
    assert welcome.author_uid == forum.ADMIN_FORUM_UID


def test_cleanup_keeps_oldest_welcome_post(db_session) -> None:
    seed.seed_forum(db_session)
    original = db_session.scalars(
        select(ForumPost.id).where(ForumPost.community == "stress")
    ).one()
    db_session.add(
        ForumPost(
            title="Welcome to the Stress Management Community",
            content="A second copy of the welcome post.",
            community="stress",
            author_uid=forum.ADMIN_FORUM_UID,
            upvotes=1,
            pinned=True,
        )
    )
    db_session.commit()

    assert seed.cleanup_duplicate_welcome_posts(db_session) == 1
    remaining = db_session.scalars(
        select(ForumPost.id).where(ForumPost.community == "stress")
    ).all()
    assert remaining == [original]


def test_forum_identity_is_stable(db_session, test_user, admin_user) -> None:
    handle, aura = forum.forum_identity(db_session, test_user.id)

    assert handle.startswith("u/") and len(handle) == 8
    assert aura == 0
    assert forum.forum_identity(db_session, test_user.id) == (handle, 0)
    assert forum.forum_identity(db_session, admin_user.id)[0] == "admin"
