# src/chetana/services/forum.py
"""Forum content services: posting, listing and member identities."""

from __future__ import annotations

import html
import logging
import secrets
import string
import time

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from chetana.core.settings import settings
from chetana.db.session import atomic
from chetana.models import ForumComment, ForumPost, User
from chetana.schemas.forum import CommentOut, ForumStats, PostOut
from chetana.services import ledger, membership
from chetana.services.errors import InvalidRequestError, NotFoundError
from chetana.services.roles import is_admin

logger = logging.getLogger(__name__)

TITLE_MIN, TITLE_MAX = 5, 200
POST_CONTENT_MIN, POST_CONTENT_MAX = 10, 5000
COMMENT_CONTENT_MIN, COMMENT_CONTENT_MAX = 1, 2000

ADMIN_FORUM_UID = "admin"
_UID_ALPHABET = string.ascii_lowercase + string.digits
_BASE36 = string.digits + string.ascii_lowercase
_UID_ATTEMPTS = 10


def sanitize_text(value: str, *, escape: bool = True) -> str:
    """Trim ``value`` and HTML-escape it unless it is an identifier."""
    value = value.strip()
    return html.escape(value) if escape else value


def _check_length(value: str, low: int, high: int, label: str) -> None:
    if not low <= len(value) <= high:
        raise InvalidRequestError(f"{label} must be between {low} and {high} characters")


def create_post(
    db: Session,
    *,
    title: str,
    content: str,
    community: str,
    author_uid: str,
) -> ForumPost:
    """Publish a post with the author's automatic upvote.

    Administrator posts are pinned on creation.
    """
    title = sanitize_text(title)
    content = sanitize_text(content)
    author_uid = sanitize_text(author_uid, escape=False)
    _check_length(title, TITLE_MIN, TITLE_MAX, "Title")
    _check_length(content, POST_CONTENT_MIN, POST_CONTENT_MAX, "Content")
    membership.validate_community(community)
    membership.require_membership(db, author_uid, community)

    post = ForumPost(
        title=title,
        content=content,
        community=community,
        author_uid=author_uid,
        upvotes=1,
        downvotes=0,
        pinned=is_admin(author_uid),
    )
    with atomic(db):
        db.add(post)
        db.flush()
        ledger.record_authored_content(db, "post", post)

    logger.info("Post %d created in %s by %s", post.id, community, author_uid)
    return post


def create_comment(
    db: Session,
    *,
    post_id: int,
    content: str,
    author_uid: str,
) -> ForumComment:
    """Add a comment to an existing post with the author's automatic upvote."""
    content = sanitize_text(content)
    author_uid = sanitize_text(author_uid, escape=False)
    _check_length(content, COMMENT_CONTENT_MIN, COMMENT_CONTENT_MAX, "Comment")

    post = db.get(ForumPost, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    membership.require_membership(db, author_uid, post.community)

    comment = ForumComment(
        post_id=post_id,
        content=content,
        author_uid=author_uid,
        upvotes=1,
        downvotes=0,
        pinned=is_admin(author_uid),
    )
    with atomic(db):
        db.add(comment)
        db.flush()
        ledger.record_authored_content(db, "comment", comment)

    return comment


def _comment_counts(db: Session, post_ids: list[int]) -> dict[int, int]:
    if not post_ids:
        return {}
    rows = db.execute(
        select(ForumComment.post_id, func.count())
        .where(ForumComment.post_id.in_(post_ids))
        .group_by(ForumComment.post_id)
    )
    return {post_id: count for post_id, count in rows}


def _render_posts(db: Session, posts: list[ForumPost], viewer_uid: str | None) -> list[PostOut]:
    post_ids = [post.id for post in posts]
    counts = _comment_counts(db, post_ids)
    viewer_votes = ledger.votes_by(db, viewer_uid, "post", post_ids) if viewer_uid else {}
    rendered = []
    for post in posts:
        out = PostOut.model_validate(post)
        out.comment_count = counts.get(post.id, 0)
        out.user_vote = viewer_votes.get(post.id)
        rendered.append(out)
    return rendered


def list_posts(
    db: Session,
    community: str | None = None,
    viewer_uid: str | None = None,
) -> list[PostOut]:
    """Return a community's posts, pinned first and then newest first."""
    posts = list(
        db.scalars(
            select(ForumPost)
            .where(ForumPost.community == (community or settings.default_community))
            .order_by(ForumPost.pinned.desc(), ForumPost.created_at.desc(), ForumPost.id.desc())
            .limit(settings.forum_page_size)
        )
    )
    return _render_posts(db, posts, viewer_uid)


def get_post(db: Session, post_id: int, viewer_uid: str | None = None) -> PostOut:
    """Return a single post with its comment count and the viewer's vote."""
    post = db.get(ForumPost, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return _render_posts(db, [post], viewer_uid)[0]


def list_comments(db: Session, post_id: int, viewer_uid: str | None = None) -> list[CommentOut]:
    """Return a post's comments, pinned first and then oldest first."""
    comments = list(
        db.scalars(
            select(ForumComment)
            .where(ForumComment.post_id == post_id)
            .order_by(ForumComment.pinned.desc(), ForumComment.created_at.asc(), ForumComment.id.asc())
        )
    )
    viewer_votes = (
        ledger.votes_by(db, viewer_uid, "comment", [comment.id for comment in comments])
        if viewer_uid
        else {}
    )
    rendered = []
    for comment in comments:
        out = CommentOut.model_validate(comment)
        out.user_vote = viewer_votes.get(comment.id)
        rendered.append(out)
    return rendered


def _generate_forum_uid(db: Session) -> str:
    for _ in range(_UID_ATTEMPTS):
        candidate = "u/" + "".join(secrets.choice(_UID_ALPHABET) for _ in range(6))
        if db.scalar(select(User.id).where(User.forum_uid == candidate)) is None:
            return candidate
    return f"u/{_to_base36(time.time_ns() // 1_000_000)}"


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def forum_identity(db: Session, user_id: int) -> tuple[str, int]:
    """Return the forum handle and aura of an account, assigning a handle on first use.

    Administrators always appear as ``admin``.
    """
    with atomic(db):
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        if user.is_admin or is_admin(user.email):
            user.forum_uid = ADMIN_FORUM_UID
        elif not user.forum_uid:
            user.forum_uid = _generate_forum_uid(db)
            logger.info("Assigned forum handle %s to user %d", user.forum_uid, user_id)

        forum_uid = user.forum_uid
        aura = ledger.ensure_aura(db, forum_uid).aura_points
    return forum_uid, aura


def adjust_user_aura(db: Session, user_id: int, delta: int) -> int:
    """Apply a manual aura change to an account's forum identity."""
    with atomic(db):
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not user.forum_uid:
            raise InvalidRequestError("User has no forum identity yet")
        points = ledger.adjust_aura(db, user.forum_uid, delta)
    return points


def forum_stats(db: Session) -> ForumStats:
    """Return post, comment and member totals."""
    total_members, communities = membership.member_counts(db)
    return ForumStats(
        total_posts=db.scalar(select(func.count()).select_from(ForumPost)) or 0,
        total_comments=db.scalar(select(func.count()).select_from(ForumComment)) or 0,
        total_users=total_members,
        communities=communities,
    )


def _is_welcome_title():
    title = func.lower(ForumPost.title)
    return or_(title.contains("welcome"), title.contains("community guidelines"))


def seed_welcome_posts(db: Session, posts_by_community: dict[str, tuple[str, str]]) -> int:
    """Create a pinned admin welcome post in communities lacking one.

    Runs inside the caller's transaction; returns the number of posts added.
    """
    added = 0
    for community, (title, content) in posts_by_community.items():
        existing = db.scalar(
            select(ForumPost.id).where(ForumPost.community == community, _is_welcome_title())
        )
        if existing is not None:
            continue
        db.add(
            ForumPost(
                title=title,
                content=content,
                community=community,
                author_uid=ADMIN_FORUM_UID,
                upvotes=1,
                pinned=True,
            )
        )
        added += 1
    return added


def remove_duplicate_welcome_posts(db: Session) -> int:
    """Delete all but the oldest admin welcome post of each community.

    Runs inside the caller's transaction; returns the number of posts removed.
    """
    welcome_filter = (ForumPost.author_uid == ADMIN_FORUM_UID, _is_welcome_title())
    keep = select(func.min(ForumPost.id)).where(*welcome_filter).group_by(ForumPost.community)
    duplicate_ids = list(
        db.scalars(select(ForumPost.id).where(*welcome_filter, ForumPost.id.not_in(keep)))
    )
    if not duplicate_ids:
        return 0

    ledger.forget_votes(db, "post", duplicate_ids)
    db.query(ForumComment).filter(ForumComment.post_id.in_(duplicate_ids)).delete(
        synchronize_session=False
    )
    db.query(ForumPost).filter(ForumPost.id.in_(duplicate_ids)).delete(synchronize_session=False)
    return len(duplicate_ids)
