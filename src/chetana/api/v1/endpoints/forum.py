# src/chetana/api/v1/endpoints/forum.py
"""Forum endpoints, dispatched on the ``action`` query parameter."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, TypeVar

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from chetana.api.v1.dependencies import SessionDep, enforce_rate_limit
from chetana.schemas.forum import (
    AuraAdjust,
    CommentCreate,
    ContentDelete,
    MembershipRequest,
    OwnedContentDelete,
    PinRequest,
    PostCreate,
    ReportCreate,
    ReportResolve,
    VoteRequest,
)
from chetana.services import forum, ledger, membership, seed
from chetana.services.errors import InvalidRequestError
from chetana.services.moderation import ModerationService

router = APIRouter(
    prefix="/forum",
    tags=["forum"],
    dependencies=[Depends(enforce_rate_limit)],
)

ModelT = TypeVar("ModelT", bound=BaseModel)
JsonBody = Annotated[dict[str, Any] | None, Body()]


@dataclass(frozen=True)
class ForumQuery:
    """Query parameters shared by read actions."""

    community: str | None
    post_id: int | None
    user_uid: str | None
    user_id: int | None


def _forum_query(
    community: Annotated[str | None, Query()] = None,
    post_id: Annotated[int | None, Query(alias="postId", gt=0)] = None,
    user_uid: Annotated[str | None, Query(alias="userUid")] = None,
    user_id: Annotated[int | None, Query(alias="userId", gt=0)] = None,
) -> ForumQuery:
    return ForumQuery(
        community=community,
        post_id=post_id,
        user_uid=user_uid.strip() if user_uid else None,
        user_id=user_id,
    )


ForumQueryDep = Annotated[ForumQuery, Depends(_forum_query)]


def _parse(model: type[ModelT], body: dict[str, Any] | None) -> ModelT:
    return model.model_validate(body or {})


# --- read actions -------------------------------------------------------------------


def _get_posts(db: Session, query: ForumQuery) -> Any:
    if query.post_id is not None:
        return forum.get_post(db, query.post_id, query.user_uid)
    return forum.list_posts(db, query.community, query.user_uid)


def _get_comments(db: Session, query: ForumQuery) -> Any:
    if query.post_id is None:
        raise InvalidRequestError("Post ID required")
    return forum.list_comments(db, query.post_id, query.user_uid)


def _get_user(db: Session, query: ForumQuery) -> dict[str, Any]:
    if query.user_id is None:
        raise InvalidRequestError("User ID required")
    username, aura_points = forum.forum_identity(db, query.user_id)
    return {"success": True, "username": username, "auraPoints": aura_points}


def _get_stats(db: Session, query: ForumQuery) -> dict[str, Any]:
    return {"success": True, "stats": forum.forum_stats(db)}


def _get_reports(db: Session, query: ForumQuery) -> Any:
    return ModerationService.pending_reports(db)


def _get_memberships(db: Session, query: ForumQuery) -> dict[str, Any]:
    if not query.user_uid:
        raise InvalidRequestError("User UID required")
    return {"success": True, "memberships": membership.memberships_for(db, query.user_uid)}


def _get_rules(db: Session, query: ForumQuery) -> dict[str, Any]:
    if not query.community:
        raise InvalidRequestError("Community parameter required")
    return {"success": True, "rules": membership.get_rules(db, query.community)}


# --- write actions ------------------------------------------------------------------


def _create_post(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(PostCreate, body)
    post = forum.create_post(
        db,
        title=data.title,
        content=data.content,
        community=data.community,
        author_uid=data.author_uid,
    )
    return {"success": True, "postId": post.id}


def _create_comment(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(CommentCreate, body)
    comment = forum.create_comment(
        db,
        post_id=data.post_id,
        content=data.content,
        author_uid=data.author_uid,
    )
    return {"success": True, "commentId": comment.id}


def _vote(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(VoteRequest, body)
    outcome = ledger.apply_vote(
        db,
        data.target_type,
        data.target_id,
        data.vote_type,
        data.voter_uid,
    )
    return {"success": True, "auraChange": outcome.aura_change}


def _join(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(MembershipRequest, body)
    if data.action == "join":
        membership.join(db, data.user_uid, data.community)
    else:
        membership.leave(db, data.user_uid, data.community)
    return {"success": True}


def _pin(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(PinRequest, body)
    pinned = ModerationService.toggle_pin(db, data.target_type, data.target_id, data.pinner_uid)
    return {"success": True, "pinned": pinned}


def _report(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(ReportCreate, body)
    ModerationService.file_report(
        db,
        data.type,
        data.id,
        forum.sanitize_text(data.reason),
        data.reporter_uid,
    )
    return {"success": True}


def _resolve_report(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(ReportResolve, body)
    ModerationService.resolve_report(db, data.report_id, data.action, data.resolver_uid)
    return {"success": True}


def _adjust_aura(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(AuraAdjust, body)
    return {"success": True, "auraPoints": forum.adjust_user_aura(db, data.user_id, data.aura_change)}


def _init(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    seed.seed_forum(db)
    return {"success": True, "message": "Forum tables initialized"}


def _cleanup_duplicates(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    removed = seed.cleanup_duplicate_welcome_posts(db)
    return {"success": True, "message": f"Removed {removed} duplicate welcome posts"}


def _delete_post(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(OwnedContentDelete, body)
    ModerationService.delete_content(db, "post", data.id, data.author_uid)
    return {"success": True}


def _delete_comment(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(OwnedContentDelete, body)
    ModerationService.delete_content(db, "comment", data.id, data.author_uid)
    return {"success": True}


def _delete_content(db: Session, body: dict[str, Any] | None) -> dict[str, Any]:
    data = _parse(ContentDelete, body)
    ModerationService.delete_content(db, data.type, data.id, data.author_uid)
    return {"success": True}


ReadHandler = Callable[[Session, ForumQuery], Any]
WriteHandler = Callable[[Session, dict[str, Any] | None], Any]

GET_ACTIONS: dict[str, ReadHandler] = {
    "posts": _get_posts,
    "comments": _get_comments,
    "user": _get_user,
    "stats": _get_stats,
    "reports": _get_reports,
    "memberships": _get_memberships,
    "community-rules": _get_rules,
}

POST_ACTIONS: dict[str, WriteHandler] = {
    "init": _init,
    "cleanup-duplicates": _cleanup_duplicates,
    "posts": _create_post,
    "comments": _create_comment,
    "vote": _vote,
    "join": _join,
    "pin": _pin,
    "report": _report,
    "resolve-report": _resolve_report,
    "user": _adjust_aura,
}

DELETE_ACTIONS: dict[str, WriteHandler] = {
    "posts": _delete_post,
    "comments": _delete_comment,
    "delete-content": _delete_content,
}

_KNOWN_ACTIONS = set(GET_ACTIONS) | set(POST_ACTIONS) | set(DELETE_ACTIONS)


def _resolve_handler(table: dict[str, Any], action: str) -> Any:
    handler = table.get(action)
    if handler is not None:
        return handler
    if action in _KNOWN_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail="Method not allowed",
        )
    raise InvalidRequestError("Invalid action")


ActionParam = Annotated[str, Query(description="Forum operation to perform")]


@router.get("")
def forum_read(action: ActionParam, query: ForumQueryDep, db: SessionDep) -> Any:
    """Read forum content: posts, comments, profiles, stats, reports and rules."""
    handler: ReadHandler = _resolve_handler(GET_ACTIONS, action)
    return handler(db, query)


@router.post("")
def forum_write(action: ActionParam, db: SessionDep, body: JsonBody = None) -> Any:
    """Create content, vote, manage memberships and moderate."""
    handler: WriteHandler = _resolve_handler(POST_ACTIONS, action)
    return handler(db, body)


@router.delete("")
def forum_delete(action: ActionParam, db: SessionDep, body: JsonBody = None) -> Any:
    """Delete a post or comment as its author or an admin."""
    handler: WriteHandler = _resolve_handler(DELETE_ACTIONS, action)
    return handler(db, body)
