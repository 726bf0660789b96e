# src/chetana/schemas/forum.py
"""Forum request and response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import Identifier, PositiveId, RequestModel, TargetType, VoteType


class PostCreate(RequestModel):
    """Body for ``POST ?action=posts``."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    community: str = Field(..., min_length=1)
    author_uid: Identifier = Field(..., alias="authorUid")


class CommentCreate(RequestModel):
    """Body for ``POST ?action=comments``."""

    post_id: PositiveId = Field(..., alias="postId")
    content: str = Field(..., min_length=1)
    author_uid: Identifier = Field(..., alias="authorUid")


class OwnedContentDelete(RequestModel):
    """Body for ``DELETE ?action=posts`` and ``DELETE ?action=comments``."""

    id: PositiveId
    author_uid: Identifier = Field(..., alias="authorUid")


class _TargetedRequest(RequestModel):
    """Request addressing either a post or a comment."""

    post_id: PositiveId | None = Field(None, alias="postId")
    comment_id: PositiveId | None = Field(None, alias="commentId")

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "_TargetedRequest":
        if (self.post_id is None) == (self.comment_id is None):
            raise ValueError("Provide exactly one of postId or commentId")
        return self

    @property
    def target_type(self) -> TargetType:
        return "post" if self.post_id is not None else "comment"

    @property
    def target_id(self) -> int:
        return self.post_id if self.post_id is not None else self.comment_id  # type: ignore[return-value]


class VoteRequest(_TargetedRequest):
    """Body for ``POST ?action=vote``."""

    vote_type: VoteType = Field(..., alias="voteType")
    voter_uid: Identifier = Field(..., alias="voterUid")


class PinRequest(_TargetedRequest):
    """Body for ``POST ?action=pin``."""

    pinner_uid: Identifier = Field(..., alias="pinnerUid")


class MembershipRequest(RequestModel):
    """Body for ``POST ?action=join``."""

    community: str = Field(..., min_length=1)
    user_uid: Identifier = Field(..., alias="userUid")
    action: Literal["join", "leave"]


class ReportCreate(RequestModel):
    """Body for ``POST ?action=report``."""

    type: TargetType
    id: PositiveId
    reason: str = Field(..., min_length=1)
    reporter_uid: Identifier = Field(..., alias="reporterUid")


class ReportResolve(RequestModel):
    """Body for ``POST ?action=resolve-report``."""

    report_id: PositiveId = Field(..., alias="reportId")
    action: Literal["delete", "dismiss"]
    resolver_uid: Identifier | None = Field(None, alias="resolverUid")


class ContentDelete(RequestModel):
    """Body for ``DELETE ?action=delete-content``."""

    type: TargetType
    id: PositiveId
    author_uid: Identifier = Field(..., alias="authorUid")


class AuraAdjust(RequestModel):
    """Body for ``POST ?action=user``."""

    user_id: PositiveId = Field(..., alias="userId")
    aura_change: int = Field(..., alias="auraChange")


class PostOut(BaseModel):
    """Post as rendered in listings and detail views."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    community: str
    author_uid: str
    upvotes: int
    downvotes: int
    votes: int
    pinned: bool
    created_at: datetime
    comment_count: int = 0
    user_vote: VoteType | None = None


class CommentOut(BaseModel):
    """Comment as rendered beneath a post."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    content: str
    author_uid: str
    upvotes: int
    downvotes: int
    votes: int
    pinned: bool
    created_at: datetime
    user_vote: VoteType | None = None


class ReportOut(BaseModel):
    """Pending report with a preview of the reported content."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: TargetType
    content_id: int
    reason: str
    reporter_uid: str
    status: str
    created_at: datetime
    resolved_at: datetime | None = None
    content_preview: str | None = None
    author_uid: str | None = None


class ForumStats(BaseModel):
    """Aggregate counters for the forum landing page."""

    total_posts: int = Field(..., serialization_alias="totalPosts")
    total_comments: int = Field(..., serialization_alias="totalComments")
    total_users: int = Field(..., serialization_alias="totalUsers")
    communities: dict[str, int]
