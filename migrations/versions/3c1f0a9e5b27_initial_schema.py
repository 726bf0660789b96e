"""initial schema

Revision ID: 3c1f0a9e5b27
Revises:
Create Date: 2026-10-19 09:12:44.518302

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f0a9e5b27"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, *, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    """Create account, tracker, chat and forum tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("forum_uid", sa.String(length=20), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_forum_uid", "users", ["forum_uid"], unique=False)

    op.create_table(
        "user_streaks",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False),
        sa.Column("longest_streak", sa.Integer(), nullable=False),
        sa.Column("last_assessment_date", sa.Date(), nullable=True),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "assessments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("phq9_score", sa.Integer(), nullable=True),
        sa.Column("gad7_score", sa.Integer(), nullable=True),
        sa.Column("pss_score", sa.Integer(), nullable=True),
        sa.Column("responses", sa.JSON(), nullable=True),
        sa.Column("assessment_date", sa.Date(), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_assessments_user_id", "assessments", ["user_id"], unique=False)

    op.create_table(
        "mood_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("mood_date", sa.Date(), nullable=False),
        sa.Column("mood_rating", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "mood_date", name="uq_mood_entries_user_date"),
    )

    op.create_table(
        "user_locations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("accuracy", sa.Float(), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_locations_user_id", "user_locations", ["user_id"], unique=False)

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("emotion", sa.String(length=16), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_chat_messages_user_created",
        "chat_messages",
        ["user_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "forum_posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("community", sa.String(length=50), nullable=False),
        sa.Column("author_uid", sa.String(length=255), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        sa.Column("pinned", sa.Boolean(), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_forum_posts_community_listing",
        "forum_posts",
        ["community", "pinned", "created_at"],
        unique=False,
    )

    op.create_table(
        "forum_comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_uid", sa.String(length=255), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        sa.Column("pinned", sa.Boolean(), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["post_id"], ["forum_posts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_forum_comments_post_id", "forum_comments", ["post_id"], unique=False)

    op.create_table(
        "forum_votes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("voter_uid", sa.String(length=255), nullable=False),
        sa.Column("target_type", sa.String(length=10), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("vote_type", sa.String(length=10), nullable=False),
        _timestamp("created_at"),
        sa.CheckConstraint(
            "target_type IN ('post', 'comment')",
            name="ck_forum_votes_target_type",
        ),
        sa.CheckConstraint(
            "vote_type IN ('upvote', 'downvote')",
            name="ck_forum_votes_vote_type",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "voter_uid",
            "target_type",
            "target_id",
            name="uq_forum_votes_voter_target",
        ),
    )
    op.create_index(
        "ix_forum_votes_target",
        "forum_votes",
        ["target_type", "target_id"],
        unique=False,
    )

    op.create_table(
        "forum_aura",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_uid", sa.String(length=255), nullable=False),
        sa.Column("aura_points", sa.Integer(), nullable=False),
        _timestamp("created_at"),
        sa.CheckConstraint("aura_points >= 0", name="ck_forum_aura_non_negative"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_uid"),
    )

    op.create_table(
        "forum_memberships",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_uid", sa.String(length=255), nullable=False),
        sa.Column("community", sa.String(length=50), nullable=False),
        _timestamp("joined_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_uid",
            "community",
            name="uq_forum_memberships_user_community",
        ),
    )
    op.create_index(
        "ix_forum_memberships_user_uid",
        "forum_memberships",
        ["user_uid"],
        unique=False,
    )

    op.create_table(
        "forum_community_rules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("community", sa.String(length=50), nullable=False),
        sa.Column("rules", sa.Text(), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("community"),
    )

    op.create_table(
        "forum_reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("content_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("reporter_uid", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        _timestamp("created_at"),
        _timestamp("resolved_at", nullable=True),
        sa.CheckConstraint("type IN ('post', 'comment')", name="ck_forum_reports_type"),
        sa.CheckConstraint(
            "status IN ('pending', 'deleted', 'dismissed')",
            name="ck_forum_reports_status",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_forum_reports_status", "forum_reports", ["status"], unique=False)


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_forum_reports_status", table_name="forum_reports")
    op.drop_table("forum_reports")
    op.drop_table("forum_community_rules")
    op.drop_index("ix_forum_memberships_user_uid", table_name="forum_memberships")
    op.drop_table("forum_memberships")
    op.drop_table("forum_aura")
    op.drop_index("ix_forum_votes_target", table_name="forum_votes")
    op.drop_table("forum_votes")
    op.drop_index("ix_forum_comments_post_id", table_name="forum_comments")
    op.drop_table("forum_comments")
    op.drop_index("ix_forum_posts_community_listing", table_name="forum_posts")
    op.drop_table("forum_posts")
    op.drop_index("ix_chat_messages_user_created", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("ix_user_locations_user_id", table_name="user_locations")
    op.drop_table("user_locations")
    op.drop_table("mood_entries")
    op.drop_index("ix_assessments_user_id", table_name="assessments")
    op.drop_table("assessments")
    op.drop_table("user_streaks")
    op.drop_index("ix_users_forum_uid", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
