"""Unit tests for the ORM models defined in chetana.models.

These tests verify mapping details the services rely on: table names, the
one-vote-per-target unique constraint, the non-negative aura check and the
post/comment relationship.
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import attributes

from chetana import models


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert models.User.__tablename__ == "users"
    assert models.ForumPost.__tablename__ == "forum_posts"
    assert models.ForumComment.__tablename__ == "forum_comments"
    assert models.ForumVote.__tablename__ == "forum_votes"
    assert models.ForumAura.__tablename__ == "forum_aura"
    assert models.ForumReport.__tablename__ == "forum_reports"
    assert models.UserStreak.__tablename__ == "user_streaks"
    assert models.ChatMessage.__tablename__ == "chat_messages"


def test_streak_is_keyed_by_user():
    pk_names = {c.name for c in models.UserStreak.__table__.primary_key}
    assert pk_names == {"user_id"}


def test_post_comment_relationship_is_instrumented():
    for attr in (models.ForumPost.comments, models.ForumComment.post):
        assert isinstance(attr, attributes.InstrumentedAttribute)


def test_one_vote_row_per_voter_and_target(db_session):
    db_session.add_all(
        [
            models.ForumVote(voter_uid="u/a", target_type="post", target_id=1, vote_type="upvote"),
            models.ForumVote(voter_uid="u/a", target_type="post", target_id=1, vote_type="downvote"),
        ]
    )
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_same_target_id_on_different_types_is_allowed(db_session):
    db_session.add_all(
        [
            models.ForumVote(voter_uid="u/a", target_type="post", target_id=1, vote_type="upvote"),
            models.ForumVote(voter_uid="u/a", target_type="comment", target_id=1, vote_type="upvote"),
        ]
    )
    db_session.commit()


def test_aura_cannot_be_negative(db_session):
    db_session.add(models.ForumAura(user_uid="u/a", aura_points=-1))
    with pytest.raises(IntegrityError):
        db_session.commit()
