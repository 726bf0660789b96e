# tests/services/test_ledger.py
"""Vote and aura ledger behavior."""

import pytest
from sqlalchemy import select

from chetana.models import ForumVote
from chetana.services import forum, ledger
from chetana.services.errors import NotFoundError, PermissionDeniedError


@pytest.fixture()
def post(db_session, member):
    author = member("u/author")
    return forum.create_post(
        db_session,
        title="Rough week",
        content="Some days are heavier than others.",
        community="depression",
        author_uid=author,
    )


def test_creating_content_books_author_upvote_and_aura(db_session, post) -> None:
    assert post.upvotes == 1
    assert post.downvotes == 0
    assert ledger.get_aura(db_session, "u/author") == ledger.CONTENT_CREATION_AURA

    votes = db_session.scalars(select(ForumVote).where(ForumVote.target_id == post.id)).all()
    assert [(vote.voter_uid, vote.vote_type) for vote in votes] == [("u/author", "upvote")]


def test_new_upvote_credits_author(db_session, post) -> None:
    outcome = ledger.apply_vote(db_session, "post", post.id, "upvote", "u/reader")

    assert outcome.aura_change == 1
    assert outcome.upvotes == 2
    assert outcome.user_vote == "upvote"
    assert ledger.get_aura(db_session, "u/author") == 3


def test_repeating_a_vote_withdraws_it(db_session, post) -> None:
    ledger.apply_vote(db_session, "post", post.id, "upvote", "u/reader")
    outcome = ledger.apply_vote(db_session, "post", post.id, "upvote", "u/reader")

    assert outcome.aura_change == -1
    assert outcome.user_vote is None
    assert outcome.upvotes == 1
    assert ledger.get_aura(db_session, "u/author") == 2
    assert ledger.votes_by(db_session, "u/reader", "post", [post.id]) == {}


def test_withdrawn_downvote_restores_aura(db_session, post) -> None:
    ledger.apply_vote(db_session, "post", post.id, "downvote", "u/reader")
    outcome = ledger.apply_vote(db_session, "post", post.id, "downvote", "u/reader")

    assert outcome.aura_change == 1
    assert outcome.downvotes == 0
    assert ledger.get_aura(db_session, "u/author") == 2


def test_switching_vote_moves_aura_by_two(db_session, post) -> None:
    ledger.apply_vote(db_session, "post", post.id, "upvote", "u/reader")
    outcome = ledger.apply_vote(db_session, "post", post.id, "downvote", "u/reader")

    assert outcome.aura_change == -2
    assert (outcome.upvotes, outcome.downvotes) == (1, 1)
    assert outcome.votes == 0
    assert outcome.user_vote == "downvote"
    assert ledger.get_aura(db_session, "u/author") == 1

    back = ledger.apply_vote(db_session, "post", post.id, "upvote", "u/reader")
    assert back.aura_change == 2
    assert ledger.get_aura(db_session, "u/author") == 3


def test_aura_never_goes_negative(db_session, post) -> None:
    ledger.adjust_aura(db_session, "u/author", -100)
    db_session.commit()
    assert ledger.get_aura(db_session, "u/author") == 0

    outcome = ledger.apply_vote(db_session, "post", post.id, "downvote", "u/reader")

    assert outcome.aura_change == -1
    assert ledger.get_aura(db_session, "u/author") == 0


def test_self_vote_is_rejected(db_session, post) -> None:
    with pytest.raises(PermissionDeniedError, match="own content"):
        ledger.apply_vote(db_session, "post", post.id, "upvote", "u/author")

    assert ledger.get_aura(db_session, "u/author") == 2


def test_vote_on_missing_target(db_session) -> None:
    with pytest.raises(NotFoundError, match="Comment not found"):
        ledger.apply_vote(db_session, "comment", 999, "upvote", "u/reader")


def test_comment_votes_are_tracked_separately(db_session, post, member) -> None:
    commenter = member("u/helper")
    comment = forum.create_comment(
        db_session,
        post_id=post.id,
        content="Sending strength.",
        author_uid=commenter,
    )

    ledger.apply_vote(db_session, "comment", comment.id, "upvote", "u/author")

    assert ledger.get_aura(db_session, "u/helper") == 3
    assert ledger.get_aura(db_session, "u/author") == 2
    assert ledger.votes_by(db_session, "u/author", "comment", [comment.id]) == {
        comment.id: "upvote"
    }
