# tests/v1/test_forum_moderation.py
"""Pinning, reports and deletion through the forum endpoint."""

import pytest
from fastapi import status

from chetana.services import forum, ledger

FORUM = "/api/v1/forum"


@pytest.fixture()
def post_id(db_session, member) -> int:
    member("u/author")
    post = forum.create_post(
        db_session,
        title="Sleep troubles",
        content="I keep waking up at 3am every night.",
        community="depression",
        author_uid="u/author",
    )
    return post.id


@pytest.fixture()
def comment_id(db_session, member, post_id) -> int:
    member("u/helper")
    comment = forum.create_comment(
        db_session,
        post_id=post_id,
        content="Try keeping the phone out of the room.",
        author_uid="u/helper",
    )
    return comment.id


def test_pin_requires_admin(client, post_id) -> None:
    denied = client.post(FORUM, params={"action": "pin"}, json={"postId": post_id, "pinnerUid": "u/helper"})
    assert denied.status_code == status.HTTP_403_FORBIDDEN
    assert denied.json()["error"] == "Only admins can pin content"

    pinned = client.post(FORUM, params={"action": "pin"}, json={"postId": post_id, "pinnerUid": "admin"})
    assert pinned.json() == {"success": True, "pinned": True}


def test_pin_comment(client, comment_id) -> None:
    response = client.post(
        FORUM,
        params={"action": "pin"},
        json={"commentId": comment_id, "pinnerUid": "u/kklt3o"},
    )
    assert response.json()["pinned"] is True


def test_report_and_list(client, post_id) -> None:
    response = client.post(
        FORUM,
        params={"action": "report"},
        json={"type": "post", "id": post_id, "reason": "Looks like spam", "reporterUid": "u/helper"},
    )
    assert response.json() == {"success": True}

    reports = client.get(FORUM, params={"action": "reports"}).json()
    assert len(reports) == 1
    assert reports[0]["status"] == "pending"
    assert reports[0]["content_preview"] == "Sleep troubles"
    assert reports[0]["author_uid"] == "u/author"


def test_report_reason_too_short(client, post_id) -> None:
    response = client.post(
        FORUM,
        params={"action": "report"},
        json={"type": "post", "id": post_id, "reason": "meh", "reporterUid": "u/helper"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def _file_report(client, content_type: str, content_id: int) -> int:
    client.post(
        FORUM,
        params={"action": "report"},
        json={"type": content_type, "id": content_id, "reason": "Please review", "reporterUid": "u/x"},
    )
    return client.get(FORUM, params={"action": "reports"}).json()[0]["id"]


def test_resolve_delete_cascades(client, post_id, comment_id) -> None:
    report_id = _file_report(client, "post", post_id)

    response = client.post(
        FORUM,
        params={"action": "resolve-report"},
        json={"reportId": report_id, "action": "delete", "resolverUid": "admin"},
    )

    assert response.json() == {"success": True}
    assert client.get(FORUM, params={"action": "posts", "postId": post_id}).status_code == 404
    assert client.get(FORUM, params={"action": "comments", "postId": post_id}).json() == []
    assert client.get(FORUM, params={"action": "reports"}).json() == []


def test_resolve_dismiss(client, comment_id, post_id) -> None:
    report_id = _file_report(client, "comment", comment_id)

    response = client.post(
        FORUM,
        params={"action": "resolve-report"},
        json={"reportId": report_id, "action": "dismiss", "resolverUid": "admin"},
    )

    assert response.status_code == status.HTTP_200_OK
    comments = client.get(FORUM, params={"action": "comments", "postId": post_id}).json()
    assert [c["id"] for c in comments] == [comment_id]


def test_resolve_without_resolver_identity(client, post_id) -> None:
    report_id = _file_report(client, "post", post_id)

    response = client.post(
        FORUM,
        params={"action": "resolve-report"},
        json={"reportId": report_id, "action": "dismiss"},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert client.get(FORUM, params={"action": "reports"}).json() == []
    assert client.get(FORUM, params={"action": "posts", "postId": post_id}).status_code == 200


def test_resolve_requires_admin(client, post_id) -> None:
    report_id = _file_report(client, "post", post_id)

    response = client.post(
        FORUM,
        params={"action": "resolve-report"},
        json={"reportId": report_id, "action": "delete", "resolverUid": "u/helper"},
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_resolve_rejects_unknown_action(client, post_id) -> None:
    report_id = _file_report(client, "post", post_id)

    response = client.post(
        FORUM,
        params={"action": "resolve-report"},
        json={"reportId": report_id, "action": "archive", "resolverUid": "admin"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_author_deletes_post_with_comments(client, db_session, post_id, comment_id) -> None:
    denied = client.request(
        "DELETE",
        FORUM,
        params={"action": "posts"},
        json={"id": post_id, "authorUid": "u/helper"},
    )
    assert denied.status_code == status.HTTP_403_FORBIDDEN
    assert denied.json()["error"] == "Not authorized to delete this post"

    response = client.request(
        "DELETE",
        FORUM,
        params={"action": "posts"},
        json={"id": post_id, "authorUid": "u/author"},
    )

    assert response.json() == {"success": True}
    assert ledger.votes_by(db_session, "u/helper", "comment", [comment_id]) == {}
    stats = client.get(FORUM, params={"action": "stats"}).json()["stats"]
    assert (stats["totalPosts"], stats["totalComments"]) == (0, 0)


def test_delete_content_by_admin(client, comment_id) -> None:
    response = client.request(
        "DELETE",
        FORUM,
        params={"action": "delete-content"},
        json={"type": "comment", "id": comment_id, "authorUid": "admin"},
    )
    assert response.json() == {"success": True}


def test_delete_missing_comment(client) -> None:
    response = client.request(
        "DELETE",
        FORUM,
        params={"action": "comments"},
        json={"id": 55, "authorUid": "u/helper"},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
