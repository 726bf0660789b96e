# tests/v1/test_store_errors.py
"""Store failures surface as a generic 500 envelope."""

import logging

from fastapi import status
from sqlalchemy.exc import OperationalError

from chetana.services import ledger

FORUM = "/api/v1/forum"


def _refuse(*args, **kwargs):
    raise OperationalError("UPDATE forum_posts", {}, Exception("connection refused"))


def test_store_error_becomes_500(client, monkeypatch, caplog) -> None:
    monkeypatch.setattr(ledger, "apply_vote", _refuse)

    with caplog.at_level(logging.ERROR, logger="chetana.main"):
        response = client.post(
            FORUM,
            params={"action": "vote"},
            json={"postId": 5, "voteType": "upvote", "voterUid": "u/abc"},
        )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "error": "Database connection failed"}
    assert "connection refused" not in response.text
    assert any(record.exc_info for record in caplog.records)


def test_service_keeps_running_after_store_error(client, monkeypatch) -> None:
    monkeypatch.setattr(ledger, "apply_vote", _refuse)
    client.post(
        FORUM,
        params={"action": "vote"},
        json={"postId": 5, "voteType": "upvote", "voterUid": "u/abc"},
    )

    assert client.get("/health").status_code == status.HTTP_200_OK
