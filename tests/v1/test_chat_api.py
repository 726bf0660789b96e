# tests/v1/test_chat_api.py
"""Chat assistant endpoints."""

import httpx
from fastapi import status

from chetana.api.v1.dependencies import get_gemini_client_dep, get_history_store_dep
from chetana.services.chat_history import ChatHistoryStore
from chetana.services.circuit_breaker import CircuitBreaker

CHAT = "/api/v1/chat"


def test_chat_reply_and_emotion(client) -> None:
    response = client.post(CHAT, json={"userMessage": "I can't sleep and feel empty"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"reply": "I'm here with you.", "emotion": "sadness"}


def test_chat_saves_history_for_signed_in_user(client) -> None:
    client.post(CHAT, json={"userMessage": "Rough day at work", "userId": 42})

    response = client.get(f"{CHAT}/history", params={"userId": "42"})

    history = response.json()["history"]
    assert [(m["role"], m["content"], m["emotion"]) for m in history] == [
        ("user", "Rough day at work", "sadness"),
        ("assistant", "I'm here with you.", None),
    ]


def test_anonymous_chat_is_not_saved(client) -> None:
    client.post(CHAT, json={"userMessage": "hello", "userId": "anonymous"})

    assert client.get(f"{CHAT}/history", params={"userId": "anonymous"}).json() == {"history": []}


def test_missing_message(client) -> None:
    response = client.post(CHAT, json={"userMessage": "   "})
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.post(CHAT, json={})
    assert response.json() == {"success": False, "error": "Missing required fields"}


def test_model_failure_is_500(app, client, make_gemini_client) -> None:
    failing = make_gemini_client(lambda request: httpx.Response(503, text="overloaded"))
    app.dependency_overrides[get_gemini_client_dep] = lambda: failing

    response = client.post(CHAT, json={"userMessage": "hi there"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "error": "Failed to generate response"}


def test_unconfigured_model_is_503(app, client, make_gemini_client) -> None:
    disabled = make_gemini_client(api_key=None)
    app.dependency_overrides[get_gemini_client_dep] = lambda: disabled

    response = client.post(CHAT, json={"userMessage": "hi there"})

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_history_unavailable_returns_empty_list(app, client, session_factory) -> None:
    breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=600)
    breaker.record_failure()
    store = ChatHistoryStore(session_factory, breaker=breaker, enabled=True)
    app.dependency_overrides[get_history_store_dep] = lambda: store

    chat = client.post(CHAT, json={"userMessage": "still works?", "userId": "42"})
    history = client.get(f"{CHAT}/history", params={"userId": "42"})

    assert chat.status_code == status.HTTP_200_OK
    assert history.json() == {"history": []}
