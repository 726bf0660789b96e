# tests/test_health.py
from fastapi import status


def test_root_responds(client) -> None:
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Chetana"


def test_health_reports_integrations(client) -> None:
    response = client.get("/health")

    body = response.json()
    assert response.status_code == status.HTTP_200_OK
    assert body["status"] == "ok"
    assert body["chat_history"]["circuit"] in {"closed", "half_open", "open"}


def test_unknown_route_uses_error_envelope(client) -> None:
    response = client.get("/api/v1/nope")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"success": False, "error": "Not Found"}
