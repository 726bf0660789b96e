# tests/v1/test_data_api.py
"""Assessment, mood and location endpoints."""

from fastapi import status

DATA = "/api/v1/data"


def test_assessments_roundtrip(client, test_user) -> None:
    for day, phq9 in (("2025-03-01", 12), ("2025-03-05", 8)):
        response = client.post(
            f"{DATA}/assessments",
            json={
                "userId": test_user.id,
                "phq9": phq9,
                "gad7": 6,
                "pss": 18,
                "responses": {"phq9_q1": 2},
                "assessmentDate": day,
            },
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] > 0

    listed = client.get(f"{DATA}/assessments", params={"userId": test_user.id}).json()

    assert [a["phq9_score"] for a in listed["assessments"]] == [8, 12]
    assert listed["assessments"][0]["responses"] == {"phq9_q1": 2}


def test_assessment_score_bounds(client, test_user) -> None:
    response = client.post(
        f"{DATA}/assessments",
        json={"userId": test_user.id, "phq9": 28, "assessmentDate": "2025-03-01"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_assessment_for_unknown_user(client) -> None:
    response = client.post(
        f"{DATA}/assessments",
        json={"userId": 999, "phq9": 3, "assessmentDate": "2025-03-01"},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_mood_is_upserted_per_day(client, test_user) -> None:
    for rating in (4, 7):
        client.post(
            f"{DATA}/moods",
            json={"userId": test_user.id, "moodDate": "2025-03-10", "moodRating": rating},
        )
    client.post(
        f"{DATA}/moods",
        json={"userId": test_user.id, "moodDate": "2025-03-11", "moodRating": 6},
    )

    moods = client.get(f"{DATA}/moods", params={"userId": test_user.id}).json()["moods"]

    assert [(m["mood_date"], m["mood_rating"]) for m in moods] == [
        ("2025-03-11", 6),
        ("2025-03-10", 7),
    ]


def test_locations_visible_to_admin(client, test_user, admin_token) -> None:
    saved = client.post(
        f"{DATA}/locations",
        json={"userId": test_user.id, "latitude": 12.97, "longitude": 77.59, "accuracy": 15},
    )
    assert saved.json()["success"] is True

    invalid = client.post(
        f"{DATA}/locations",
        json={"userId": test_user.id, "latitude": 120, "longitude": 0},
    )
    assert invalid.status_code == status.HTTP_400_BAD_REQUEST

    listed = client.get("/api/v1/admin/locations", headers=admin_token).json()["locations"]
    assert len(listed) == 1
    assert listed[0]["name"] == "Test User"
    assert listed[0]["latitude"] == 12.97
