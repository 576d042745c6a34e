"""
Tests for the onboarding API endpoints.
"""

from unittest.mock import patch

from cohort_engine.api.onboarding.question_bank import (
    COMBINED_BANK,
    ENRICHMENT_BANK,
    GEOGRAPHY_BANK,
)
from cohort_engine.models import GenerationalResponse


def test_complete_first_answer(client, db_session):
    response = client.post(
        "/api/onboarding/follow-up",
        json={"responses": {"q1": "I was born in 1985 in Columbus"}, "session_id": "s-1"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["needs_follow_up"] is False
    assert data["proceed_with_unknown"] is False
    assert data["required_info"] == []
    assert data["question"] == ENRICHMENT_BANK[0]
    assert data["state"]["phase"] == "enrichment"
    assert data["cohort"]["generation"] == "Millennial"
    assert data["cohort"]["confidence"] >= 0.8
    assert data["analysis"]["signals"]["locations"] == ["Columbus"]

    rows = db_session.query(GenerationalResponse).all()
    assert len(rows) == 1
    assert rows[0].session_id == "s-1"
    assert rows[0].slot_id == "q1"
    assert rows[0].source == "user_input"
    assert rows[0].parsed_data["birth_year"] == 1985
    assert rows[0].confidence_score == 1.0


def test_follow_up_round_trip(client, db_session):
    first = client.post(
        "/api/onboarding/follow-up",
        json={"responses": {"q1": "things were different in the 90s"}, "session_id": "s-2"},
    ).json()

    assert first["needs_follow_up"] is True
    assert first["required_info"] == ["geography"]
    assert first["question"] == GEOGRAPHY_BANK[0]
    assert first["cohort"] is None
    assert first["state"]["history"] == [GEOGRAPHY_BANK[0]]

    second = client.post(
        "/api/onboarding/follow-up",
        json={
            "responses": {
                "q1": "things were different in the 90s",
                "follow_up_1": "I grew up in Lisbon",
            },
            "state": first["state"],
            "answered_slot": "follow_up_1",
            "session_id": "s-2",
        },
    ).json()

    assert second["needs_follow_up"] is False
    assert second["state"]["attempt_number"] == 1
    assert second["state"]["phase"] == "enrichment"
    assert second["cohort"]["generation"] == "Millennial"
    assert second["cohort"]["region"] == "Lisbon"

    rows = db_session.query(GenerationalResponse).order_by(GenerationalResponse.id).all()
    assert [(row.slot_id, row.source) for row in rows] == [
        ("q1", "user_input"),
        ("follow_up_1", "follow_up"),
    ]


def test_budget_exhausted_proceeds_with_unknown(client):
    state = {
        "attempt_number": 4,
        "phase": "required_info",
        "history": COMBINED_BANK,
    }

    response = client.post(
        "/api/onboarding/follow-up",
        json={"responses": {"q1": "I would rather not say"}, "state": state},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["proceed_with_unknown"] is True
    assert data["question"] is None
    assert data["required_info"] == ["birth_timeframe", "geography"]
    assert data["cohort"]["generation"] == "Unknown"
    assert data["cohort"]["confidence"] <= 0.2


def test_missing_responses_is_bad_request(client):
    assert client.post("/api/onboarding/follow-up", json={}).status_code == 400
    assert (
        client.post("/api/onboarding/follow-up", json={"responses": "text"}).status_code
        == 400
    )
    response = client.post("/api/onboarding/follow-up", json={"responses": {"q1": 5}})
    assert response.status_code == 400
    assert "detail" in response.json()


def test_store_failure_does_not_fail_request(client):
    with patch(
        "cohort_engine.api.onboarding.router.ResponseRepository.save_all",
        side_effect=RuntimeError("database is locked"),
    ):
        response = client.post(
            "/api/onboarding/follow-up",
            json={"responses": {"q1": "I was born in 1985 in Columbus"}},
        )

    assert response.status_code == 200
    assert response.json()["cohort"]["generation"] == "Millennial"


def test_classify_endpoint(client):
    response = client.post(
        "/api/onboarding/classify", json={"birth_year": 1985, "region": "Columbus"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["generation"] == "Millennial"
    assert data["confidence"] >= 0.8
    assert data["selected"] is False


def test_generation_override(client):
    response = client.post(
        "/api/onboarding/generation",
        json={"generation": "Zillennials", "birth_year": 1996, "region": "Perth"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["generation"] == "Millennial"
    assert data["micro_generation"] == "Zillennials"
    assert data["confidence"] == 1.0
    assert data["selected"] is True


def test_generation_override_rejects_unknown_label(client):
    response = client.post("/api/onboarding/generation", json={"generation": "Boomers"})

    assert response.status_code == 400
    assert "Baby Boomer" in response.json()["detail"]["valid_generations"]


def test_parse_endpoint(client):
    response = client.post(
        "/api/onboarding/parse", json={"text": "Raised in Cork in the late 70s"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["signals"]["birth_decade"] == 1970
    assert data["signals"]["decade_qualifier"] == "late"
    assert data["known_facts"]["locations"] == ["Cork"]


def test_health(client):
    response = client.get("/api/onboarding/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["llm_enabled"] is False
