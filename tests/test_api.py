"""Tests for the HTTP API."""

from uuid import uuid4

from fastapi.testclient import TestClient

from keto_tracker.api.app import create_app
from keto_tracker.domain.metabolism import MacroTargets
from tests.conftest import FakeClock, InMemoryProfileRepository

PERSONAL_INFO = {
    "age": 30,
    "sex": "male",
    "height_cm": 180,
    "current_weight_kg": 80,
    "target_weight_kg": 72,
    "activity_level": "moderate",
}


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_stateless_metabolism(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/metabolism",
        json={
            "weight_kg": 80,
            "height_cm": 180,
            "age_years": 10,
            "sex": "male",
            "activity_level": "bogus",
            "goal": "muscleGain",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["result"]["bmr"] == 1880
    assert data["result"]["tdee"] == 2914
    assert data["result"]["macro_targets"]["calories"] == 3314
    assert [failure["field"] for failure in data["failures"]] == [
        "age",
        "target_weight",
    ]
    assert data["water_intake_liters"] == 2.8


def test_profile_flow_syncs_macro_targets(
    container, profile_repository: InMemoryProfileRepository
) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()

    created = client.put(
        f"/users/{user_id}/profile", json={"email": "keto@example.com"}
    )
    updated = client.patch(
        f"/users/{user_id}/profile", json={"personal_info": PERSONAL_INFO}
    )
    metabolism = client.get(f"/users/{user_id}/metabolism")

    assert created.status_code == 200
    assert created.json()["profile"]["goals"]["primary"] == "weightLoss"
    assert updated.status_code == 200
    assert updated.json()["macro_targets"] == {
        "calories": 2209,
        "carbs_grams": 28,
        "protein_grams": 138,
        "fat_grams": 172,
    }
    assert profile_repository.macro_targets[user_id] == MacroTargets(
        2209, 28, 138, 172
    )
    assert metabolism.json()["result"]["tdee"] == 2759
    assert metabolism.json()["failures"] == []


def test_profile_update_validates_ranges(container) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()
    client.put(f"/users/{user_id}/profile", json={"email": "keto@example.com"})

    response = client.patch(
        f"/users/{user_id}/profile", json={"personal_info": {"age": 9}}
    )

    assert response.status_code == 422


def test_missing_profile_returns_404(container) -> None:
    client = TestClient(create_app(container))

    response = client.get(f"/users/{uuid4()}/profile")

    assert response.status_code == 404


def test_food_log_endpoints(container) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()
    payload = {
        "name": "Avocado",
        "serving_size": 150,
        "serving_unit": "g",
        "macros": {"calories": 240, "carbs": 3, "protein": 3, "fat": 22},
        "meal_type": "breakfast",
    }

    created = client.post(f"/users/{user_id}/foods", json=payload)
    entry_id = created.json()["entry"]["id"]
    patched = client.patch(
        f"/users/{user_id}/foods/{entry_id}", json={"meal_type": "snack"}
    )
    today = client.get(f"/users/{user_id}/foods/today")
    deleted = client.delete(f"/users/{user_id}/foods/{entry_id}")
    missing = client.delete(f"/users/{user_id}/foods/{entry_id}")

    assert created.status_code == 201
    assert patched.json()["entry"]["meal_type"] == "snack"
    assert today.json()["totals"]["calories"] == 240
    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_fasting_endpoints(container, clock: FakeClock) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()

    started = client.post(
        f"/users/{user_id}/fasting/start",
        json={"protocol": "16:8", "duration_hours": 16},
    )
    conflict = client.post(
        f"/users/{user_id}/fasting/start",
        json={"protocol": "16:8", "duration_hours": 16},
    )
    clock.advance(hours=3)
    current = client.get(f"/users/{user_id}/fasting/current")
    clock.advance(hours=13)
    ended = client.post(f"/users/{user_id}/fasting/end")
    streak = client.get(f"/users/{user_id}/fasting/streak")

    assert started.status_code == 201
    assert started.json()["session"]["current_stage"] == "digestion"
    assert conflict.status_code == 409
    assert current.json()["elapsed_hours"] == 3
    assert ended.json()["session"]["actual_end_time"] is not None
    assert streak.json() == {"streak": 1}


def test_food_routes_reject_unknown_timezone(container) -> None:
    client = TestClient(create_app(container), raise_server_exceptions=False)
    user_id = uuid4()
    params = {"timezone": "Mars/Olympus"}

    today = client.get(f"/users/{user_id}/foods/today", params=params)
    history = client.get(
        f"/users/{user_id}/foods", params={**params, "day": "2026-03-01"}
    )
    cleared = client.delete(f"/users/{user_id}/foods/today", params=params)

    assert today.status_code == 422
    assert history.status_code == 422
    assert cleared.status_code == 422
    assert today.json()["detail"] == "Unknown timezone: Mars/Olympus"


def test_food_routes_accept_named_timezone(container) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        f"/users/{uuid4()}/foods/today", params={"timezone": "Europe/Berlin"}
    )

    assert response.status_code == 200
    assert response.json()["entries"] == []
