"""
End-to-end (no DB) – drive the onboarding flow through the HTTP surface.
"""
import time

import pytest
from fastapi.testclient import TestClient

from core.persistence import CURRENT_VIEW_KEY, MemoryKeyValueStore
from main import create_app

BASE = "/api/v1/onboarding"
ANSWERS = ["⚖️ Lose Weight", "1-2 times a week", "No", "No", "🥕 Vegetarian", "Female"]


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def client(store):
    with TestClient(create_app(store, loading_interval=0)) as c:
        yield c


def _wait_for_view(client, view, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        state = client.get(f"{BASE}/state").json()
        if state["currentView"] == view:
            return state
        time.sleep(0.01)
    raise AssertionError(f"never reached {view}")


def _finish_questionnaire(client):
    client.post(f"{BASE}/sign-in", json={"method": "google"})
    for value in ANSWERS:
        r = client.post(f"{BASE}/answer", json={"value": value})
        assert r.status_code == 200
    r = client.post(f"{BASE}/measurements", json={"unitSystem": "Metric", "heightCm": 165, "weight": 60})
    assert r.status_code == 200
    return r.json()


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_initial_state(client):
    state = client.get(f"{BASE}/state").json()
    assert state["currentView"] == "accountCreation"
    assert state["userProgress"] == "notStarted"
    assert state["questionIndex"] == 0
    assert state["progressFraction"] == 0.0
    assert state["question"] is None
    assert state["userProfile"]["unitSystem"] == "Metric"


def test_sign_in_without_body(client):
    state = client.post(f"{BASE}/sign-in").json()
    assert state["currentView"] == "questionnaire"
    assert state["userProgress"] == "inQuestionnaire"
    assert state["progressFraction"] == pytest.approx(0.2)
    assert state["question"]["title"] == "What's your main fitness goal?"
    assert len(state["question"]["options"]) == 6


def test_back_from_first_question(client):
    client.post(f"{BASE}/sign-in")
    state = client.post(f"{BASE}/back").json()
    assert state["currentView"] == "accountCreation"
    assert state["questionIndex"] == 0


def test_full_flow(client, store):
    state = _finish_questionnaire(client)
    assert state["questionIndex"] == state["totalQuestions"]
    assert state["progressFraction"] == 1.0
    assert state["userProfile"]["height"] == "165"

    state = client.post(f"{BASE}/confirm-plan").json()
    assert state["currentView"] in ("loading", "summary")
    assert state["userProgress"] == "completed"

    _wait_for_view(client, "summary")
    assert store.data[CURRENT_VIEW_KEY] == b"summary"

    recs = client.get("/api/v1/recommendations").json()
    assert "Vitamin B12" in recs["recommendations"][3]
    assert recs["items"][3]["icon"] == "💊"

    state = client.post(f"{BASE}/dashboard").json()
    assert state["currentView"] == "dashboard"
    assert state["selectedTab"] == "home"

    state = client.post(f"{BASE}/tab", json={"tab": "profile"}).json()
    assert state["selectedTab"] == "profile"

    view = client.get(f"{BASE}/profile").json()
    assert {"title": "Diet", "value": "🥕 Vegetarian"} in view["rows"]


def test_invalid_transition_is_409(client):
    r = client.post(f"{BASE}/confirm-plan")
    assert r.status_code == 409
    r = client.post(f"{BASE}/answer", json={"value": "x"})
    assert r.status_code == 409


def test_profile_edit(client):
    state = client.patch(f"{BASE}/profile", json={"field": "age", "value": "29"}).json()
    assert state["userProfile"]["age"] == "29"
    r = client.patch(f"{BASE}/profile", json={"field": "shoeSize", "value": "44"})
    assert r.status_code == 422


def test_measurements_out_of_range(client):
    client.post(f"{BASE}/sign-in")
    r = client.post(f"{BASE}/measurements", json={"unitSystem": "Metric", "heightCm": 300})
    assert r.status_code == 422


def test_state_survives_restart(store):
    with TestClient(create_app(store, loading_interval=0)) as c:
        c.post(f"{BASE}/sign-in")
        c.post(f"{BASE}/skip")
        c.post(f"{BASE}/skip")
    with TestClient(create_app(store, loading_interval=0)) as c:
        state = c.get(f"{BASE}/state").json()
    assert state["currentView"] == "questionnaire"
    assert state["questionIndex"] == 2


def test_reset(client):
    _finish_questionnaire(client)
    state = client.post(f"{BASE}/reset").json()
    assert state["currentView"] == "accountCreation"
    assert state["userProfile"]["mainGoal"] == ""
