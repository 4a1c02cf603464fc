import pytest
from fastapi.testclient import TestClient

from planner.api.api_run import app
from planner.api.dependencies import get_remote_store, get_session
from planner.infra.Local_Cache import LocalCache
from planner.infra.Sync_Coordinator import SyncCoordinator
from planner.logic.session import PlannerSession

DAY = "2025-01-06"


@pytest.fixture
def planner_session(tmp_path):
    return PlannerSession(SyncCoordinator(LocalCache(tmp_path / "cache.json")))


@pytest.fixture
def client(planner_session):
    app.dependency_overrides[get_session] = lambda: planner_session
    app.dependency_overrides[get_remote_store] = lambda: None
    # context manager keeps one event loop alive so debounce timers can fire
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_get_empty_plan(client):
    resp = client.get(f"/api/plan/{DAY}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["date"] == DAY
    assert data["mode"] == "local"
    plan = data["plan"]
    assert len(plan["topThree"]) == 3
    assert len(plan["schedule"]) == 18
    assert plan["water"] == 0
    assert plan["todos"] == [] and plan["habits"] == []


def test_invalid_date_is_rejected(client):
    assert client.get("/api/plan/2025-02-30").status_code == 400
    assert client.get("/api/plan/tomorrow").status_code == 400


def test_todo_lifecycle(client, planner_session):
    first = client.post(f"/api/plan/{DAY}/todos", json={"text": "  Buy milk "})
    assert first.status_code == 201
    assert first.json()["text"] == "Buy milk"
    second = client.post(f"/api/plan/{DAY}/todos", json={"text": "Call mom"}).json()

    resp = client.patch(f"/api/plan/{DAY}/todos/{second['id']}", json={"done": True})
    assert resp.json()["done"] is True

    resp = client.post(f"/api/plan/{DAY}/todos/reorder", json={"from_index": 1, "to_index": 0})
    assert [t["text"] for t in resp.json()["todos"]] == ["Call mom", "Buy milk"]
    assert [t["order"] for t in resp.json()["todos"]] == [0, 1]

    resp = client.delete(f"/api/plan/{DAY}/todos/{second['id']}")
    assert resp.json()["deleted"] == second["id"]
    assert [t["order"] for t in resp.json()["todos"]] == [0]

    assert client.post("/api/plan/flush").json() == {"flushed": {DAY: "local_only"}}
    record = planner_session.coordinator.cache.read("planner", DAY)
    assert [t["text"] for t in record["todos"]] == ["Buy milk"]


def test_todo_errors(client):
    assert client.post(f"/api/plan/{DAY}/todos", json={"text": "   "}).status_code == 422
    assert client.patch(f"/api/plan/{DAY}/todos/missing", json={"done": True}).status_code == 404
    resp = client.post(f"/api/plan/{DAY}/todos/reorder", json={"from_index": 0, "to_index": 3})
    assert resp.status_code == 400


def test_trackers(client):
    assert client.put(f"/api/plan/{DAY}/top-three/0", json={"text": "Launch"}).json()["text"] == "Launch"
    assert client.put(f"/api/plan/{DAY}/top-three/5", json={"text": "x"}).status_code == 400
    assert client.put(f"/api/plan/{DAY}/schedule/09:00", json={"text": "Standup"}).json()["schedule"]["09:00"] == "Standup"
    assert client.put(f"/api/plan/{DAY}/schedule/04:00", json={"text": "x"}).status_code == 400
    assert client.put(f"/api/plan/{DAY}/notes", json={"text": "Remember"}).json() == {"notes": "Remember"}
    assert client.put(f"/api/plan/{DAY}/meals/dinner", json={"text": "Soup"}).json()["meals"]["dinner"] == "Soup"
    assert client.post(f"/api/plan/{DAY}/water/4").json() == {"water": 5}
    assert client.post(f"/api/plan/{DAY}/water/4").json() == {"water": 4}
    assert client.put(f"/api/plan/{DAY}/water", json={"count": 9}).status_code == 422
    assert client.put(f"/api/plan/{DAY}/water", json={"count": 2}).json() == {"water": 2}

    summary = client.get(f"/api/plan/{DAY}/summary").json()["summary"]
    assert summary["water"]["label"] == "2/8"
    assert summary["scheduled_hours"] == 1


def test_edits_survive_navigation(client, planner_session):
    client.put(f"/api/plan/{DAY}/notes", json={"text": "monday notes"})
    other = client.get("/api/plan/2025-01-07").json()
    assert other["plan"]["notes"] == ""
    assert planner_session.coordinator.cache.read("planner", DAY)["notes"] == "monday notes"
    assert client.get(f"/api/plan/{DAY}").json()["plan"]["notes"] == "monday notes"


def test_clear_plan(client, planner_session):
    client.post(f"/api/plan/{DAY}/todos", json={"text": "temp"})
    client.put(f"/api/plan/{DAY}/water", json={"count": 6})
    resp = client.post(f"/api/plan/{DAY}/clear")
    assert resp.json()["plan"]["todos"] == []
    assert resp.json()["plan"]["water"] == 0
    assert planner_session.coordinator.cache.read("planner", DAY)["todos"] == []


def test_habits_flow(client):
    resp = client.post(f"/api/plan/{DAY}/habits", json={"title": "  Read  ", "days": [1, 3]})
    assert resp.status_code == 201
    habit = resp.json()
    assert habit["title"] == "Read"
    assert habit["days"] == [1, 3]
    client.post(f"/api/plan/{DAY}/habits", json={"title": "Weekend hike", "days": [0, 6]})

    today = client.get(f"/api/plan/{DAY}/habits/today").json()
    assert [h["title"] for h in today["habits"]] == ["Read"]
    assert today["habits"][0]["status"] is None
    assert today["total"] == 2

    marked = client.post(f"/api/plan/{DAY}/habits/{habit['id']}/yes").json()
    assert marked == {"id": habit["id"], "status": "completed", "completed": 1}
    marked = client.post(f"/api/plan/{DAY}/habits/{habit['id']}/skip").json()
    assert marked["status"] == "skipped"
    assert marked["completed"] == 0


def test_habit_validation(client):
    resp = client.post(f"/api/plan/{DAY}/habits", json={"title": "   "})
    assert resp.status_code == 422
    assert "Please enter a habit title" in resp.text
    assert client.post(f"/api/plan/{DAY}/habits", json={"title": "x", "days": [7]}).status_code == 422
    assert client.post(f"/api/plan/{DAY}/habits/missing/yes").status_code == 404
    assert client.get(f"/api/plan/{DAY}").json()["plan"]["habits"] == []


def test_session_sign_in_and_out(client, planner_session, remote_store):
    client.put(f"/api/plan/{DAY}/notes", json={"text": "offline work"})
    app.dependency_overrides[get_remote_store] = lambda: remote_store

    resp = client.post("/api/session", json={"uid": "user-9", "email": "u9@example.com"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["mode"] == "remote"
    assert data["user"]["uid"] == "user-9"
    assert data["sync"]["failed"] == 0
    assert data["sync"]["pushed"] == 2
    assert any(path.endswith(f"/planner/{DAY}") for path in remote_store.docs)

    assert client.get("/api/session").json()["mode"] == "remote"
    resp = client.delete("/api/session")
    assert resp.json()["mode"] == "local"
    assert resp.json()["user"] is None
    assert remote_store.closed


def test_sync_events_feed(client):
    cursor = client.get("/api/sync/events").json()["next_cursor"]
    client.put(f"/api/plan/{DAY}/notes", json={"text": "x"})
    client.post("/api/plan/flush")
    events = client.get("/api/sync/events", params={"since": cursor}).json()["events"]
    saved = [e for e in events if e["type"] == "plan.saved"]
    assert saved and saved[-1]["date"] == DAY
    assert saved[-1]["result"] == "local_only"


def test_shutdown_flushes_pending_edits(planner_session):
    app.dependency_overrides[get_session] = lambda: planner_session
    try:
        with TestClient(app) as client:
            client.put(f"/api/plan/{DAY}/notes", json={"text": "written just before exit"})
        record = planner_session.coordinator.cache.read("planner", DAY)
        assert record["notes"] == "written just before exit"
    finally:
        app.dependency_overrides.clear()
