from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from chronoglass.main import app, get_store
from chronoglass.store import SessionStore

# 2024-12-31T12:00:00Z, ISO week 1 of 2025
NEW_YEARS_EVE_MS = 1735646400000
# 2024-06-01T10:00:00Z
JUNE_FIRST_MS = 1717236000000


def _session(session_id: str, date: str, end_time=JUNE_FIRST_MS + 60_000) -> dict:
    return {
        "id": session_id,
        "startTime": JUNE_FIRST_MS,
        "endTime": end_time,
        "date": date,
        "subActivities": [
            {"id": f"{session_id}-1", "title": "Work", "startTime": JUNE_FIRST_MS, "endTime": end_time}
        ],
    }


def test_healthz(client: TestClient) -> None:
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_get_data_returns_default_document(client: TestClient) -> None:
    resp = client.get("/data")
    assert resp.status_code == 200
    assert resp.json() == {"sessions": [], "settings": {"weeklyHoursTarget": 40, "userName": "User"}}


def test_start_then_query_by_day_and_week(client: TestClient, store: SessionStore) -> None:
    start_resp = client.post("/data/start", json={"title": "Planning", "startTime": NEW_YEARS_EVE_MS})
    assert start_resp.status_code == 201
    session_id = start_resp.json()["id"]

    day_resp = client.get("/data/day/2024-12-31")
    assert day_resp.status_code == 200
    sessions = day_resp.json()
    assert [s["id"] for s in sessions] == [session_id]
    assert sessions[0]["endTime"] is None
    assert sessions[0]["subActivities"][0]["title"] == "Planning"
    assert sessions[0]["subActivities"][0]["endTime"] is None

    assert [s["id"] for s in client.get("/data/week/2025/1").json()] == [session_id]
    assert client.get("/data/week/2024/53").json() == []
    assert store.notifier.revision == 1


def test_start_replaces_running_session(client: TestClient) -> None:
    first = client.post("/data/start", json={"title": "A", "startTime": JUNE_FIRST_MS}).json()["id"]
    second = client.post("/data/start", json={"title": "B", "startTime": JUNE_FIRST_MS + 1000}).json()["id"]

    sessions = {s["id"]: s for s in client.get("/data").json()["sessions"]}
    assert sessions[first]["endTime"] is not None
    assert sessions[first]["subActivities"][0]["endTime"] == sessions[first]["endTime"]
    assert sessions[second]["endTime"] is None


def test_start_with_bad_timestamp_is_client_error(client: TestClient, store: SessionStore) -> None:
    resp = client.post("/data/start", json={"title": "x", "startTime": 9_000_000_000_000_000})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Invalid startTime"}
    assert not store.path.exists()


def test_start_requires_title_and_start_time(client: TestClient) -> None:
    assert client.post("/data/start", json={"title": "x"}).status_code == 422
    assert client.post("/data/start", json={"startTime": JUNE_FIRST_MS}).status_code == 422


def test_append_upserts_by_id(client: TestClient) -> None:
    assert client.post("/data/append", json=_session("a", "2024-06-01")).status_code == 201
    assert client.post("/data/append", json=_session("b", "2024-06-02")).status_code == 201

    edited = _session("a", "2024-06-03", end_time=None)
    edited["note"] = "moved"
    edited["subActivities"] = []
    resp = client.post("/data/append", json=edited)
    assert resp.status_code == 201

    sessions = client.get("/data").json()["sessions"]
    assert [s["id"] for s in sessions] == ["b", "a"]
    assert sessions[1] == edited


def test_overwrite_round_trip(client: TestClient) -> None:
    document = {
        "sessions": [_session("a", "2024-06-01"), _session("b", "2024-06-02", end_time=None)],
        "settings": {"weeklyHoursTarget": 35, "userName": "Lin"},
    }
    resp = client.post("/data/overwrite", json=document)
    assert resp.status_code == 200
    assert client.get("/data").json() == document


def test_overwrite_rejects_structurally_invalid_body(client: TestClient, store: SessionStore) -> None:
    resp = client.post("/data/overwrite", json={"sessions": "all of them"})
    assert resp.status_code == 422
    assert store.notifier.revision == 0


def test_delete_routes(client: TestClient) -> None:
    document = {
        "sessions": [
            _session("dec", "2023-12-31"),
            _session("jan-1", "2024-01-01"),
            _session("jan-31", "2024-01-31"),
            _session("feb-1", "2024-02-01"),
            _session("jun-1", "2024-06-01"),
        ],
        "settings": {"weeklyHoursTarget": 38, "userName": "Kim"},
    }
    client.post("/data/overwrite", json=document)

    resp = client.delete("/data/range", params={"start": "2024-01-01", "end": "2024-01-31"})
    assert resp.status_code == 200
    assert [s["id"] for s in client.get("/data").json()["sessions"]] == ["dec", "feb-1", "jun-1"]

    resp = client.delete("/data/day/2024-06-01")
    assert resp.status_code == 200
    assert client.delete("/data/day/2024-06-01").status_code == 200
    assert [s["id"] for s in client.get("/data").json()["sessions"]] == ["dec", "feb-1"]

    resp = client.delete("/data/all")
    assert resp.status_code == 200
    assert client.get("/data").json() == {"sessions": [], "settings": {"weeklyHoursTarget": 38, "userName": "Kim"}}


def test_range_requires_both_bounds(client: TestClient) -> None:
    assert client.delete("/data/range", params={"start": "2024-01-01"}).status_code == 422


def test_write_failure_returns_server_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    broken = SessionStore(blocker / "data.json")
    app.dependency_overrides[get_store] = lambda: broken
    try:
        with TestClient(app) as client:
            resp = client.post("/data/start", json={"title": "x", "startTime": JUNE_FIRST_MS})
            assert resp.status_code == 500
            assert resp.json() == {"detail": "Failed to write data"}
            assert client.post("/data/append", json=_session("a", "2024-06-01")).status_code == 500
            assert client.delete("/data/all").status_code == 500
            assert client.get("/data").status_code == 200
    finally:
        app.dependency_overrides.clear()


def test_start_with_lone_surrogate_title_round_trips(client: TestClient, store: SessionStore) -> None:
    body = '{"title": "\\ud800 notes", "startTime": %d}' % JUNE_FIRST_MS
    resp = client.post("/data/start", content=body, headers={"Content-Type": "application/json"})
    assert resp.status_code == 201

    sessions = client.get("/data/day/2024-06-01").json()
    assert sessions[0]["subActivities"][0]["title"] == "\ud800 notes"
    assert [p.name for p in store.path.parent.iterdir()] == ["data.json"]
