from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from volunteer_tracker import server
from volunteer_tracker.errors import QueryError
from volunteer_tracker.repository import InMemoryAttendanceRepository

client = TestClient(server.app)


class BrokenRepository(InMemoryAttendanceRepository):
    def list_game_dates(self):
        raise QueryError("list_game_dates", "timeout")


@pytest.fixture
def wired(monkeypatch, repository):
    monkeypatch.setattr(server, "repository", repository)
    return repository


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_missing_data_source_is_a_server_error(monkeypatch):
    monkeypatch.setattr(server, "repository", None)

    response = client.get("/overview")

    assert response.status_code == 500
    assert "VOLUNTEER_TRACKER_DATABASE_URL" in response.json()["detail"]


def test_today_shows_fallback_schedule(wired):
    response = client.get("/today", params={"day": "2024-03-10"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["gameDate"]["id"] == "d2"
    assert data["isFallback"] is True
    assert list(data["byDepartment"]) == ["caster", "n/a", "media"]
    assert data["byDepartment"]["media"][0]["status"] == "present"
    assert data["stats"] == {"total": 3, "present": 1, "scheduled": 3, "departments": 3, "attendanceRate": 33}


def test_today_search_filters_names_but_not_stats(wired):
    data = client.get("/today", params={"day": "2024-03-15", "search": "JOANN"}).json()["data"]

    assert data["isFallback"] is False
    assert list(data["byDepartment"]) == ["media"]
    assert data["stats"]["total"] == 3


def test_today_without_schedule(monkeypatch):
    monkeypatch.setattr(server, "repository", InMemoryAttendanceRepository())

    data = client.get("/today", params={"day": "2024-03-10"}).json()["data"]

    assert data["gameDate"] is None
    assert data["byDepartment"] == {}
    assert data["stats"]["total"] == 0


def test_overview_filters(wired):
    response = client.get("/overview", params={"search": "ann"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [volunteer["id"] for volunteer in data["volunteers"]] == ["v1", "v2"]
    assert list(data["byDepartment"]) == ["caster", "media"]
    assert data["departments"] == ["caster", "media", "n/a"]
    assert [game_date["id"] for game_date in data["gameDates"]] == ["d1", "d2", "d3"]

    anna = data["volunteers"][0]
    assert anna["statuses"] == {"d1": "present", "d2": "scheduled", "d3": None}
    assert anna["statusSummary"] == {
        "scheduled": 1,
        "present": 1,
        "absent": 0,
        "total": 2,
        "attendanceRate": 50.0,
    }


def test_overview_department_and_inactive_toggle(wired):
    data = client.get("/overview", params={"department": "media", "show_inactive": "true"}).json()["data"]

    assert [volunteer["id"] for volunteer in data["volunteers"]] == ["v2", "v5"]
    assert data["filters"] == {"search": "", "department": "media", "showInactive": True}


def test_overview_rejects_unknown_department(wired):
    response = client.get("/overview", params={"department": "catering"})
    assert response.status_code == 422


def test_query_failure_is_reported_as_unavailable(monkeypatch):
    monkeypatch.setattr(server, "repository", BrokenRepository())

    response = client.get("/overview")

    assert response.status_code == 503
    assert response.json()["detail"] == "Attendance data could not be loaded."


def test_volunteer_detail(wired):
    data = client.get("/volunteers/v2").json()["data"]

    assert data["fullName"] == "Joann Lee"
    assert [(row["date"]["id"], row["status"]) for row in data["history"]] == [
        ("d1", "absent"),
        ("d2", "present"),
        ("d3", None),
    ]
    assert client.get("/volunteers/nope").status_code == 404
