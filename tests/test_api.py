from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from src.timeclock.timeclock.core.enums import Role
from src.timeclock.timeclock.main import create_app
from src.timeclock.timeclock.reports import controller as reports_controller
from src.timeclock.timeclock.users.model import User
from src.timeclock.timeclock.workday import controller as workday_controller


class _Clock:
    def __init__(self, value):
        self.value = value

    def __call__(self):
        return self.value


@pytest.fixture
def clock(monkeypatch):
    fake = _Clock(datetime(2024, 1, 15, 9, 0))
    monkeypatch.setattr(workday_controller, "now_local", fake)
    monkeypatch.setattr(reports_controller, "now_local", fake)
    return fake


@pytest.fixture
def client(monkeypatch, container, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def _login(client, username="ana", password="secret1"):
    return client.post("/api/login", json={"username": username, "password": password})


@pytest.fixture
def employee(client):
    resp = client.post("/api/register", json={"full_name": "Ana Souza", "username": "ana", "password": "secret1"})
    assert resp.status_code == 201
    assert _login(client).status_code == 200
    return resp.get_json()["user_id"]


def test_requires_login(client):
    assert client.get("/api/dashboard").status_code == 401
    assert client.post("/api/clock").status_code == 401


def test_bad_credentials(client):
    resp = _login(client, "ghost", "whatever")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_me_after_login(client, employee):
    user = client.get("/api/me").get_json()["user"]
    assert (user["id"], user["role"]) == (employee, "employee")


def test_clock_cycle_with_early_leave_confirmation(client, clock, employee):
    assert client.get("/api/dashboard").get_json()["dashboard"]["status"] == "NOT_STARTED"

    resp = client.post("/api/clock", json={})
    assert resp.status_code == 201
    assert resp.get_json()["action"] == "Clock in"

    clock.value = datetime(2024, 1, 15, 12, 0)
    assert client.post("/api/clock", json={}).status_code == 200

    clock.value = datetime(2024, 1, 15, 13, 0)
    assert client.post("/api/clock", json={}).status_code == 201

    clock.value = datetime(2024, 1, 15, 15, 30)
    early = client.post("/api/clock", json={})
    assert early.status_code == 409
    assert early.get_json()["deficit_ms"] == 150 * 60_000

    done = client.post("/api/clock", json={"confirm_early_leave": True})
    assert done.status_code == 200
    dashboard = done.get_json()["dashboard"]
    assert dashboard["status"] == "FINISHED"
    assert dashboard["daily_hours"] == "05h30m"
    assert dashboard["action_enabled"] is False

    assert client.post("/api/clock", json={}).status_code == 400


def test_store_outage_is_reported_as_unavailable(client, employee, entry_repo):
    entry_repo.fail = True
    resp = client.post("/api/clock", json={})
    assert resp.status_code == 503
    assert entry_repo.entries == {}


def test_time_bank_adjustment(client, employee):
    resp = client.post("/api/time-bank/adjust", json={"sign": "+", "value": "01:30"})
    assert resp.status_code == 200
    assert resp.get_json()["time_bank"]["balance"] == "+01h30m"

    assert client.post("/api/time-bank/adjust", json={"sign": "*", "value": "01:30"}).status_code == 400


def test_settings_round_trip(client, employee):
    resp = client.put("/api/settings", json={"weekly_hours": 30})
    assert resp.status_code == 200
    assert client.get("/api/settings").get_json()["settings"]["work_hours_per_day"] == 6


def test_absence_flow_and_permissions(client, employee, user_repo):
    bad = client.post(
        "/api/absences",
        json={"type": "vacation", "start_date": "2024-13-01", "end_date": "2024-02-07", "reason": "Trip"},
    )
    assert bad.status_code == 400

    created = client.post(
        "/api/absences",
        json={"type": "vacation", "start_date": "2024-02-05", "end_date": "2024-02-07", "reason": "Trip"},
    )
    assert created.status_code == 201
    request_id = created.get_json()["absence"]["id"]

    approve_url = f"/api/users/{employee}/absences/{request_id}/approve"
    assert client.post(approve_url, json={}).status_code == 403

    user_repo.add(User("m1", "Mia Lead", "mia", generate_password_hash("secret1"), role=Role.MANAGER))
    client.post("/api/logout")
    assert _login(client, "mia").status_code == 200

    assert len(client.get("/api/absences/pending").get_json()["absences"]) == 1
    assert client.post(approve_url, json={"comments": "Enjoy"}).status_code == 200
    assert client.post(approve_url, json={}).status_code == 400


def test_csv_export(client, clock, employee):
    client.post("/api/clock", json={})
    clock.value = datetime(2024, 1, 15, 12, 0)
    client.post("/api/clock", json={})

    resp = client.get("/api/reports/export.csv?start=2024-01-01&end=2024-01-31")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "time_entries_20240101_20240131.csv" in resp.headers["Content-Disposition"]
    assert resp.get_data(as_text=True).splitlines()[1] == "2024-01-15,09:00,12:00,03:00"
