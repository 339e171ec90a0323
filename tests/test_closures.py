"""Tests for closure plans."""
from datetime import date, timedelta

import pytest
from werkzeug.security import generate_password_hash

from app.kitchenops import create_app
from app.kitchenops.db import session_scope
from app.kitchenops.models import Base, User
from app.kitchenops.modules.closures.models import ClosurePlan
from app.kitchenops.modules.closures.service import cleanup_ended_closures


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        s.add(User(username="manager", pin_hash=generate_password_hash("1234"), is_admin=False, is_active=True))
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def _auth(client):
    r = client.post("/api/auth/login", json={"username": "manager", "pin": "1234"})
    return {"Authorization": f"Bearer {r.json['token']}"}


def test_end_date_for_days_and_weeks():
    three_days = ClosurePlan(date=date(2026, 12, 24), reason="Holiday", duration_value=3, duration_unit="days")
    assert three_days.end_date == date(2026, 12, 26)
    assert three_days.covers(date(2026, 12, 26))
    assert not three_days.covers(date(2026, 12, 27))

    two_weeks = ClosurePlan(date=date(2026, 7, 6), reason="Remodel", duration_value=2, duration_unit="weeks")
    assert two_weeks.end_date == date(2026, 7, 19)
    assert two_weeks.expires_at.date() == date(2026, 7, 20)

    one_day = ClosurePlan(date=date(2026, 11, 26), reason="Thanksgiving", duration_value=1, duration_unit="days")
    assert one_day.end_date == one_day.date


def test_create_list_delete(client):
    h = _auth(client)
    later = (date.today() + timedelta(days=30)).isoformat()
    sooner = (date.today() + timedelta(days=3)).isoformat()

    r = client.post(
        "/api/closure/plan",
        json={"date": later, "reason": "Remodel", "duration": {"value": 1, "unit": "weeks"}},
        headers=h,
    )
    assert r.status_code == 201
    assert r.json["plan"]["duration"] == {"value": 1, "unit": "weeks"}

    r = client.post(
        "/api/closure/plan",
        json={"date": sooner, "reason": "Holiday", "duration": {"value": 1, "unit": "days"}},
        headers=h,
    )
    plan_id = r.json["plan"]["id"]

    r = client.get("/api/closure/plans", headers=h)
    assert [p["reason"] for p in r.json] == ["Holiday", "Remodel"]

    assert client.delete(f"/api/closure/plan/{plan_id}", headers=h).status_code == 200
    assert client.delete(f"/api/closure/plan/{plan_id}", headers=h).status_code == 404


def test_active_filter_hides_ended_plans(client):
    h = _auth(client)
    past = (date.today() - timedelta(days=10)).isoformat()
    client.post(
        "/api/closure/plan",
        json={"date": past, "reason": "Past", "duration": {"value": 2, "unit": "days"}},
        headers=h,
    )
    client.post(
        "/api/closure/plan",
        json={"date": date.today().isoformat(), "reason": "Today", "duration": {"value": 1, "unit": "days"}},
        headers=h,
    )
    assert len(client.get("/api/closure/plans", headers=h).json) == 2
    assert [p["reason"] for p in client.get("/api/closure/plans?active=1", headers=h).json] == ["Today"]


def test_validation(client):
    h = _auth(client)
    r = client.post(
        "/api/closure/plan",
        json={"date": "2026-12-24", "reason": "", "duration": {"value": 0, "unit": "months"}},
        headers=h,
    )
    assert r.status_code == 400
    assert len(r.json["errors"]) == 3


def test_cleanup_removes_ended_plans(app):
    today = date(2026, 10, 19)
    with session_scope(app) as s:
        s.add_all(
            [
                ClosurePlan(date=date(2026, 10, 1), reason="Ended", duration_value=1, duration_unit="weeks"),
                ClosurePlan(date=date(2026, 10, 13), reason="Ends today", duration_value=1, duration_unit="weeks"),
            ]
        )
    with session_scope(app) as s:
        assert cleanup_ended_closures(s, today) == 1
    with session_scope(app) as s:
        assert [p.reason for p in s.query(ClosurePlan).all()] == ["Ends today"]


def test_malformed_bodies(client):
    h = _auth(client)
    r = client.post("/api/closure/plan", json=[], headers=h)
    assert r.status_code == 400

    r = client.post(
        "/api/closure/plan",
        json={"date": "2026-12-24", "reason": 7, "duration": {"value": 1, "unit": "days"}},
        headers=h,
    )
    assert r.status_code == 201
    assert r.json["plan"]["reason"] == "7"

    r = client.post(
        "/api/closure/plan",
        json={"date": "2026-12-24", "reason": "Forever", "duration": {"value": 1e20, "unit": "weeks"}},
        headers=h,
    )
    assert r.status_code == 400
    assert r.json["errors"] == ["A closure can last at most 366 days."]
