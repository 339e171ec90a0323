"""Tests for weekly sales, future projections and the projection config."""
import pytest
from werkzeug.security import generate_password_hash

from app.kitchenops import create_app
from app.kitchenops.constants import DEFAULT_PROJECTION_CONFIG
from app.kitchenops.db import session_scope
from app.kitchenops.models import Base, User


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        s.add(User(username="manager", pin_hash=generate_password_hash("1234"), is_admin=False, is_active=True))

    return app.test_client()


def _auth(client):
    r = client.post("/api/auth/login", json={"username": "manager", "pin": "1234"})
    return {"Authorization": f"Bearer {r.json['token']}"}


def test_sales_bulk_upsert_and_list(client):
    h = _auth(client)
    r = client.post("/api/sales/bulk", json={"Saturday": 20000, "monday": "15,000"}, headers=h)
    assert r.status_code == 200
    assert [row["day"] for row in r.json["sales"]] == ["Monday", "Saturday"]

    r = client.post("/api/sales/bulk", json={"Monday": 16000}, headers=h)
    assert r.status_code == 200

    r = client.get("/api/sales", headers=h)
    assert r.status_code == 200
    assert {row["day"]: row["sales"] for row in r.json} == {"Monday": 16000, "Saturday": 20000}


def test_sales_bulk_rejects_bad_days_and_amounts(client):
    h = _auth(client)
    r = client.post("/api/sales/bulk", json={"Sunday": 100, "Tuesday": -5, "Friday": "lots"}, headers=h)
    assert r.status_code == 400
    assert len(r.json["errors"]) == 3


def test_update_single_day(client):
    h = _auth(client)
    r = client.put("/api/sales/Tuesday", json={"sales": 9000}, headers=h)
    assert r.status_code == 404

    client.post("/api/sales/bulk", json={"Tuesday": 8000}, headers=h)
    r = client.put("/api/sales/tuesday", json={"sales": 9000}, headers=h)
    assert r.status_code == 200
    assert r.json["sales"] == 9000

    r = client.put("/api/sales/Tuesday", json={"sales": "x"}, headers=h)
    assert r.status_code == 400


def test_future_projection_upsert_list_delete(client):
    h = _auth(client)
    r = client.post("/api/projections/future", json={"date": "2026-12-24", "amount": 30000}, headers=h)
    assert r.status_code == 200
    r = client.post("/api/projections/future", json={"date": "2026-11-26", "amount": 0}, headers=h)
    assert r.status_code == 200
    # Same date replaces the amount
    r = client.post("/api/projections/future", json={"date": "2026-12-24", "amount": 32000}, headers=h)
    assert r.status_code == 200

    r = client.get("/api/projections/future", headers=h)
    assert [(p["date"], p["amount"]) for p in r.json] == [("2026-11-26", 0), ("2026-12-24", 32000)]

    r = client.get("/api/projections/future?start=2026-12-01", headers=h)
    assert [p["date"] for p in r.json] == ["2026-12-24"]

    r = client.delete("/api/projections/future/2026-12-24", headers=h)
    assert r.status_code == 200
    r = client.delete("/api/projections/future/2026-12-24", headers=h)
    assert r.status_code == 404


def test_future_projection_validation(client):
    h = _auth(client)
    r = client.post("/api/projections/future", json={"date": "24/12/2026", "amount": 1}, headers=h)
    assert r.status_code == 400
    r = client.post("/api/projections/future", json={"date": "2026-12-24"}, headers=h)
    assert r.status_code == 400
    assert "Amount is required." in r.json["errors"]
    r = client.post("/api/projections/future", json=[{"date": "2026-12-24", "amount": 1}], headers=h)
    assert r.status_code == 400
    assert r.json["message"] == "Request body must be a JSON object."


def test_projection_config_defaults_then_saves(client):
    h = _auth(client)
    r = client.get("/api/sales-projection-config", headers=h)
    assert r.status_code == 200
    assert r.json == {k: {s: float(p) for s, p in v.items()} for k, v in DEFAULT_PROJECTION_CONFIG.items()}

    config = {"Monday": {"Wednesday": 60, "Thursday": 40}, "Friday": {"Saturday": 100}}
    r = client.post("/api/sales-projection-config", json=config, headers=h)
    assert r.status_code == 200
    saved = r.json["config"]
    assert saved["Monday"] == {"Wednesday": 60, "Thursday": 40}
    assert saved["Friday"] == {"Saturday": 100}
    assert saved["Tuesday"] == {}


def test_projection_config_rejects_out_of_range(client):
    h = _auth(client)
    r = client.post("/api/sales-projection-config", json={"Monday": {"Wednesday": 120}}, headers=h)
    assert r.status_code == 400
    r = client.post("/api/sales-projection-config", json={"Funday": {"Wednesday": 50}}, headers=h)
    assert r.status_code == 400
