"""Tests for global and daily buffers."""
import pytest
from werkzeug.security import generate_password_hash

from app.kitchenops import create_app
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
        s.add_all(
            [
                User(username="admin", pin_hash=generate_password_hash("1234"), is_admin=True, is_active=True),
                User(username="crew", pin_hash=generate_password_hash("5678"), is_admin=False, is_active=True),
            ]
        )

    return app.test_client()


def _auth(client, username="admin", pin="1234"):
    r = client.post("/api/auth/login", json={"username": username, "pin": pin})
    return {"Authorization": f"Bearer {r.json['token']}"}


def test_buffer_create_get_update(client):
    h = _auth(client)
    r = client.post("/api/buffer", json={"productName": "Filets", "bufferPrcnt": 10}, headers=h)
    assert r.status_code == 201
    buffer_id = r.json["id"]

    r = client.post("/api/buffer", json={"productName": "Filets", "bufferPrcnt": 5}, headers=h)
    assert r.status_code == 409

    r = client.get(f"/api/buffer/{buffer_id}", headers=h)
    assert r.status_code == 200
    assert r.json["bufferPrcnt"] == 10

    r = client.put(f"/api/buffer/{buffer_id}", json={"bufferPrcnt": -5}, headers=h)
    assert r.status_code == 200
    assert r.json["bufferPrcnt"] == -5
    assert r.json["productName"] == "Filets"

    r = client.get("/api/buffer", headers=h)
    assert [b["productName"] for b in r.json] == ["Filets"]


def test_buffer_missing_and_invalid(client):
    h = _auth(client)
    assert client.get("/api/buffer/99", headers=h).status_code == 404
    assert client.put("/api/buffer/99", json={"bufferPrcnt": 1}, headers=h).status_code == 404
    r = client.post("/api/buffer", json={"productName": "Filets"}, headers=h)
    assert r.status_code == 400


def test_daily_buffer_upsert_single_and_list(client):
    h = _auth(client)
    r = client.post(
        "/api/daily-buffer",
        json={"day": "Monday", "productName": "Lettuce", "bufferPrcnt": 15},
        headers=h,
    )
    assert r.status_code == 200
    assert r.json["bufferPrcnt"] == 15

    r = client.post(
        "/api/daily-buffer",
        json=[
            {"day": "Monday", "productName": "Lettuce", "bufferPrcnt": 20},
            {"day": "Saturday", "productName": "Tomato", "bufferPrcnt": 5},
        ],
        headers=h,
    )
    assert r.status_code == 200
    assert len(r.json) == 2

    r = client.get("/api/daily-buffer", headers=h)
    assert [(b["day"], b["productName"], b["bufferPrcnt"]) for b in r.json] == [
        ("Monday", "Lettuce", 20),
        ("Saturday", "Tomato", 5),
    ]

    r = client.get("/api/daily-buffer/Saturday", headers=h)
    assert [b["productName"] for b in r.json] == ["Tomato"]


def test_daily_buffer_writes_are_admin_only(client):
    crew = _auth(client, "crew", "5678")
    r = client.post(
        "/api/daily-buffer",
        json={"day": "Monday", "productName": "Lettuce", "bufferPrcnt": 15},
        headers=crew,
    )
    assert r.status_code == 403

    # Reads stay open to any signed-in user
    assert client.get("/api/daily-buffer", headers=crew).status_code == 200


def test_daily_buffer_validation_and_delete(client):
    h = _auth(client)
    r = client.post(
        "/api/daily-buffer",
        json=[{"day": "Sunday", "productName": "Lettuce", "bufferPrcnt": 1}, {"day": "Monday", "productName": "Kale", "bufferPrcnt": 1}],
        headers=h,
    )
    assert r.status_code == 400
    assert len(r.json["errors"]) == 2

    r = client.post("/api/daily-buffer", json={"day": "Friday", "productName": "Romaine", "bufferPrcnt": 8}, headers=h)
    row_id = r.json["id"]
    assert client.delete(f"/api/daily-buffer/{row_id}", headers=h).status_code == 200
    assert client.delete(f"/api/daily-buffer/{row_id}", headers=h).status_code == 404


def test_buffer_bodies_of_the_wrong_shape(client):
    h = _auth(client)
    r = client.post("/api/buffer", json=["Filets", 5], headers=h)
    assert r.status_code == 400

    r = client.post("/api/buffer", json={"productName": 5, "bufferPrcnt": 3}, headers=h)
    assert r.status_code == 201
    assert r.json["productName"] == "5"

    r = client.post("/api/daily-buffer", json=[{"day": "Monday", "productName": 7, "bufferPrcnt": 1}], headers=h)
    assert r.status_code == 400
    assert r.json["errors"] == ["Unknown product '7'."]
