"""Tests for day instructions (messages)."""
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
        s.add(User(username="manager", pin_hash=generate_password_hash("1234"), is_admin=False, is_active=True))

    return app.test_client()


def _auth(client):
    r = client.post("/api/auth/login", json={"username": "manager", "pin": "1234"})
    return {"Authorization": f"Bearer {r.json['token']}"}


def test_create_and_list_sorted_by_day(client):
    h = _auth(client)
    r = client.post("/api/messages", json={"day": "Saturday", "message": "Deep clean thaw cabinet"}, headers=h)
    assert r.status_code == 201
    r = client.post(
        "/api/messages",
        json={"day": "Monday", "message": "Catering pickup at 11", "products": ["Nuggets", " Filets "]},
        headers=h,
    )
    assert r.status_code == 201
    assert r.json["products"] == "Nuggets,Filets"

    r = client.get("/api/messages", headers=h)
    assert [m["day"] for m in r.json] == ["Monday", "Saturday"]


def test_update_first_instruction_for_day(client):
    h = _auth(client)
    first = client.post("/api/messages", json={"day": "Tuesday", "message": "one"}, headers=h).json
    client.post("/api/messages", json={"day": "Tuesday", "message": "two"}, headers=h)

    r = client.put("/api/messages/Tuesday", json={"message": "one (edited)", "products": "Lettuce"}, headers=h)
    assert r.status_code == 200
    assert r.json["id"] == first["id"]
    assert r.json["message"] == "one (edited)"
    assert r.json["products"] == "Lettuce"

    assert client.put("/api/messages/Wednesday", json={"message": "x"}, headers=h).status_code == 404
    assert client.put("/api/messages/Tuesday", json={}, headers=h).status_code == 400


def test_delete(client):
    h = _auth(client)
    created = client.post("/api/messages", json={"day": "Sunday", "message": "[PREP] Inventory"}, headers=h).json
    assert client.delete(f"/api/messages/{created['id']}", headers=h).status_code == 200
    assert client.delete(f"/api/messages/{created['id']}", headers=h).status_code == 404


def test_validation(client):
    h = _auth(client)
    r = client.post("/api/messages", json={"day": "Someday", "message": ""}, headers=h)
    assert r.status_code == 400
    assert len(r.json["errors"]) == 2


def test_malformed_bodies(client):
    h = _auth(client)
    assert client.post("/api/messages", json=["Monday"], headers=h).status_code == 400

    r = client.post("/api/messages", json={"day": "Monday", "message": 42, "products": [1, "Filets"]}, headers=h)
    assert r.status_code == 201
    assert r.json["message"] == "42"
    assert r.json["products"] == "1,Filets"
