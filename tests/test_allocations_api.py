"""End-to-end board requests against a seeded store."""
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


def _seed(client, h):
    client.post(
        "/api/sales/bulk",
        json={"Monday": 10000, "Tuesday": 8000, "Wednesday": 9000, "Thursday": 7000, "Friday": 12000, "Saturday": 14000},
        headers=h,
    )
    client.post("/api/upt/bulk", json={"Filets": 200, "Cobb Salad": 0.25}, headers=h)
    client.post("/api/buffer", json={"productName": "Filets", "bufferPrcnt": 10}, headers=h)
    client.post(
        "/api/adjustment/data",
        json={"day": "Monday", "product": "Filets", "message": "+2 cases", "durationInSeconds": 3600},
        headers=h,
    )
    client.post(
        "/api/closure/plan",
        json={"date": "2026-10-22", "reason": "Holiday", "duration": {"value": 1, "unit": "days"}},
        headers=h,
    )
    client.post("/api/messages", json={"day": "Monday", "message": "Staff meeting"}, headers=h)
    client.post("/api/messages", json={"day": "Monday", "message": "[PREP] Check lemons"}, headers=h)


def test_thawing_board(client):
    h = _auth(client)
    _seed(client, h)

    r = client.get("/api/allocations/thawing?as_of=2026-10-19", headers=h)
    assert r.status_code == 200
    body = r.json
    assert body["as_of"] == "2026-10-19"
    assert body["next_week"] is False
    assert [d["day"] for d in body["days"]] == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

    monday = body["days"][0]
    assert monday["sales"] == 9000
    assert monday["notes"] == ["Staff meeting"]
    # 200 * 9000 / 1000 / 158 * 1.1 = 12.5 -> 13, plus the +2 adjustment
    assert monday["products"]["Filets"]["cases"] == 15
    assert monday["products"]["Filets"]["modified"] is True

    thursday = body["days"][3]
    assert thursday["closed"] == {"reason": "Holiday"}
    assert thursday["products"] == {}


def test_prep_board(client):
    h = _auth(client)
    _seed(client, h)

    r = client.get("/api/allocations/prep?as_of=2026-10-19", headers=h)
    assert r.status_code == 200
    monday = r.json["days"][0]
    assert monday["sales"] == 10000
    assert monday["notes"] == ["Check lemons"]
    assert monday["products"]["Cobb Salad"]["salads"] == 3


def test_future_projection_changes_board(client):
    h = _auth(client)
    _seed(client, h)
    client.post("/api/projections/future", json={"date": "2026-10-26", "amount": 20000}, headers=h)

    r = client.get("/api/allocations/thawing?as_of=2026-10-19", headers=h)
    saturday = r.json["days"][5]
    assert saturday["sales"] == 20000
    assert saturday["sales_calculation"][0]["is_from_future_projection"] is True

    r = client.get("/api/allocations/prep?as_of=2026-10-19&next_week=1", headers=h)
    assert r.json["next_week"] is True
    assert r.json["days"][0]["date"] == "2026-10-26"
    assert r.json["days"][0]["sales"] == 20000


def test_board_requires_login_and_valid_date(client):
    assert client.get("/api/allocations/thawing").status_code == 401
    h = _auth(client)
    r = client.get("/api/allocations/prep?as_of=next-tuesday", headers=h)
    assert r.status_code == 400
    assert r.json["message"] == "as_of must be YYYY-MM-DD."
