"""Tests for truck items and the order guide."""
import pytest
from werkzeug.security import generate_password_hash

from app.kitchenops import create_app
from app.kitchenops.db import session_scope
from app.kitchenops.models import Base, User
from app.kitchenops.modules.truck.utils import (
    calculate_usage,
    needs_reorder,
    order_quantity,
    parse_uom,
    reorder_point,
)


class _Assoc:
    def __init__(self, name, usage):
        self.name = name
        self.usage = usage


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


def _item(**overrides):
    body = {
        "description": "Chicken Breast",
        "uom": "2/5 Lb Ct Case",
        "cost": 54.25,
        "storageType": "frozen",
        "associatedItems": [{"name": "Sandwich", "usage": 1, "unit": "ct"}],
    }
    body.update(overrides)
    return body


# ---------- Pure helpers ----------
def test_parse_uom():
    assert parse_uom("2/5 Lb Ct Case").total_units == 10
    assert parse_uom("1000 Ct case").total_units == 1000
    assert parse_uom("1000 Ct case").unit_type == "ct"
    assert parse_uom("Case of 12") is None
    assert parse_uom("") is None
    assert parse_uom(None) is None


def test_calculate_usage_rounds_cases_up():
    usage = calculate_usage(10, [_Assoc("Sandwich", 1), _Assoc("Deluxe", 2)], {"Sandwich": 40, "Deluxe": 5}, 5000)
    # (40 * 5000 * 1 + 5 * 5000 * 2) / 1000 = 250 units
    assert usage.total_usage == pytest.approx(250)
    assert usage.exact_cases == pytest.approx(25)
    assert usage.cases_needed == 25

    partial = calculate_usage(12, [_Assoc("Sandwich", 1)], {"Sandwich": 25}, 1000)
    assert partial.exact_cases == pytest.approx(25 / 12)
    assert partial.cases_needed == 3


def test_calculate_usage_without_associations_or_mix():
    assert calculate_usage(10, [], {"Sandwich": 40}, 5000).cases_needed == 0
    assert calculate_usage(10, [_Assoc("Unknown", 1)], {}, 5000).total_usage == 0


def test_reorder_helpers():
    point = reorder_point(avg_daily_usage=2, lead_time=3, min_par_level=4)
    assert point == 10
    assert needs_reorder(10, point)
    assert not needs_reorder(11, point)
    assert reorder_point(None, None, None) == 0
    assert order_quantity(20, 7) == 13
    assert order_quantity(5, 7) == 0
    assert order_quantity(None, 7) == 0


# ---------- API ----------
def test_create_derives_units_from_uom(client):
    h = _auth(client)
    r = client.post("/api/truck-items", json=_item(), headers=h)
    assert r.status_code == 201
    body = r.json
    assert body["totalUnits"] == 10
    assert body["unitType"] == "ct"
    assert body["priorityLevel"] == "medium"
    assert body["associatedItems"] == [{"name": "Sandwich", "usage": 1.0, "unit": "ct"}]

    assert [i["description"] for i in client.get("/api/truck-items", headers=h).json] == ["Chicken Breast"]


def test_create_validation(client):
    h = _auth(client)
    r = client.post(
        "/api/truck-items",
        json={"description": "Mystery", "uom": "Case of 12", "cost": 3, "storageType": "attic"},
        headers=h,
    )
    assert r.status_code == 400
    errors = " ".join(r.json["errors"])
    assert "storageType" in errors
    assert "totalUnits is required" in errors

    r = client.post("/api/truck-items", json=_item(associatedItems=[{"usage": 1}]), headers=h)
    assert r.status_code == 400


def test_partial_update_and_association_replace(client):
    h = _auth(client)
    item_id = client.post("/api/truck-items", json=_item(), headers=h).json["id"]

    r = client.put(f"/api/truck-items/{item_id}", json={"onHandQty": 4, "notes": "Check freezer 2"}, headers=h)
    assert r.status_code == 200
    assert r.json["onHandQty"] == 4
    assert r.json["notes"] == "Check freezer 2"
    assert r.json["description"] == "Chicken Breast"
    assert len(r.json["associatedItems"]) == 1

    r = client.put(
        f"/api/truck-items/{item_id}",
        json={"associatedItems": [{"name": "Nuggets 8ct", "usage": 0.5, "unit": "lb"}]},
        headers=h,
    )
    assert r.json["associatedItems"] == [{"name": "Nuggets 8ct", "usage": 0.5, "unit": "lb"}]

    assert client.put("/api/truck-items/999", json={}, headers=h).status_code == 404


def test_delete(client):
    h = _auth(client)
    item_id = client.post("/api/truck-items", json=_item(), headers=h).json["id"]
    assert client.delete(f"/api/truck-items/{item_id}", headers=h).status_code == 200
    assert client.delete(f"/api/truck-items/{item_id}", headers=h).status_code == 404
    assert client.get("/api/truck-items", headers=h).json == []


def test_order_guide(client):
    h = _auth(client)
    client.post(
        "/api/sales/bulk",
        json={d: 1000 for d in ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")},
        headers=h,
    )
    client.post(
        "/api/salesmix/upload",
        json={"data": {"Sandwich": 50}, "reportingPeriod": {"startDate": "2026-10-01", "endDate": "2026-10-14"}},
        headers=h,
    )
    client.post("/api/truck-items", json=_item(maxParLevel=40, onHandQty=5), headers=h)
    client.post(
        "/api/truck-items",
        json=_item(description="Pickles", uom="6 Ct Case", associatedItems=[{"name": "Spicy Deluxe", "usage": 1, "unit": "ct"}]),
        headers=h,
    )

    r = client.get("/api/truck-items/order-guide?start=2026-10-18&end=2026-10-24", headers=h)
    assert r.status_code == 200
    guide = r.json
    assert guide["hasSalesMix"] is True
    assert guide["projectedSales"] == 6000

    chicken, pickles = guide["items"]
    assert chicken["item"]["description"] == "Chicken Breast"
    # 50 per thousand * 6000 sales * 1 unit = 300 units = 30 cases of 10
    assert chicken["usage"]["casesNeeded"] == 30
    assert chicken["orderQuantity"] == 35
    assert chicken["missingSalesMix"] == []

    assert pickles["usage"]["casesNeeded"] == 0
    assert pickles["missingSalesMix"] == ["Spicy Deluxe"]


def test_order_guide_rejects_inverted_range(client):
    h = _auth(client)
    r = client.get("/api/truck-items/order-guide?start=2026-10-24&end=2026-10-18", headers=h)
    assert r.status_code == 400
