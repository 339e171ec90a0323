from __future__ import annotations

from datetime import date

from flask import Blueprint, abort, g, jsonify, request

from app.kitchenops.db import db_session
from app.kitchenops.models import User
from app.kitchenops.modules.sales.service import load_sales_lookup
from app.kitchenops.modules.truck.models import TruckItem
from app.kitchenops.modules.truck.service import (
    create_truck_item,
    delete_truck_item,
    list_truck_items,
    order_guide,
    update_truck_item,
    validate_truck_item_payload,
)
from app.kitchenops.modules.upt.service import current_sales_mix
from app.kitchenops.rbac import require_login
from app.kitchenops.utils import calendar_week, json_object_body, parse_date

bp = Blueprint("truck", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.get("/truck-items")
@require_login
def truck_items_list():
    s = db_session()
    return jsonify([i.to_dict() for i in list_truck_items(s)])


@bp.post("/truck-items")
@require_login
def truck_items_create():
    s = db_session()
    payload = json_object_body()
    errors = validate_truck_item_payload(payload)
    if errors:
        return {"message": "Invalid truck item.", "errors": errors}, 400

    item = create_truck_item(s, payload, _current_user())
    s.commit()
    return item.to_dict(), 201


@bp.get("/truck-items/order-guide")
@require_login
def truck_items_order_guide():
    s = db_session()
    default_start, default_end = calendar_week(date.today())
    try:
        start = parse_date(request.args.get("start")) or default_start
        end = parse_date(request.args.get("end")) or default_end
    except ValueError:
        abort(400, description="start/end must be YYYY-MM-DD.")
    if end < start:
        abort(400, description="end must not be before start.")

    mix = current_sales_mix(s)
    sales = load_sales_lookup(s, start, end)
    guide = order_guide(list_truck_items(s), (mix.data if mix else {}) or {}, sales, start, end)
    guide["hasSalesMix"] = mix is not None
    return guide


@bp.put("/truck-items/<int:item_id>")
@require_login
def truck_items_update(item_id: int):
    s = db_session()
    item = s.get(TruckItem, item_id)
    if not item:
        abort(404, description="Truck item not found.")

    payload = json_object_body()
    errors = validate_truck_item_payload(payload, partial=True)
    if errors:
        return {"message": "Invalid truck item.", "errors": errors}, 400

    update_truck_item(s, item, payload, _current_user())
    s.commit()
    return item.to_dict()


@bp.delete("/truck-items/<int:item_id>")
@require_login
def truck_items_delete(item_id: int):
    s = db_session()
    item = s.get(TruckItem, item_id)
    if not item:
        abort(404, description="Truck item not found.")
    delete_truck_item(s, item, _current_user())
    s.commit()
    return {"message": "Truck item deleted."}
