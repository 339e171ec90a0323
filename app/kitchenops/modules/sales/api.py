from __future__ import annotations

from flask import Blueprint, abort, g, jsonify, request

from app.kitchenops.db import db_session
from app.kitchenops.models import User
from app.kitchenops.modules.sales.service import (
    bulk_upsert_sales,
    delete_future_projection,
    get_projection_config,
    list_future_projections,
    list_weekly_sales,
    save_projection_config,
    update_sales_for_day,
    upsert_future_projection,
    validate_bulk_sales,
    validate_future_projection_payload,
    validate_projection_config,
)
from app.kitchenops.rbac import require_login
from app.kitchenops.utils import json_object_body, normalize_day, parse_date, parse_number

bp = Blueprint("sales", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


# ---------- Weekly baseline ----------
@bp.get("/sales")
@require_login
def sales_list():
    s = db_session()
    return jsonify([r.to_dict() for r in list_weekly_sales(s)])


@bp.post("/sales/bulk")
@require_login
def sales_bulk():
    s = db_session()
    cleaned, errors = validate_bulk_sales(request.get_json(silent=True))
    if errors:
        return {"message": "Invalid sales data.", "errors": errors}, 400

    rows = bulk_upsert_sales(s, cleaned, _current_user())
    s.commit()
    return {"message": "Sales projections saved.", "sales": [r.to_dict() for r in rows]}


@bp.put("/sales/<day>")
@require_login
def sales_update_day(day: str):
    s = db_session()
    canonical = normalize_day(day)
    if not canonical:
        abort(404, description=f"No sales projection for {day}.")

    payload = json_object_body()
    sales = parse_number(payload.get("sales"))
    if sales is None or sales < 0:
        return {"message": "Invalid sales data.", "errors": ["Sales must be a non-negative number."]}, 400

    row = update_sales_for_day(s, canonical, sales, _current_user())
    if row is None:
        abort(404, description=f"No sales projection for {canonical}.")
    s.commit()
    return row.to_dict()


# ---------- Future projections ----------
@bp.get("/projections/future")
@require_login
def future_list():
    s = db_session()
    try:
        start = parse_date(request.args.get("start"))
        end = parse_date(request.args.get("end"))
    except ValueError:
        abort(400, description="start/end must be YYYY-MM-DD.")
    return jsonify([p.to_dict() for p in list_future_projections(s, start, end)])


@bp.post("/projections/future")
@require_login
def future_upsert():
    s = db_session()
    payload = json_object_body()
    errors = validate_future_projection_payload(payload)
    if errors:
        return {"message": "Invalid projection.", "errors": errors}, 400

    proj = upsert_future_projection(s, payload, _current_user())
    s.commit()
    return proj.to_dict()


@bp.delete("/projections/future/<date_str>")
@require_login
def future_delete(date_str: str):
    s = db_session()
    try:
        d = parse_date(date_str)
    except ValueError:
        abort(400, description="Date must be YYYY-MM-DD.")
    if d is None or not delete_future_projection(s, d, _current_user()):
        abort(404, description="Projection not found.")
    s.commit()
    return {"message": "Projection deleted."}


# ---------- Projection config ----------
@bp.get("/sales-projection-config")
@require_login
def projection_config_get():
    s = db_session()
    return get_projection_config(s)


@bp.post("/sales-projection-config")
@require_login
def projection_config_save():
    s = db_session()
    cleaned, errors = validate_projection_config(request.get_json(silent=True))
    if errors:
        return {"message": "Invalid projection config.", "errors": errors}, 400

    save_projection_config(s, cleaned, _current_user())
    s.commit()
    return {"message": "Projection config saved.", "config": get_projection_config(s)}
