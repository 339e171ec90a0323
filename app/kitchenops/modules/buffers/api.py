from __future__ import annotations

from flask import Blueprint, abort, g, jsonify, request

from app.kitchenops.db import db_session
from app.kitchenops.models import User
from app.kitchenops.modules.buffers.models import DailyBuffer, ProductBuffer
from app.kitchenops.modules.buffers.service import (
    create_buffer,
    delete_daily_buffer,
    list_buffers,
    list_daily_buffers,
    update_buffer,
    upsert_daily_buffer,
    validate_buffer_payload,
    validate_daily_buffer_payload,
)
from app.kitchenops.rbac import require_admin, require_login
from app.kitchenops.utils import clean_text, json_object_body, normalize_day

bp = Blueprint("buffers", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


# ---------- Global buffers ----------
@bp.get("/buffer")
@require_login
def buffer_list():
    s = db_session()
    return jsonify([b.to_dict() for b in list_buffers(s)])


@bp.post("/buffer")
@require_login
def buffer_create():
    s = db_session()
    payload = json_object_body()
    errors = validate_buffer_payload(payload)
    if errors:
        return {"message": "Product name and buffer percentage are required.", "errors": errors}, 400

    name = clean_text(payload["productName"])
    if s.query(ProductBuffer).filter(ProductBuffer.product_name == name).one_or_none():
        return {"message": f"A buffer for {name} already exists."}, 409

    b = create_buffer(s, payload, _current_user())
    s.commit()
    return b.to_dict(), 201


@bp.get("/buffer/<int:buffer_id>")
@require_login
def buffer_detail(buffer_id: int):
    s = db_session()
    b = s.get(ProductBuffer, buffer_id)
    if not b:
        abort(404, description="Buffer not found.")
    return b.to_dict()


@bp.put("/buffer/<int:buffer_id>")
@require_login
def buffer_update(buffer_id: int):
    s = db_session()
    b = s.get(ProductBuffer, buffer_id)
    if not b:
        abort(404, description="Buffer not found.")

    payload = json_object_body()
    errors = validate_buffer_payload(payload, partial=True)
    if errors:
        return {"message": "Invalid buffer.", "errors": errors}, 400

    name = clean_text(payload.get("productName"))
    if name and name != b.product_name:
        if s.query(ProductBuffer).filter(ProductBuffer.product_name == name).one_or_none():
            return {"message": f"A buffer for {name} already exists."}, 409

    update_buffer(s, b, payload, _current_user())
    s.commit()
    return b.to_dict()


# ---------- Daily overrides ----------
@bp.get("/daily-buffer")
@require_login
def daily_buffer_list():
    s = db_session()
    return jsonify([r.to_dict() for r in list_daily_buffers(s)])


@bp.get("/daily-buffer/<day>")
@require_login
def daily_buffer_for_day(day: str):
    s = db_session()
    canonical = normalize_day(day)
    if not canonical:
        return jsonify([])
    return jsonify([r.to_dict() for r in list_daily_buffers(s, canonical)])


@bp.post("/daily-buffer")
@require_admin
def daily_buffer_upsert():
    """Accepts a single override or a list of them (the whole week grid)."""
    s = db_session()
    body = request.get_json(silent=True)
    items = body if isinstance(body, list) else [body or {}]

    errors = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            errors.append(f"Item {idx}: must be an object.")
            continue
        errors.extend(f"Item {idx}: {e}" if len(items) > 1 else e for e in validate_daily_buffer_payload(item))
    if errors:
        return {"message": "Invalid daily buffer.", "errors": errors}, 400

    u = _current_user()
    rows = [upsert_daily_buffer(s, item, u) for item in items]
    s.commit()
    if isinstance(body, list):
        return jsonify([r.to_dict() for r in rows])
    return rows[0].to_dict()


@bp.delete("/daily-buffer/<int:buffer_id>")
@require_admin
def daily_buffer_delete(buffer_id: int):
    s = db_session()
    row = s.get(DailyBuffer, buffer_id)
    if not row:
        abort(404, description="Daily buffer not found.")
    delete_daily_buffer(s, row, _current_user())
    s.commit()
    return {"message": "Daily buffer deleted."}
