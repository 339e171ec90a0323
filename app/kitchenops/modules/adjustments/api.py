from __future__ import annotations

from flask import Blueprint, abort, g, jsonify

from app.kitchenops.db import db_session
from app.kitchenops.models import User
from app.kitchenops.modules.adjustments.models import Adjustment
from app.kitchenops.modules.adjustments.service import (
    create_adjustment,
    delete_adjustment,
    list_active_adjustments,
    validate_adjustment_payload,
)
from app.kitchenops.rbac import require_login
from app.kitchenops.utils import json_object_body

bp = Blueprint("adjustments", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.get("/adjustment/data")
@require_login
def adjustment_list():
    s = db_session()
    return jsonify([a.to_dict() for a in list_active_adjustments(s)])


@bp.post("/adjustment/data")
@require_login
def adjustment_create():
    s = db_session()
    payload = json_object_body()
    errors = validate_adjustment_payload(payload)
    if errors:
        return {"message": "All fields are required.", "errors": errors}, 400

    adj = create_adjustment(s, payload, _current_user())
    s.commit()
    return adj.to_dict(), 201


@bp.delete("/adjustment/data/<int:adjustment_id>")
@require_login
def adjustment_delete(adjustment_id: int):
    s = db_session()
    adj = s.get(Adjustment, adjustment_id)
    if not adj:
        abort(404, description="Data not found.")
    body = adj.to_dict()
    delete_adjustment(s, adj, _current_user())
    s.commit()
    return {"message": "Data deleted successfully.", "deletedData": body}
