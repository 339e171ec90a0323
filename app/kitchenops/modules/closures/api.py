from __future__ import annotations

from datetime import date

from flask import Blueprint, abort, g, jsonify, request

from app.kitchenops.db import db_session
from app.kitchenops.models import User
from app.kitchenops.modules.closures.models import ClosurePlan
from app.kitchenops.modules.closures.service import (
    create_closure_plan,
    delete_closure_plan,
    list_closure_plans,
    validate_closure_payload,
)
from app.kitchenops.rbac import require_login
from app.kitchenops.utils import json_object_body, parse_flag

bp = Blueprint("closures", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.post("/closure/plan")
@require_login
def closure_create():
    s = db_session()
    payload = json_object_body()
    errors = validate_closure_payload(payload)
    if errors:
        return {"message": "Invalid closure plan.", "errors": errors}, 400

    plan = create_closure_plan(s, payload, _current_user())
    s.commit()
    return {"message": "Closure plan submitted successfully.", "plan": plan.to_dict()}, 201


@bp.get("/closure/plans")
@require_login
def closure_list():
    s = db_session()
    active_on = date.today() if parse_flag(request.args.get("active")) else None
    return jsonify([p.to_dict() for p in list_closure_plans(s, active_on=active_on)])


@bp.delete("/closure/plan/<int:plan_id>")
@require_login
def closure_delete(plan_id: int):
    s = db_session()
    plan = s.get(ClosurePlan, plan_id)
    if not plan:
        abort(404, description="Closure plan not found.")
    delete_closure_plan(s, plan, _current_user())
    s.commit()
    return {"message": "Closure plan deleted successfully."}
