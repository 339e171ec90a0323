from __future__ import annotations

from flask import Blueprint, abort, g, jsonify

from app.kitchenops.db import db_session
from app.kitchenops.models import User
from app.kitchenops.modules.instructions.models import Instruction
from app.kitchenops.modules.instructions.service import (
    create_instruction,
    delete_instruction,
    list_instructions,
    update_instruction_for_day,
    validate_instruction_payload,
)
from app.kitchenops.rbac import require_login
from app.kitchenops.utils import json_object_body, normalize_day

bp = Blueprint("instructions", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.get("/messages")
@require_login
def messages_list():
    s = db_session()
    return jsonify([m.to_dict() for m in list_instructions(s)])


@bp.post("/messages")
@require_login
def messages_create():
    s = db_session()
    payload = json_object_body()
    errors = validate_instruction_payload(payload)
    if errors:
        return {"message": "Day and message are required.", "errors": errors}, 400

    ins = create_instruction(s, payload, _current_user())
    s.commit()
    return ins.to_dict(), 201


@bp.put("/messages/<day>")
@require_login
def messages_update(day: str):
    s = db_session()
    canonical = normalize_day(day, allow_sunday=True)
    payload = json_object_body()
    errors = validate_instruction_payload(payload, require_day=False)
    if not canonical:
        errors.insert(0, f"Unknown day {day!r}.")
    if errors:
        return {"message": "Day and message are required for update.", "errors": errors}, 400

    ins = update_instruction_for_day(s, canonical, payload, _current_user())
    if ins is None:
        abort(404, description="Message not found.")
    s.commit()
    return ins.to_dict()


@bp.delete("/messages/<int:instruction_id>")
@require_login
def messages_delete(instruction_id: int):
    s = db_session()
    ins = s.get(Instruction, instruction_id)
    if not ins:
        abort(404, description="Message not found.")
    delete_instruction(s, ins, _current_user())
    s.commit()
    return {"message": "Message deleted successfully."}
