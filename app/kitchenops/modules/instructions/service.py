from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.kitchenops.audit import record_event
from app.kitchenops.constants import ALL_DAYS
from app.kitchenops.utils import clean_text, normalize_day

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kitchenops.models import User
    from app.kitchenops.modules.instructions.models import Instruction


def normalize_products(raw: object) -> str:
    """Accept a list or a comma-separated string; store the comma-separated form."""
    if raw is None:
        return ""
    parts = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
    return ",".join(str(p).strip() for p in parts if str(p).strip())


def list_instructions(s: "Session") -> list["Instruction"]:
    from app.kitchenops.modules.instructions.models import Instruction

    rows = s.query(Instruction).order_by(Instruction.id.asc()).all()
    order = {d: i for i, d in enumerate(ALL_DAYS)}
    return sorted(rows, key=lambda r: order.get(r.day, len(order)))


def validate_instruction_payload(payload: dict, *, require_day: bool = True) -> list[str]:
    errors = []
    if require_day and not normalize_day(payload.get("day"), allow_sunday=True):
        errors.append(f"Day must be one of: {', '.join(ALL_DAYS)}")
    if not clean_text(payload.get("message")):
        errors.append("Message is required.")
    return errors


def create_instruction(s: "Session", payload: dict, user: "User") -> "Instruction":
    from app.kitchenops.modules.instructions.models import Instruction

    ins = Instruction(
        day=normalize_day(payload.get("day"), allow_sunday=True),
        message=clean_text(payload["message"]),
        products=normalize_products(payload.get("products")),
        created_at=datetime.utcnow(),
    )
    s.add(ins)
    s.flush()

    record_event(
        s,
        actor=user,
        action="instruction.create",
        entity_type="Instruction",
        entity_id=str(ins.id),
        metadata={"day": ins.day, "products": ins.products},
    )
    return ins


def update_instruction_for_day(s: "Session", day: str, payload: dict, user: "User") -> "Instruction | None":
    """Updates the first instruction stored for that day; None when the day has none."""
    from app.kitchenops.modules.instructions.models import Instruction

    ins = s.query(Instruction).filter(Instruction.day == day).order_by(Instruction.id.asc()).first()
    if ins is None:
        return None

    changes = {}
    message = clean_text(payload["message"])
    if message != ins.message:
        changes["message"] = {"old": ins.message, "new": message}
        ins.message = message
    if "products" in payload:
        products = normalize_products(payload.get("products"))
        if products != ins.products:
            changes["products"] = {"old": ins.products, "new": products}
            ins.products = products

    if changes:
        record_event(
            s,
            actor=user,
            action="instruction.update",
            entity_type="Instruction",
            entity_id=str(ins.id),
            metadata={"changes": changes},
        )
    return ins


def delete_instruction(s: "Session", ins: "Instruction", user: "User") -> None:
    record_event(
        s,
        actor=user,
        action="instruction.delete",
        entity_type="Instruction",
        entity_id=str(ins.id),
        metadata={"day": ins.day, "message": ins.message},
    )
    s.delete(ins)
