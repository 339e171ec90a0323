from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from app.kitchenops.audit import record_event
from app.kitchenops.constants import CLOSURE_UNITS, MAX_CLOSURE_DAYS
from app.kitchenops.utils import clean_text, parse_date, parse_number

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kitchenops.models import User
    from app.kitchenops.modules.closures.models import ClosurePlan


def list_closure_plans(s: "Session", *, active_on: date | None = None) -> list["ClosurePlan"]:
    """All plans by start date. With active_on, plans that ended before that day are left out."""
    from app.kitchenops.modules.closures.models import ClosurePlan

    plans = s.query(ClosurePlan).order_by(ClosurePlan.date.asc(), ClosurePlan.id.asc()).all()
    if active_on is not None:
        plans = [p for p in plans if p.end_date >= active_on]
    return plans


def validate_closure_payload(payload: dict) -> list[str]:
    errors = []
    try:
        if not parse_date(payload.get("date")):
            errors.append("Date is required.")
    except ValueError:
        errors.append("Date must be YYYY-MM-DD.")
    if not clean_text(payload.get("reason")):
        errors.append("Reason is required.")

    duration = payload.get("duration")
    if not isinstance(duration, dict):
        errors.append("Duration is required.")
        return errors
    value = parse_number(duration.get("value"))
    unit = duration.get("unit")
    if unit not in CLOSURE_UNITS:
        errors.append(f"Duration unit must be one of: {', '.join(CLOSURE_UNITS)}")
    if value is None or value < 1 or value != int(value):
        errors.append("Duration value must be a whole number of at least 1.")
    elif value * (7 if unit == "weeks" else 1) > MAX_CLOSURE_DAYS:
        errors.append(f"A closure can last at most {MAX_CLOSURE_DAYS} days.")
    return errors


def create_closure_plan(s: "Session", payload: dict, user: "User") -> "ClosurePlan":
    from app.kitchenops.modules.closures.models import ClosurePlan

    duration = payload["duration"]
    plan = ClosurePlan(
        date=parse_date(payload.get("date")),
        reason=clean_text(payload["reason"]),
        duration_value=int(parse_number(duration["value"])),
        duration_unit=duration["unit"],
        created_at=datetime.utcnow(),
    )
    s.add(plan)
    s.flush()

    record_event(
        s,
        actor=user,
        action="closure_plan.create",
        entity_type="ClosurePlan",
        entity_id=str(plan.id),
        metadata={"date": plan.date, "end_date": plan.end_date, "reason": plan.reason},
    )
    return plan


def delete_closure_plan(s: "Session", plan: "ClosurePlan", user: "User") -> None:
    record_event(
        s,
        actor=user,
        action="closure_plan.delete",
        entity_type="ClosurePlan",
        entity_id=str(plan.id),
        metadata={"date": plan.date, "reason": plan.reason},
    )
    s.delete(plan)


def cleanup_ended_closures(s: "Session", today: date | None = None) -> int:
    """Delete plans whose last closed day is before today."""
    today = today or date.today()
    ended = [p for p in list_closure_plans(s) if p.end_date < today]
    for p in ended:
        s.delete(p)
    return len(ended)
