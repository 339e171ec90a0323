from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from app.kitchenops.audit import record_event
from app.kitchenops.constants import ALL_PRODUCTS, MAX_ADJUSTMENT_SECONDS, WEEKDAYS
from app.kitchenops.utils import clean_text, normalize_day, parse_number

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kitchenops.models import User
    from app.kitchenops.modules.adjustments.models import Adjustment


def list_active_adjustments(s: "Session", now: datetime | None = None) -> list["Adjustment"]:
    from app.kitchenops.modules.adjustments.models import Adjustment

    now = now or datetime.utcnow()
    return (
        s.query(Adjustment)
        .filter(Adjustment.expires_at > now)
        .order_by(Adjustment.created_at.asc(), Adjustment.id.asc())
        .all()
    )


def validate_adjustment_payload(payload: dict) -> list[str]:
    errors = []
    if not normalize_day(payload.get("day")):
        errors.append(f"Day must be one of: {', '.join(WEEKDAYS)}")
    product = clean_text(payload.get("product"))
    if not product:
        errors.append("Product is required.")
    elif product not in ALL_PRODUCTS:
        errors.append(f"Unknown product {product!r}.")
    if not clean_text(payload.get("message")):
        errors.append("Message is required.")
    seconds = parse_number(payload.get("durationInSeconds"))
    if seconds is None or int(seconds) <= 0:
        errors.append("durationInSeconds must be a positive number.")
    elif seconds > MAX_ADJUSTMENT_SECONDS:
        errors.append(f"durationInSeconds must be at most {MAX_ADJUSTMENT_SECONDS}.")
    return errors


def create_adjustment(s: "Session", payload: dict, user: "User", now: datetime | None = None) -> "Adjustment":
    from app.kitchenops.modules.adjustments.models import Adjustment

    now = now or datetime.utcnow()
    seconds = int(parse_number(payload.get("durationInSeconds")))
    adj = Adjustment(
        day=normalize_day(payload.get("day")),
        product=clean_text(payload["product"]),
        message=clean_text(payload["message"]),
        expires_at=now + timedelta(seconds=seconds),
        created_at=now,
    )
    s.add(adj)
    s.flush()

    record_event(
        s,
        actor=user,
        action="adjustment.create",
        entity_type="Adjustment",
        entity_id=str(adj.id),
        metadata={"day": adj.day, "product": adj.product, "message": adj.message, "expires_at": adj.expires_at},
    )
    return adj


def delete_adjustment(s: "Session", adj: "Adjustment", user: "User") -> None:
    record_event(
        s,
        actor=user,
        action="adjustment.delete",
        entity_type="Adjustment",
        entity_id=str(adj.id),
        metadata={"day": adj.day, "product": adj.product, "message": adj.message},
    )
    s.delete(adj)


def cleanup_expired_adjustments(s: "Session", now: datetime | None = None) -> int:
    """Delete adjustments whose expiry has passed. Returns the number removed."""
    from app.kitchenops.modules.adjustments.models import Adjustment

    now = now or datetime.utcnow()
    return s.query(Adjustment).filter(Adjustment.expires_at <= now).delete(synchronize_session=False)
