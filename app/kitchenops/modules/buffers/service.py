from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.kitchenops.audit import record_event
from app.kitchenops.constants import ALL_PRODUCTS, WEEKDAYS
from app.kitchenops.utils import clean_text, normalize_day, parse_number

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kitchenops.models import User
    from app.kitchenops.modules.buffers.models import DailyBuffer, ProductBuffer


# ---------- Global buffers ----------
def list_buffers(s: "Session") -> list["ProductBuffer"]:
    from app.kitchenops.modules.buffers.models import ProductBuffer

    return s.query(ProductBuffer).order_by(ProductBuffer.product_name.asc()).all()


def validate_buffer_payload(payload: dict, *, partial: bool = False) -> list[str]:
    errors = []
    name = clean_text(payload.get("productName"))
    if not name and not partial:
        errors.append("Product name is required.")
    raw = payload.get("bufferPrcnt")
    if raw is None:
        if not partial:
            errors.append("Buffer percentage is required.")
    elif parse_number(raw) is None:
        errors.append("Buffer percentage must be a number.")
    return errors


def create_buffer(s: "Session", payload: dict, user: "User") -> "ProductBuffer":
    from app.kitchenops.modules.buffers.models import ProductBuffer

    now = datetime.utcnow()
    b = ProductBuffer(
        product_name=clean_text(payload["productName"]),
        buffer_prcnt=parse_number(payload["bufferPrcnt"]),
        created_at=now,
        updated_on=now,
    )
    s.add(b)
    s.flush()

    record_event(
        s,
        actor=user,
        action="buffer.create",
        entity_type="ProductBuffer",
        entity_id=str(b.id),
        metadata={"product": b.product_name, "buffer_prcnt": b.buffer_prcnt},
    )
    return b


def update_buffer(s: "Session", b: "ProductBuffer", payload: dict, user: "User") -> "ProductBuffer":
    changes = {}
    name = clean_text(payload.get("productName"))
    if name and name != b.product_name:
        changes["product_name"] = {"old": b.product_name, "new": name}
        b.product_name = name
    pct = parse_number(payload.get("bufferPrcnt"))
    if pct is not None and pct != b.buffer_prcnt:
        changes["buffer_prcnt"] = {"old": b.buffer_prcnt, "new": pct}
        b.buffer_prcnt = pct
    b.updated_on = datetime.utcnow()

    if changes:
        record_event(
            s,
            actor=user,
            action="buffer.update",
            entity_type="ProductBuffer",
            entity_id=str(b.id),
            metadata={"changes": changes},
        )
    return b


# ---------- Daily overrides ----------
def list_daily_buffers(s: "Session", day: str | None = None) -> list["DailyBuffer"]:
    from app.kitchenops.modules.buffers.models import DailyBuffer

    q = s.query(DailyBuffer)
    if day:
        q = q.filter(DailyBuffer.day == day)
    rows = q.all()
    order = {d: i for i, d in enumerate(WEEKDAYS)}
    return sorted(rows, key=lambda r: (order.get(r.day, len(order)), r.product_name))


def validate_daily_buffer_payload(payload: dict) -> list[str]:
    errors = []
    if not normalize_day(payload.get("day")):
        errors.append(f"Day must be one of: {', '.join(WEEKDAYS)}")
    name = clean_text(payload.get("productName"))
    if name not in ALL_PRODUCTS:
        errors.append(f"Unknown product {name!r}.")
    if parse_number(payload.get("bufferPrcnt")) is None:
        errors.append("Buffer percentage must be a number.")
    return errors


def upsert_daily_buffer(s: "Session", payload: dict, user: "User") -> "DailyBuffer":
    from app.kitchenops.modules.buffers.models import DailyBuffer

    day = normalize_day(payload.get("day"))
    name = clean_text(payload["productName"])
    pct = parse_number(payload["bufferPrcnt"])

    row = s.query(DailyBuffer).filter(DailyBuffer.day == day, DailyBuffer.product_name == name).one_or_none()
    old = row.buffer_prcnt if row else None
    if row is None:
        row = DailyBuffer(day=day, product_name=name)
        s.add(row)
    row.buffer_prcnt = pct
    row.last_modified = datetime.utcnow()
    s.flush()

    record_event(
        s,
        actor=user,
        action="daily_buffer.upsert",
        entity_type="DailyBuffer",
        entity_id=str(row.id),
        metadata={"day": day, "product": name, "old": old, "new": pct},
    )
    return row


def delete_daily_buffer(s: "Session", row: "DailyBuffer", user: "User") -> None:
    record_event(
        s,
        actor=user,
        action="daily_buffer.delete",
        entity_type="DailyBuffer",
        entity_id=str(row.id),
        metadata={"day": row.day, "product": row.product_name, "buffer_prcnt": row.buffer_prcnt},
    )
    s.delete(row)


def buffer_lookup(s: "Session") -> tuple[dict[str, float], dict[tuple[str, str], float]]:
    """(global by product, daily by (day, product)) for the allocation boards."""
    global_buffers = {b.product_name: float(b.buffer_prcnt) for b in list_buffers(s)}
    daily = {(d.day, d.product_name): float(d.buffer_prcnt) for d in list_daily_buffers(s)}
    return global_buffers, daily
