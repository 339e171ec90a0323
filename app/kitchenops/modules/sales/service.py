from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from app.kitchenops.audit import record_event
from app.kitchenops.constants import DEFAULT_PROJECTION_CONFIG, WEEKDAYS
from app.kitchenops.utils import normalize_day, parse_date, parse_number

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kitchenops.models import User
    from app.kitchenops.modules.sales.models import FutureProjection, SalesProjection


# ---------- Weekly baseline ----------
def list_weekly_sales(s: "Session") -> list["SalesProjection"]:
    """Baseline rows in board order (Monday first)."""
    from app.kitchenops.modules.sales.models import SalesProjection

    rows = s.query(SalesProjection).all()
    order = {d: i for i, d in enumerate(WEEKDAYS)}
    return sorted(rows, key=lambda r: order.get(r.day, len(order)))


def weekly_baseline(s: "Session") -> dict[str, float]:
    return {r.day: float(r.sales or 0) for r in list_weekly_sales(s)}


def validate_bulk_sales(payload: object) -> tuple[dict[str, float], list[str]]:
    """Validate `{Monday: 15000, ...}`. Returns (cleaned, errors)."""
    errors: list[str] = []
    cleaned: dict[str, float] = {}
    if not isinstance(payload, dict) or not payload:
        return cleaned, ["Body must be an object mapping weekday to projected sales."]
    for raw_day, raw_sales in payload.items():
        day = normalize_day(raw_day)
        if not day:
            errors.append(f"Unknown day {raw_day!r}. Must be one of: {', '.join(WEEKDAYS)}")
            continue
        sales = parse_number(raw_sales)
        if sales is None or sales < 0:
            errors.append(f"Sales for {day} must be a non-negative number.")
            continue
        cleaned[day] = sales
    return cleaned, errors


def bulk_upsert_sales(s: "Session", cleaned: dict[str, float], user: "User") -> list["SalesProjection"]:
    from app.kitchenops.modules.sales.models import SalesProjection

    now = datetime.utcnow()
    existing = {r.day: r for r in s.query(SalesProjection).filter(SalesProjection.day.in_(list(cleaned))).all()}
    changes = {}
    for day, sales in cleaned.items():
        row = existing.get(day)
        if row is None:
            row = SalesProjection(day=day, sales=sales, updated_on=now)
            s.add(row)
            existing[day] = row
            changes[day] = {"old": None, "new": sales}
        elif row.sales != sales:
            changes[day] = {"old": row.sales, "new": sales}
            row.sales = sales
            row.updated_on = now
    s.flush()

    record_event(
        s,
        actor=user,
        action="sales.bulk_update",
        entity_type="SalesProjection",
        metadata={"changes": changes},
    )
    return [existing[d] for d in WEEKDAYS if d in existing]


def update_sales_for_day(s: "Session", day: str, sales: float, user: "User") -> "SalesProjection | None":
    """Update one weekday's baseline. Returns None when that day has never been set."""
    from app.kitchenops.modules.sales.models import SalesProjection

    row = s.query(SalesProjection).filter(SalesProjection.day == day).one_or_none()
    if row is None:
        return None
    old = row.sales
    row.sales = sales
    row.updated_on = datetime.utcnow()

    record_event(
        s,
        actor=user,
        action="sales.edit",
        entity_type="SalesProjection",
        entity_id=str(row.id),
        metadata={"day": day, "old": old, "new": sales},
    )
    return row


# ---------- Future projections ----------
def list_future_projections(s: "Session", start: date | None = None, end: date | None = None) -> list["FutureProjection"]:
    from app.kitchenops.modules.sales.models import FutureProjection

    q = s.query(FutureProjection)
    if start:
        q = q.filter(FutureProjection.date >= start)
    if end:
        q = q.filter(FutureProjection.date <= end)
    return q.order_by(FutureProjection.date.asc()).all()


def future_projection_map(s: "Session", start: date | None = None, end: date | None = None) -> dict[date, float]:
    return {p.date: float(p.amount) for p in list_future_projections(s, start, end)}


def validate_future_projection_payload(payload: dict) -> list[str]:
    errors = []
    try:
        if not parse_date(payload.get("date")):
            errors.append("Date is required.")
    except ValueError:
        errors.append("Date must be YYYY-MM-DD.")
    amount = parse_number(payload.get("amount"))
    if amount is None:
        errors.append("Amount is required.")
    elif amount < 0:
        errors.append("Amount must not be negative.")
    return errors


def upsert_future_projection(s: "Session", payload: dict, user: "User") -> "FutureProjection":
    """One projection per calendar date; posting the same date replaces the amount."""
    from app.kitchenops.modules.sales.models import FutureProjection

    d = parse_date(payload.get("date"))
    amount = parse_number(payload.get("amount"))
    now = datetime.utcnow()

    proj = s.query(FutureProjection).filter(FutureProjection.date == d).one_or_none()
    old = proj.amount if proj else None
    if proj is None:
        proj = FutureProjection(date=d, amount=amount, created_at=now, updated_at=now)
        s.add(proj)
    else:
        proj.amount = amount
        proj.updated_at = now
    s.flush()

    record_event(
        s,
        actor=user,
        action="future_projection.upsert",
        entity_type="FutureProjection",
        entity_id=str(proj.id),
        metadata={"date": d.isoformat(), "old": old, "new": amount},
    )
    return proj


def delete_future_projection(s: "Session", d: date, user: "User") -> bool:
    from app.kitchenops.modules.sales.models import FutureProjection

    proj = s.query(FutureProjection).filter(FutureProjection.date == d).one_or_none()
    if proj is None:
        return False
    record_event(
        s,
        actor=user,
        action="future_projection.delete",
        entity_type="FutureProjection",
        entity_id=str(proj.id),
        metadata={"date": d.isoformat(), "amount": proj.amount},
    )
    s.delete(proj)
    return True


# ---------- Projection config ----------
def get_projection_config(s: "Session") -> dict[str, dict[str, float]]:
    """
    Nested `{target_day: {source_day: percentage}}`.
    Falls back to the built-in thawing lead when nothing has been saved.
    """
    from app.kitchenops.modules.sales.models import SalesProjectionConfigEntry

    rows = s.query(SalesProjectionConfigEntry).all()
    if not rows:
        return {target: dict(sources) for target, sources in DEFAULT_PROJECTION_CONFIG.items()}
    config: dict[str, dict[str, float]] = {d: {} for d in WEEKDAYS}
    for r in rows:
        config.setdefault(r.target_day, {})[r.source_day] = float(r.percentage)
    return config


def validate_projection_config(payload: object) -> tuple[dict[str, dict[str, float]], list[str]]:
    errors: list[str] = []
    cleaned: dict[str, dict[str, float]] = {d: {} for d in WEEKDAYS}
    if not isinstance(payload, dict):
        return cleaned, ["Body must be an object mapping target day to source-day percentages."]
    for raw_target, sources in payload.items():
        target = normalize_day(raw_target)
        if not target:
            errors.append(f"Unknown day {raw_target!r}.")
            continue
        if sources in (None, ""):
            continue
        if not isinstance(sources, dict):
            errors.append(f"{target} must map source days to percentages.")
            continue
        for raw_source, raw_pct in sources.items():
            source = normalize_day(raw_source)
            if not source:
                errors.append(f"Unknown source day {raw_source!r} for {target}.")
                continue
            pct = parse_number(raw_pct)
            if pct is None or pct < 0 or pct > 100:
                errors.append(f"Percentage for {target} ← {source} must be between 0 and 100.")
                continue
            cleaned[target][source] = pct
    return cleaned, errors


def save_projection_config(s: "Session", cleaned: dict[str, dict[str, float]], user: "User") -> None:
    """Replace the stored config. Zero cells are stored so an all-zero day stays explicit."""
    from app.kitchenops.modules.sales.models import SalesProjectionConfigEntry

    s.query(SalesProjectionConfigEntry).delete(synchronize_session=False)
    now = datetime.utcnow()
    for target, sources in cleaned.items():
        for source, pct in sources.items():
            s.add(SalesProjectionConfigEntry(target_day=target, source_day=source, percentage=pct, updated_at=now))
    s.flush()

    record_event(
        s,
        actor=user,
        action="sales_projection_config.save",
        entity_type="SalesProjectionConfig",
        metadata={"config": cleaned},
    )


def load_sales_lookup(s: "Session", start: date | None = None, end: date | None = None):
    from app.kitchenops.modules.sales.lookup import SalesLookup

    return SalesLookup(baseline=weekly_baseline(s), future=future_projection_map(s, start, end))
