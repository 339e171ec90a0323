from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.kitchenops.audit import record_event
from app.kitchenops.utils import parse_date, parse_number

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kitchenops.models import User
    from app.kitchenops.modules.upt.models import SalesMix, UptValue


def list_upts(s: "Session") -> list["UptValue"]:
    from app.kitchenops.modules.upt.models import UptValue

    return s.query(UptValue).order_by(UptValue.product_name.asc()).all()


def upt_map(s: "Session") -> dict[str, float]:
    return {u.product_name: float(u.utp) for u in list_upts(s)}


def validate_bulk_upts(payload: object) -> tuple[dict[str, float], list[str]]:
    errors: list[str] = []
    cleaned: dict[str, float] = {}
    if not isinstance(payload, dict) or not payload:
        return cleaned, ["Body must be an object mapping product name to UPT."]
    for raw_name, raw_utp in payload.items():
        name = str(raw_name or "").strip()
        if not name:
            errors.append("Product name is required.")
            continue
        utp = parse_number(raw_utp)
        if utp is None or utp < 0:
            errors.append(f"UPT for {name} must be a non-negative number.")
            continue
        cleaned[name] = utp
    return cleaned, errors


def bulk_upsert_upts(s: "Session", cleaned: dict[str, float], user: "User") -> list["UptValue"]:
    from app.kitchenops.modules.upt.models import UptValue

    now = datetime.utcnow()
    existing = {u.product_name: u for u in s.query(UptValue).filter(UptValue.product_name.in_(list(cleaned))).all()}
    changes = {}
    for name, utp in cleaned.items():
        row = existing.get(name)
        if row is None:
            row = UptValue(product_name=name, utp=utp, old_utp=None, updated_at=now)
            s.add(row)
            existing[name] = row
            changes[name] = {"old": None, "new": utp}
        elif row.utp != utp:
            changes[name] = {"old": row.utp, "new": utp}
            row.old_utp = row.utp
            row.utp = utp
            row.updated_at = now
    s.flush()

    record_event(
        s,
        actor=user,
        action="upt.bulk_update",
        entity_type="UptValue",
        metadata={"changes": changes},
    )
    return [existing[n] for n in cleaned]


# ---------- Sales mix ----------
def current_sales_mix(s: "Session") -> "SalesMix | None":
    from app.kitchenops.modules.upt.models import SalesMix

    return s.query(SalesMix).order_by(SalesMix.upload_date.desc(), SalesMix.id.desc()).first()


def validate_sales_mix_payload(payload: dict) -> list[str]:
    errors = []
    data = payload.get("data")
    if not isinstance(data, dict) or not data:
        errors.append("Sales mix data is required.")
    else:
        bad = [k for k, v in data.items() if parse_number(v) is None]
        if bad:
            errors.append(f"Non-numeric sales mix values for: {', '.join(sorted(bad)[:5])}")

    period = payload.get("reportingPeriod") or {}
    if not isinstance(period, dict):
        period = {}
    try:
        start = parse_date(period.get("startDate"))
        end = parse_date(period.get("endDate"))
    except ValueError:
        errors.append("Reporting period dates must be YYYY-MM-DD.")
    else:
        if not start or not end:
            errors.append("Reporting period start and end dates are required.")
        elif end < start:
            errors.append("Reporting period end must not be before start.")
    return errors


def save_sales_mix(s: "Session", payload: dict, user: "User") -> "SalesMix":
    """Store a new report. Only the latest report is kept."""
    from app.kitchenops.modules.upt.models import SalesMix

    period = payload["reportingPeriod"]
    data = {str(k).strip(): parse_number(v) for k, v in payload["data"].items()}

    removed = s.query(SalesMix).delete(synchronize_session=False)
    mix = SalesMix(
        data=data,
        upload_date=datetime.utcnow(),
        period_start=parse_date(period["startDate"]),
        period_end=parse_date(period["endDate"]),
    )
    s.add(mix)
    s.flush()

    record_event(
        s,
        actor=user,
        action="sales_mix.upload",
        entity_type="SalesMix",
        entity_id=str(mix.id),
        metadata={
            "items": len(data),
            "replaced": removed,
            "period_start": mix.period_start,
            "period_end": mix.period_end,
        },
    )
    return mix
