from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Callable

from app.kitchenops.audit import record_event
from app.kitchenops.constants import PRIORITY_LEVELS, STORAGE_TYPES
from app.kitchenops.modules.truck.utils import (
    calculate_usage,
    needs_reorder,
    order_quantity,
    parse_uom,
    reorder_point,
)
from app.kitchenops.utils import clean_text, parse_date, parse_number

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kitchenops.models import User
    from app.kitchenops.modules.sales.lookup import SalesLookup
    from app.kitchenops.modules.truck.models import TruckItem


def _text(v: object) -> str | None:
    return (str(v).strip() or None) if v is not None else None


def _int(v: object) -> int | None:
    n = parse_number(v)
    return int(n) if n is not None else None


# payload key -> (attribute, parser)
_FIELDS: dict[str, tuple[str, Callable[[object], object]]] = {
    "description": ("description", _text),
    "uom": ("uom", _text),
    "totalUnits": ("total_units", parse_number),
    "unitType": ("unit_type", _text),
    "cost": ("cost", parse_number),
    "minParLevel": ("min_par_level", parse_number),
    "maxParLevel": ("max_par_level", parse_number),
    "onHandQty": ("on_hand_qty", parse_number),
    "leadTime": ("lead_time", _int),
    "storageType": ("storage_type", _text),
    "storageLocation": ("storage_location", _text),
    "shelfLife": ("shelf_life", _int),
    "priorityLevel": ("priority_level", _text),
    "avgDailyUsage": ("avg_daily_usage", parse_number),
    "wastePercentage": ("waste_percentage", parse_number),
    "lastOrderDate": ("last_order_date", parse_date),
    "lastOrderQuantity": ("last_order_quantity", parse_number),
    "lastOrderPrice": ("last_order_price", parse_number),
    "nextScheduledDelivery": ("next_scheduled_delivery", parse_date),
    "notes": ("notes", _text),
}

_REQUIRED_ON_CREATE = ("description", "uom", "cost")
_NOT_NULL = {"on_hand_qty": 0, "avg_daily_usage": 0, "waste_percentage": 0, "storage_type": "dry", "priority_level": "medium"}


def validate_truck_item_payload(payload: dict, *, partial: bool = False) -> list[str]:
    errors = []
    if not partial:
        for key in _REQUIRED_ON_CREATE:
            if payload.get(key) in (None, ""):
                errors.append(f"{key} is required.")

    for key, (_, parser) in _FIELDS.items():
        if payload.get(key) in (None, ""):
            continue
        try:
            value = parser(payload[key])
        except ValueError:
            errors.append(f"{key} must be a date (YYYY-MM-DD).")
            continue
        if value is None:
            errors.append(f"{key} is not valid.")

    if payload.get("storageType") and payload["storageType"] not in STORAGE_TYPES:
        errors.append(f"storageType must be one of: {', '.join(STORAGE_TYPES)}")
    if payload.get("priorityLevel") and payload["priorityLevel"] not in PRIORITY_LEVELS:
        errors.append(f"priorityLevel must be one of: {', '.join(PRIORITY_LEVELS)}")

    total_units = parse_number(payload.get("totalUnits"))
    if total_units is not None and total_units <= 0:
        errors.append("totalUnits must be greater than 0.")
    elif not partial and total_units is None and payload.get("uom") and parse_uom(payload["uom"]) is None:
        errors.append("totalUnits is required when the UOM cannot be parsed.")

    assoc = payload.get("associatedItems")
    if assoc is not None:
        if not isinstance(assoc, list):
            errors.append("associatedItems must be a list.")
        else:
            for idx, a in enumerate(assoc):
                if not isinstance(a, dict) or not clean_text(a.get("name")):
                    errors.append(f"associatedItems[{idx}]: name is required.")
                    continue
                if parse_number(a.get("usage")) is None:
                    errors.append(f"associatedItems[{idx}]: usage must be a number.")
                if not clean_text(a.get("unit")):
                    errors.append(f"associatedItems[{idx}]: unit is required.")
    return errors


def _set_associations(item: "TruckItem", raw: list[dict]) -> None:
    from app.kitchenops.modules.truck.models import TruckItemAssociation

    item.associated_items = [
        TruckItemAssociation(name=clean_text(a["name"]), usage=parse_number(a["usage"]), unit=clean_text(a["unit"]))
        for a in raw
    ]


def list_truck_items(s: "Session") -> list["TruckItem"]:
    from app.kitchenops.modules.truck.models import TruckItem

    return s.query(TruckItem).order_by(TruckItem.description.asc(), TruckItem.id.asc()).all()


def create_truck_item(s: "Session", payload: dict, user: "User") -> "TruckItem":
    from app.kitchenops.modules.truck.models import TruckItem

    values = {attr: parser(payload.get(key)) for key, (attr, parser) in _FIELDS.items() if payload.get(key) not in (None, "")}
    parsed = parse_uom(values.get("uom"))
    if values.get("total_units") is None and parsed:
        values["total_units"] = parsed.total_units
    if not values.get("unit_type"):
        values["unit_type"] = parsed.unit_type if parsed else "ct"
    for attr, default in _NOT_NULL.items():
        values.setdefault(attr, default)

    now = datetime.utcnow()
    item = TruckItem(**values, created_at=now, updated_at=now)
    _set_associations(item, payload.get("associatedItems") or [])
    s.add(item)
    s.flush()

    record_event(
        s,
        actor=user,
        action="truck_item.create",
        entity_type="TruckItem",
        entity_id=str(item.id),
        metadata={"description": item.description, "associations": len(item.associated_items)},
    )
    return item


def update_truck_item(s: "Session", item: "TruckItem", payload: dict, user: "User") -> "TruckItem":
    """Partial update: only keys present in the payload change."""
    changes = {}
    for key, (attr, parser) in _FIELDS.items():
        if key not in payload:
            continue
        new = parser(payload[key]) if payload[key] not in (None, "") else None
        if new is None and attr in _NOT_NULL:
            new = _NOT_NULL[attr]
        if new is None and attr in ("description", "uom", "total_units", "unit_type", "cost"):
            continue
        old = getattr(item, attr)
        if old != new:
            changes[attr] = {"old": old, "new": new}
            setattr(item, attr, new)

    if "associatedItems" in payload:
        old_assoc = [a.to_dict() for a in item.associated_items]
        _set_associations(item, payload.get("associatedItems") or [])
        new_assoc = [a.to_dict() for a in item.associated_items]
        if old_assoc != new_assoc:
            changes["associated_items"] = {"old": old_assoc, "new": new_assoc}

    item.updated_at = datetime.utcnow()

    if changes:
        record_event(
            s,
            actor=user,
            action="truck_item.update",
            entity_type="TruckItem",
            entity_id=str(item.id),
            metadata={"changes": changes},
        )
    return item


def delete_truck_item(s: "Session", item: "TruckItem", user: "User") -> None:
    record_event(
        s,
        actor=user,
        action="truck_item.delete",
        entity_type="TruckItem",
        entity_id=str(item.id),
        metadata={"description": item.description},
    )
    s.delete(item)


def order_guide(
    items: list["TruckItem"],
    sales_mix: dict[str, float],
    sales: "SalesLookup",
    start: date,
    end: date,
) -> dict:
    """Cases needed per truck item for [start, end], plus reorder information."""
    projected = sales.total(start, end)
    rows = []
    for item in items:
        usage = calculate_usage(item.total_units, item.associated_items, sales_mix, projected)
        point = reorder_point(item.avg_daily_usage, item.lead_time, item.min_par_level)
        rows.append(
            {
                "item": item.to_dict(),
                "usage": usage.to_dict(),
                "missingSalesMix": sorted(a.name for a in item.associated_items if not sales_mix.get(a.name)),
                "reorderPoint": point,
                "needsReorder": needs_reorder(item.on_hand_qty, point),
                "orderQuantity": order_quantity(item.max_par_level, item.on_hand_qty),
            }
        )
    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "projectedSales": projected,
        "items": rows,
    }
