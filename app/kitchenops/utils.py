from __future__ import annotations

import math
from datetime import date, datetime, timedelta

from flask import abort, request

from app.kitchenops.constants import ALL_DAYS, WEEKDAYS


def json_object_body() -> dict:
    """The request's JSON body as a dict. Missing or unparsable bodies are {}; other JSON values abort 400."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        abort(400, description="Request body must be a JSON object.")
    return body


def clean_text(value: object) -> str:
    return str(value).strip() if value is not None else ""


def parse_date(s: object) -> date | None:
    """Parse a YYYY-MM-DD string (or the date part of an ISO timestamp)."""
    if s is None:
        return None
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    text = str(s).strip()
    if not text:
        return None
    return date.fromisoformat(text[:10])


def parse_number(value: object) -> float | None:
    """Lenient numeric parse for JSON payload values. Returns None when absent or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = str(value).strip().replace(",", "").replace("$", "")
    if not text:
        return None
    try:
        num = float(text)
    except ValueError:
        return None
    return num if math.isfinite(num) else None


def parse_flag(value: object) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


def normalize_day(value: object, *, allow_sunday: bool = False) -> str | None:
    """Case-insensitive weekday name → canonical name, or None."""
    text = str(value or "").strip().lower()
    days = ALL_DAYS if allow_sunday else WEEKDAYS
    for d in days:
        if d.lower() == text:
            return d
    return None


def day_name(d: date) -> str:
    return ALL_DAYS[d.weekday()]


def round_half_up(x: float) -> int:
    """Round .5 upward; round() would round half to even."""
    return int(math.floor(x + 0.5))


def week_start(as_of: date) -> date:
    """Monday of the board week containing as_of; Sunday looks ahead to the coming week."""
    if as_of.weekday() == 6:
        return as_of + timedelta(days=1)
    return as_of - timedelta(days=as_of.weekday())


def calendar_week(as_of: date) -> tuple[date, date]:
    """Sunday..Saturday week containing as_of (ordering window for truck items)."""
    start = as_of - timedelta(days=(as_of.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def iter_dates(start: date, end: date):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)

