"""
Thawing-cabinet and prep allocation boards.

Everything here works on plain values: the API layer loads records and
converts them to the small dataclasses below, so the boards can be computed
(and tested) without an app or a database.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from app.kitchenops.constants import (
    BAGS_PER_CASE,
    COBB_SALAD,
    DEFAULT_BUFFER_PERCENT,
    DEFAULT_PROJECTION_CONFIG,
    DEFAULT_UTP,
    DIET_LEMONADE,
    FILETS,
    GRILLED_FILETS,
    GRILLED_NUGGETS,
    LEMONADE,
    LETTUCE,
    NUGGETS,
    PREP_TAG,
    ROMAINE,
    SOUTHWEST_SALAD,
    SPICY_FILETS,
    SPICY_STRIPS,
    SUNJOY_LEMONADE,
    TOMATO,
    WEEKDAYS,
)
from app.kitchenops.modules.sales.lookup import SalesLookup
from app.kitchenops.utils import round_half_up, week_start

# Servings per container and whether the container is a bag (6 per case).
THAWING_SPECS: dict[str, tuple[float, bool]] = {
    FILETS: (158, False),
    SPICY_FILETS: (141, False),
    GRILLED_FILETS: (26, True),
    GRILLED_NUGGETS: (189, True),
    NUGGETS: (1132, False),
    SPICY_STRIPS: (53, True),
}

# Servings per pan; rounded half-up.
PAN_DIVISORS: dict[str, float] = {
    LETTUCE: 144,
    TOMATO: 166,
    ROMAINE: 2585.48,
}

SALAD_TRAY_SIZES: dict[str, int] = {
    COBB_SALAD: 8,
    SOUTHWEST_SALAD: 6,
}

LEMONADES = (LEMONADE, DIET_LEMONADE, SUNJOY_LEMONADE)
OUNCES_PER_LITER = 33.814
BUCKET_QUARTS = 12

THAWING_UNITS = ("cases", "bags")
PREP_UNITS = ("pans", "buckets")

_ADJUSTMENT_PART = re.compile(r"^([+-]?\d+)")


@dataclass(frozen=True)
class AdjustmentNote:
    day: str
    product: str
    message: str


@dataclass(frozen=True)
class Closure:
    start: date
    end: date
    reason: str

    def covers(self, d: date) -> bool:
        return self.start <= d <= self.end


@dataclass(frozen=True)
class Note:
    day: str
    message: str
    products: tuple[str, ...] = ()


@dataclass
class BoardInputs:
    sales: SalesLookup
    upts: dict[str, float] = field(default_factory=dict)
    global_buffers: dict[str, float] = field(default_factory=dict)
    daily_buffers: dict[tuple[str, str], float] = field(default_factory=dict)
    adjustments: list[AdjustmentNote] = field(default_factory=list)
    closures: list[Closure] = field(default_factory=list)
    instructions: list[Note] = field(default_factory=list)
    projection_config: dict[str, dict[str, float]] | None = None


# ---------- Shared rules ----------
def utp_for(upts: dict[str, float], product: str) -> float:
    value = upts.get(product)
    return float(value) if value is not None else DEFAULT_UTP


def buffer_multiplier(inputs: BoardInputs, day: str, product: str) -> float:
    """Daily override wins over the global buffer; a stored 0 means no buffer, nothing stored means 1%."""
    pct = inputs.daily_buffers.get((day, product))
    if pct is None:
        pct = inputs.global_buffers.get(product)
    if pct is None:
        pct = DEFAULT_BUFFER_PERCENT
    return (100 + float(pct)) / 100


def parse_adjustment(message: str, units: Iterable[str]) -> dict[str, int]:
    """
    "+2 cases and -1 bags" -> {"cases": 2, "bags": -1}.
    Parts with an unknown unit or no leading integer are ignored.
    """
    allowed = set(units)
    deltas: dict[str, int] = {}
    for part in (message or "").split(" and "):
        tokens = part.strip().split()
        if len(tokens) < 2:
            continue
        m = _ADJUSTMENT_PART.match(tokens[0])
        if not m or tokens[1] not in allowed:
            continue
        deltas[tokens[1]] = deltas.get(tokens[1], 0) + int(m.group(1))
    return deltas


def apply_adjustments(
    quantities: dict[str, int],
    adjustments: list[AdjustmentNote],
    day: str,
    product: str,
    units: Iterable[str],
) -> tuple[dict[str, int], bool]:
    """Add every matching adjustment's deltas; results never go below 0."""
    units = tuple(units)
    matching = [a for a in adjustments if a.day == day and a.product == product]
    result = dict(quantities)
    for adj in matching:
        for unit, delta in parse_adjustment(adj.message, units).items():
            result[unit] = result.get(unit, 0) + delta
    return {k: max(0, v) for k, v in result.items()}, bool(matching)


def closure_for(closures: list[Closure], d: date) -> Closure | None:
    for c in closures:
        if c.covers(d):
            return c
    return None


def board_notes(instructions: list[Note], day: str, *, prep: bool) -> list[Note]:
    """Instructions for one board: [PREP]-tagged ones (tag stripped) or the untagged ones."""
    out = []
    for n in instructions:
        if n.day != day:
            continue
        text = n.message.lstrip()
        tagged = text.startswith(PREP_TAG)
        if tagged != prep:
            continue
        if prep:
            text = text[len(PREP_TAG):].strip()
        out.append(Note(day=n.day, message=text, products=n.products))
    return out


def _board_dates(as_of: date, next_week: bool) -> list[tuple[str, date]]:
    start = week_start(as_of) + timedelta(days=7 if next_week else 0)
    return [(day, start + timedelta(days=i)) for i, day in enumerate(WEEKDAYS)]


def _next_weekday_after(d: date, weekday_name: str) -> date:
    target = WEEKDAYS.index(weekday_name) if weekday_name in WEEKDAYS else 6
    ahead = (target - d.weekday()) % 7 or 7
    return d + timedelta(days=ahead)


def _product_entry(quantities: dict[str, int], modified: bool, notes: list[Note], product: str) -> dict:
    return {
        **quantities,
        "modified": modified,
        "instructions": [n.message for n in notes if product in n.products],
    }


def _day_shell(day: str, d: date, as_of: date, sales: float, lines: list[dict], notes: list[Note]) -> dict:
    return {
        "day": day,
        "date": d.isoformat(),
        "is_today": d == as_of,
        "sales": sales,
        "sales_calculation": lines,
        "notes": [n.message for n in notes if not n.products],
        "closed": None,
        "products": {},
    }


# ---------- Thawing ----------
def thawing_sales(inputs: BoardInputs, day: str, d: date) -> tuple[float, list[dict]]:
    """Sales driving the thaw on board day `day`, with one calculation line per source day."""
    config = inputs.projection_config or DEFAULT_PROJECTION_CONFIG
    lines = []
    for source_day, pct in (config.get(day) or {}).items():
        if not pct:
            continue
        lines.append(inputs.sales.line(_next_weekday_after(d, source_day), float(pct)))
    return sum(line["contribution"] for line in lines), lines


def thawing_quantities(utp: float, sales: float, multiplier: float, product: str) -> dict[str, int]:
    servings, bagged = THAWING_SPECS[product]
    count = math.ceil(utp * sales / 1000 / servings * multiplier)
    if bagged:
        return {"cases": count // BAGS_PER_CASE, "bags": count % BAGS_PER_CASE}
    return {"cases": count, "bags": 0}


def thawing_board(inputs: BoardInputs, as_of: date, *, next_week: bool = False) -> list[dict]:
    board = []
    for day, d in _board_dates(as_of, next_week):
        sales, lines = thawing_sales(inputs, day, d)
        notes = board_notes(inputs.instructions, day, prep=False)
        entry = _day_shell(day, d, as_of, sales, lines, notes)

        closure = closure_for(inputs.closures, d)
        if closure:
            entry["closed"] = {"reason": closure.reason}
            board.append(entry)
            continue

        for product in THAWING_SPECS:
            base = thawing_quantities(
                utp_for(inputs.upts, product), sales, buffer_multiplier(inputs, day, product), product
            )
            qty, modified = apply_adjustments(base, inputs.adjustments, day, product, THAWING_UNITS)
            entry["products"][product] = _product_entry(qty, modified, notes, product)
        board.append(entry)
    return board


# ---------- Prep ----------
def prep_quantities(utp: float, sales: float, multiplier: float, product: str, day: str) -> dict[str, int]:
    if product in PAN_DIVISORS:
        return {"pans": round_half_up(utp * sales / 1000 / PAN_DIVISORS[product] * multiplier), "buckets": 0}
    if product in SALAD_TRAY_SIZES:
        return {"pans": round_half_up(utp * sales / 1000 * multiplier), "buckets": 0}
    if product in LEMONADES:
        drink = 1.0 if day == "Saturday" else 0.75
        buckets = math.ceil((utp / OUNCES_PER_LITER) * (sales * drink) / 1000 / BUCKET_QUARTS * multiplier)
        return {"pans": 0, "buckets": buckets}
    raise KeyError(product)


PREP_ORDER = (LETTUCE, ROMAINE, TOMATO, LEMONADE, DIET_LEMONADE, SUNJOY_LEMONADE, COBB_SALAD, SOUTHWEST_SALAD)


def prep_board(inputs: BoardInputs, as_of: date, *, next_week: bool = False) -> list[dict]:
    board = []
    for day, d in _board_dates(as_of, next_week):
        line = inputs.sales.line(d)
        notes = board_notes(inputs.instructions, day, prep=True)
        entry = _day_shell(day, d, as_of, line["amount"], [line], notes)

        closure = closure_for(inputs.closures, d)
        if closure:
            entry["closed"] = {"reason": closure.reason}
            board.append(entry)
            continue

        for product in PREP_ORDER:
            base = prep_quantities(
                utp_for(inputs.upts, product), line["amount"], buffer_multiplier(inputs, day, product), product, day
            )
            qty, modified = apply_adjustments(base, inputs.adjustments, day, product, PREP_UNITS)
            product_entry = _product_entry(qty, modified, notes, product)
            if product in SALAD_TRAY_SIZES:
                product_entry["salads"] = qty["pans"]
                product_entry["trays"] = round_half_up(qty["pans"] / SALAD_TRAY_SIZES[product])
            entry["products"][product] = product_entry
        board.append(entry)
    return board
