"""
Order-guide math for truck items. Plain values in, plain values out.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Protocol


class _Association(Protocol):
    name: str
    usage: float


@dataclass(frozen=True)
class ParsedUom:
    total_units: float
    unit_type: str


@dataclass(frozen=True)
class Usage:
    projected_sales: float
    total_usage: float
    exact_cases: float
    cases_needed: int

    def to_dict(self) -> dict:
        return {
            "projectedSales": self.projected_sales,
            "totalUsage": self.total_usage,
            "exactCases": self.exact_cases,
            "casesNeeded": self.cases_needed,
        }


def parse_uom(uom: str | None) -> ParsedUom | None:
    """
    Units per case from a UOM label.

    "2/5 Lb Ct Case" -> 10 (two packs of five); "1000 Ct case" -> 1000.
    Returns None when the leading token is not a number or an a/b pair.
    """
    text = (uom or "").strip()
    if not text:
        return None
    head = text.split()[0]
    try:
        if "/" in head:
            a, b = head.split("/", 1)
            total = float(a) * float(b)
        else:
            total = float(head)
    except ValueError:
        return None
    if not math.isfinite(total) or total <= 0:
        return None
    return ParsedUom(total_units=total, unit_type="ct")


def calculate_usage(
    total_units: float,
    associations: Iterable[_Association],
    sales_mix: dict[str, float],
    projected_sales: float,
) -> Usage:
    """Cases needed to cover projected_sales, given how much each associated menu item uses."""
    associations = list(associations)
    if not associations:
        return Usage(projected_sales=0.0, total_usage=0.0, exact_cases=0.0, cases_needed=0)

    total_usage = sum(
        float(sales_mix.get(a.name) or 0) * projected_sales * float(a.usage) / 1000 for a in associations
    )
    exact = total_usage / total_units if total_units else 0.0
    return Usage(
        projected_sales=projected_sales,
        total_usage=total_usage,
        exact_cases=exact,
        cases_needed=math.ceil(exact),
    )


def reorder_point(avg_daily_usage: float | None, lead_time: int | None, min_par_level: float | None) -> float:
    return (avg_daily_usage or 0) * (lead_time or 1) + (min_par_level or 0)


def needs_reorder(on_hand_qty: float | None, point: float) -> bool:
    return (on_hand_qty or 0) <= point


def order_quantity(max_par_level: float | None, on_hand_qty: float | None) -> float:
    if not max_par_level:
        return 0
    return max(0, max_par_level - (on_hand_qty or 0))
