from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from app.kitchenops.utils import day_name, iter_dates


@dataclass
class SalesLookup:
    """
    Projected sales per calendar date.

    A future projection for the exact date wins; otherwise the weekly baseline
    for that weekday is used; otherwise 0.
    """

    baseline: dict[str, float] = field(default_factory=dict)
    future: dict[date, float] = field(default_factory=dict)

    def for_date(self, d: date) -> float:
        if d in self.future:
            return float(self.future[d])
        return float(self.baseline.get(day_name(d)) or 0)

    def is_future(self, d: date) -> bool:
        return d in self.future

    def line(self, d: date, percentage: float = 100) -> dict:
        """One entry of a board's sales calculation breakdown."""
        amount = self.for_date(d)
        return {
            "day": day_name(d),
            "date": d.isoformat(),
            "percentage": percentage,
            "amount": amount,
            "contribution": amount * percentage / 100,
            "is_from_future_projection": self.is_future(d),
        }

    def total(self, start: date, end: date) -> float:
        return sum(self.for_date(d) for d in iter_dates(start, end))
