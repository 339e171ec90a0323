from __future__ import annotations

import io
from dataclasses import dataclass

from openpyxl import load_workbook

from app.kitchenops.constants import (
    FILETS,
    GRILLED_FILETS,
    GRILLED_NUGGETS,
    NUGGETS,
    SPICY_FILETS,
    SPICY_STRIPS,
    THAWING_PRODUCTS,
)
from app.kitchenops.utils import parse_number

# Sales-mix export layout (1-based columns): B = item name, S = "# sold per 1000".
NAME_COLUMN = 2
PER_THOUSAND_COLUMN = 19

# Sandwiches and salads use one filet each.
_SINGLE_FILET_ITEMS: dict[str, tuple[str, ...]] = {
    FILETS: (
        "CAN Sandwich - CFA Dlx w/ Proc Ched",
        "CAN Sandwich - CFA Dlx w/ Ched",
        "CAN Sandwich - CFA Dlx w/ Jack",
        "Sandwich - CFA",
        "Sandwich - CFA Dlx No Cheese",
        "Salad - Signature Cobb w/ CFA Filet",
        "Salad - Spicy SW w/ CFA Filet",
    ),
    SPICY_FILETS: (
        "CAN Sandwich - Spicy Dlx w/ Proc Ched",
        "CAN Sandwich - Spicy Dlx w/ Ched",
        "CAN Sandwich - Spicy Dlx w/ Jack",
        "Sandwich - Spicy Chicken",
        "Sandwich - Spicy Dlx No Cheese",
        "Salad - Signature Cobb w/ Spicy Filet",
        "Salad - Spicy SW w/ Spicy Filet",
    ),
    GRILLED_FILETS: (
        "CAN Sandwich - Grilled Club w/ Cheddar",
        "CAN Sandwich - Grilled Club w/ Jack",
        "CAN Sandwich - Grilled Club w/ Proc Ched",
        "Sandwich - Grilled",
        "Sandwich - Grilled Club w/No Cheese",
        "Salad - Signature Cobb w/ Hot Grilled Filet",
        "Salad - Spicy SW w/ Hot Grld Filet",
        "Test - Salad - Signature Cobb w/Spicy",
    ),
}

# Nugget and strip items count their pieces.
_PIECE_COUNT_ITEMS: dict[str, dict[str, int]] = {
    GRILLED_NUGGETS: {
        "Nuggets Grilled, 12 Count": 12,
        "Nuggets Grilled, 8 Count": 8,
        "Nuggets Grilled, 5 Count": 5,
        "Salad - Spicy SW w/ Grld Nuggets": 8,
        "Salad – Signature Cobb w/ Grilled Nuggets": 8,
    },
    NUGGETS: {
        "Nuggets, 12 Count": 12,
        "Nuggets, 8 Count": 8,
        "Nuggets, 30 Count": 30,
        "Nuggets, 5 Count": 5,
        "Salad - Signature Cobb w/ Nuggets": 8,
        "Salad - Spicy SW w/ Nuggets": 8,
    },
    SPICY_STRIPS: {
        "CAN - Salad - Extra Spicy Strips": 1,
        "Test - Spicy Strips, 3 Count": 3,
        "Test - Spicy Strips, 4 Count": 4,
    },
}


@dataclass(frozen=True)
class SalesMixSummary:
    items: dict[str, float]
    rows_read: int
    rows_skipped: int


def parse_salesmix_xlsx(file_bytes: bytes) -> SalesMixSummary:
    """
    Parse a sales-mix report exported as .xlsx.

    Only the first worksheet is read. Rows without an item name in column B
    or without a numeric value in column S (headers, section titles, totals
    spacers) are skipped. A name that appears twice keeps the sum.

    Raises ValueError when the file is not a readable workbook.
    """
    try:
        wb = load_workbook(io.BytesIO(file_bytes), read_only=True, data_only=True)
    except Exception as e:
        raise ValueError(f"Could not read workbook: {e}") from e

    items: dict[str, float] = {}
    read = skipped = 0
    try:
        ws = wb.worksheets[0]
        for row in ws.iter_rows(min_col=NAME_COLUMN, max_col=PER_THOUSAND_COLUMN, values_only=True):
            read += 1
            name = str(row[0]).strip() if row and row[0] is not None else ""
            value = parse_number(row[-1]) if len(row) >= PER_THOUSAND_COLUMN - NAME_COLUMN + 1 else None
            if not name or value is None:
                skipped += 1
                continue
            items[name] = items.get(name, 0.0) + value
    finally:
        wb.close()

    return SalesMixSummary(items=items, rows_read=read, rows_skipped=skipped)


def rollup_thawing_upts(mix: dict[str, float]) -> dict[str, float]:
    """Fold menu-item sales-mix figures into UPTs for the thawing products."""
    totals = {p: 0.0 for p in THAWING_PRODUCTS}
    for product, names in _SINGLE_FILET_ITEMS.items():
        totals[product] += sum(float(mix.get(n) or 0) for n in names)
    for product, counts in _PIECE_COUNT_ITEMS.items():
        totals[product] += sum(float(mix.get(n) or 0) * pieces for n, pieces in counts.items())
    return {p: round(v, 4) for p, v in totals.items()}
