"""
Central constants for the kitchen operations service.
"""
from __future__ import annotations

# Board days. The store does not trade on Sunday.
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
ALL_DAYS = WEEKDAYS + ("Sunday",)

# Thawing cabinet products
FILETS = "Filets"
SPICY_FILETS = "Spicy Filets"
GRILLED_FILETS = "Grilled Filets"
GRILLED_NUGGETS = "Grilled Nuggets"
NUGGETS = "Nuggets"
SPICY_STRIPS = "Spicy Strips"

THAWING_PRODUCTS = (FILETS, SPICY_FILETS, GRILLED_FILETS, GRILLED_NUGGETS, NUGGETS, SPICY_STRIPS)

# Prep products
LETTUCE = "Lettuce"
ROMAINE = "Romaine"
TOMATO = "Tomato"
COBB_SALAD = "Cobb Salad"
SOUTHWEST_SALAD = "Southwest Salad"
LEMONADE = "Lemonade"
DIET_LEMONADE = "Diet Lemonade"
SUNJOY_LEMONADE = "Sunjoy Lemonade"

PREP_PRODUCTS = (
    LETTUCE,
    ROMAINE,
    TOMATO,
    COBB_SALAD,
    SOUTHWEST_SALAD,
    LEMONADE,
    DIET_LEMONADE,
    SUNJOY_LEMONADE,
)

ALL_PRODUCTS = THAWING_PRODUCTS + PREP_PRODUCTS

# Instructions carrying this tag belong on the prep board.
PREP_TAG = "[PREP]"

DEFAULT_UTP = 1.0
# Applied when neither a daily nor a global buffer is stored for a product.
DEFAULT_BUFFER_PERCENT = 1.0
BAGS_PER_CASE = 6

# Thawing lead: which weekday's sales drive each board day's thaw.
DEFAULT_PROJECTION_CONFIG: dict[str, dict[str, float]] = {
    "Monday": {"Wednesday": 100},
    "Tuesday": {"Thursday": 100},
    "Wednesday": {"Friday": 100},
    "Thursday": {"Saturday": 100},
    "Friday": {"Saturday": 100},
    "Saturday": {"Monday": 100},
}

CLOSURE_UNITS = ("days", "weeks")
MAX_CLOSURE_DAYS = 366
MAX_ADJUSTMENT_SECONDS = 30 * 24 * 60 * 60
STORAGE_TYPES = ("dry", "refrigerated", "frozen")
PRIORITY_LEVELS = ("critical", "high", "medium", "low")
