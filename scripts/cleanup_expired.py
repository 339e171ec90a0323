"""
Delete expired manual adjustments and closure plans that have ended.

Meant to run on a schedule (hourly is plenty):
  python scripts/cleanup_expired.py
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import date, datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Importing models registers every table on Base.metadata.
import app.kitchenops.models  # noqa: F401
from app.kitchenops.modules.adjustments.service import cleanup_expired_adjustments
from app.kitchenops.modules.closures.service import cleanup_ended_closures
from scripts._db_utils import script_session

logger = logging.getLogger("kitchenops.cleanup")


def run_cleanup(*, database_url: str | None = None, now: datetime | None = None) -> dict[str, int]:
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///kitchenops.db").strip()
    now = now or datetime.utcnow()
    today: date = now.date()

    with script_session(db_url) as s:
        adjustments = cleanup_expired_adjustments(s, now)
        closures = cleanup_ended_closures(s, today)

    logger.info("Cleaned up %d expired adjustments and %d ended closure plans", adjustments, closures)
    return {"adjustments": adjustments, "closures": closures}


def main() -> None:
    logging.basicConfig(level=(os.environ.get("LOG_LEVEL") or "INFO").strip().upper())
    run_cleanup()


if __name__ == "__main__":
    main()
