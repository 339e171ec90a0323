"""
Release step: migrate the schema, make sure an admin can log in, purge stale rows.

Usage:
  python scripts/release.py
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402

from scripts import init_db  # noqa: E402
from scripts.cleanup_expired import run_cleanup  # noqa: E402

logger = logging.getLogger("kitchenops.release")


def _alembic_config(db_url: str) -> Config:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def run_release(*, database_url: str | None = None) -> None:
    db_url = (database_url or os.environ.get("DATABASE_URL") or "").strip()
    if not db_url:
        raise RuntimeError("DATABASE_URL is required for a release.")
    env = (os.environ.get("ENV") or "").strip().lower()
    if env in ("prod", "production") and db_url.startswith("sqlite"):
        raise RuntimeError("Refusing to release against a sqlite DATABASE_URL in production.")

    command.upgrade(_alembic_config(db_url), "head")
    logger.info("Schema at head")
    init_db.seed_only(database_url=db_url)
    run_cleanup(database_url=db_url)


def main() -> None:
    logging.basicConfig(level=(os.environ.get("LOG_LEVEL") or "INFO").strip().upper())
    run_release()


if __name__ == "__main__":
    main()
