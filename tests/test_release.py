"""Tests for the release script."""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import Session

from app.kitchenops.modules.adjustments.models import Adjustment
from app.kitchenops.models import User
from scripts.release import run_release


def test_release_migrates_seeds_and_purges(tmp_path, monkeypatch):
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("ADMIN_USERNAME", "owner")
    monkeypatch.setenv("ADMIN_PIN", "2468")
    db_url = f"sqlite:///{tmp_path/'release.db'}"

    run_release(database_url=db_url)

    engine = create_engine(db_url, future=True)
    tables = set(inspect(engine).get_table_names())
    assert {"alembic_version", "users", "adjustments", "truck_item_associations"} <= tables

    with Session(engine) as s:
        s.add(Adjustment(day="Monday", product="Filets", message="+1 cases", expires_at=datetime.utcnow() - timedelta(minutes=5)))
        s.commit()

    # A second release is a no-op apart from purging stale rows.
    run_release(database_url=db_url)

    with Session(engine) as s:
        owners = s.query(User).filter(User.username == "owner").all()
        assert len(owners) == 1
        assert owners[0].is_admin
        assert s.query(Adjustment).count() == 0
    engine.dispose()


def test_release_requires_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        run_release()


def test_release_refuses_sqlite_in_production(tmp_path, monkeypatch):
    monkeypatch.setenv("ENV", "production")
    with pytest.raises(RuntimeError):
        run_release(database_url=f"sqlite:///{tmp_path/'prod.db'}")
