"""Tests for the scheduled cleanup script."""
from datetime import date, datetime, timedelta

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.kitchenops.models import Base
from app.kitchenops.modules.adjustments.models import Adjustment
from app.kitchenops.modules.closures.models import ClosurePlan
from scripts.cleanup_expired import run_cleanup


def test_run_cleanup(tmp_path):
    db_url = f"sqlite:///{tmp_path/'cleanup.db'}"
    engine = create_engine(db_url, future=True)
    Base.metadata.create_all(bind=engine)

    now = datetime(2026, 10, 19, 12, 0, 0)
    with Session(engine) as s:
        s.add_all(
            [
                Adjustment(day="Monday", product="Filets", message="+1 cases", expires_at=now - timedelta(minutes=1), created_at=now),
                Adjustment(day="Monday", product="Filets", message="+2 cases", expires_at=now + timedelta(hours=1), created_at=now),
                ClosurePlan(date=date(2026, 10, 1), reason="Ended", duration_value=3, duration_unit="days", created_at=now),
                ClosurePlan(date=date(2026, 10, 19), reason="Today", duration_value=1, duration_unit="days", created_at=now),
            ]
        )
        s.commit()

    assert run_cleanup(database_url=db_url, now=now) == {"adjustments": 1, "closures": 1}

    with Session(engine) as s:
        assert [a.message for a in s.query(Adjustment).all()] == ["+2 cases"]
        assert [p.reason for p in s.query(ClosurePlan).all()] == ["Today"]

    assert run_cleanup(database_url=db_url, now=now) == {"adjustments": 0, "closures": 0}
    engine.dispose()
