from __future__ import annotations

from datetime import date as date_type, datetime

from sqlalchemy import Date, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.kitchenops.models import Base


class SalesProjection(Base):
    """Weekly baseline: projected sales for one weekday."""

    __tablename__ = "projected_sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    day: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    sales: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    updated_on: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "day": self.day,
            "sales": self.sales,
            "updated_on": self.updated_on.isoformat() if self.updated_on else None,
        }


class FutureProjection(Base):
    """Calendar-date override of the weekly baseline (holidays, catering, events)."""

    __tablename__ = "future_projections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, unique=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {"id": self.id, "date": self.date.isoformat(), "amount": self.amount}


class SalesProjectionConfigEntry(Base):
    """
    One cell of the projection config: target_day's thaw uses percentage% of source_day's sales.
    """

    __tablename__ = "sales_projection_config"
    __table_args__ = (
        UniqueConstraint("target_day", "source_day", name="uq_projection_config_target_source"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    target_day: Mapped[str] = mapped_column(String(16), nullable=False)
    source_day: Mapped[str] = mapped_column(String(16), nullable=False)
    percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
