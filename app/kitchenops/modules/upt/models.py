from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import JSON, Date, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.kitchenops.models import Base


class UptValue(Base):
    """Units sold per $1000 of sales for one board product."""

    __tablename__ = "upt_values"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    utp: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    # Value before the most recent change (shown next to the current one).
    old_utp: Mapped[float | None] = mapped_column(Float, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productName": self.product_name,
            "utp": self.utp,
            "oldUtp": self.old_utp,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class SalesMix(Base):
    """Latest sales-mix report: menu item name -> number sold per $1000."""

    __tablename__ = "sales_mix"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    upload_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    def to_dict(self) -> dict:
        return {
            "data": self.data or {},
            "uploadDate": self.upload_date.isoformat() if self.upload_date else None,
            "reportingPeriod": {
                "startDate": self.period_start.isoformat(),
                "endDate": self.period_end.isoformat(),
            },
        }
