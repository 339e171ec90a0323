from __future__ import annotations

from datetime import date as date_type, datetime, timedelta

from sqlalchemy import Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.kitchenops.models import Base


class ClosurePlan(Base):
    __tablename__ = "closure_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    duration_value: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_unit: Mapped[str] = mapped_column(String(8), nullable=False)  # days | weeks
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    @property
    def end_date(self) -> date_type:
        """Last closed day (inclusive)."""
        days = self.duration_value * 7 if self.duration_unit == "weeks" else self.duration_value
        return self.date + timedelta(days=max(days, 1) - 1)

    @property
    def expires_at(self) -> datetime:
        """Midnight after the last closed day."""
        return datetime.combine(self.end_date + timedelta(days=1), datetime.min.time())

    def covers(self, d: date_type) -> bool:
        return self.date <= d <= self.end_date

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "reason": self.reason,
            "duration": {"value": self.duration_value, "unit": self.duration_unit},
            "endDate": self.end_date.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
