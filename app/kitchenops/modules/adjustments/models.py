from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.kitchenops.models import Base


class Adjustment(Base):
    """
    Manual +/- delta for one product on one board day, e.g. "+2 cases and -1 bags".
    Active until expires_at; expired rows are hidden and purged by `scripts/cleanup_expired.py`.
    """

    __tablename__ = "adjustments"
    __table_args__ = (Index("idx_adjustments_expires_at", "expires_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    day: Mapped[str] = mapped_column(String(16), nullable=False)
    product: Mapped[str] = mapped_column(String(64), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "day": self.day,
            "product": self.product,
            "message": self.message,
            "expiresAt": self.expires_at.isoformat(),
        }
