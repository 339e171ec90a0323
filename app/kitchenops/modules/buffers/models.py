from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.kitchenops.models import Base


class ProductBuffer(Base):
    __tablename__ = "product_buffers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    buffer_prcnt: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_on: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productName": self.product_name,
            "bufferPrcnt": self.buffer_prcnt,
            "updatedOn": self.updated_on.isoformat() if self.updated_on else None,
        }


class DailyBuffer(Base):
    """Per-weekday override of a product's buffer percentage."""

    __tablename__ = "daily_buffers"
    __table_args__ = (UniqueConstraint("day", "product_name", name="uq_daily_buffers_day_product"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    day: Mapped[str] = mapped_column(String(16), nullable=False)
    product_name: Mapped[str] = mapped_column(String(64), nullable=False)
    buffer_prcnt: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    last_modified: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "day": self.day,
            "productName": self.product_name,
            "bufferPrcnt": self.buffer_prcnt,
            "lastModified": self.last_modified.isoformat() if self.last_modified else None,
        }
