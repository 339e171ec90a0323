from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.kitchenops.models import Base


class Instruction(Base):
    __tablename__ = "instructions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    day: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # Comma-separated product names; empty means a note for the whole day.
    products: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def product_list(self) -> list[str]:
        return [p.strip() for p in (self.products or "").split(",") if p.strip()]

    def to_dict(self) -> dict:
        return {"id": self.id, "day": self.day, "message": self.message, "products": self.products or ""}
