from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    pin_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def token_claims(self) -> dict:
        # Key names match what the dashboard client decodes.
        return {"id": self.id, "username": self.username, "isAdmin": bool(self.is_admin)}


class AuditEvent(Base):
    """
    Append-only audit trail event.
    Keep this table intentionally generic; resource modules record their own action names.
    """

    __tablename__ = "audit_events"
    __table_args__ = (
        Index("idx_audit_events_entity", "entity_type", "entity_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    request_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    actor_user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    actor_username: Mapped[str | None] = mapped_column(String(64), nullable=True)

    action: Mapped[str] = mapped_column(String(128), nullable=False)  # e.g. "closure.create"
    entity_type: Mapped[str | None] = mapped_column(String(128), nullable=True)  # e.g. "ClosurePlan"
    entity_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    reason: Mapped[str | None] = mapped_column(String(512), nullable=True)
    metadata_json: Mapped[str | None] = mapped_column(Text, nullable=True)  # small JSON string
    client_ip: Mapped[str | None] = mapped_column(String(64), nullable=True)


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.kitchenops.modules.sales.models import (  # noqa: E402,F401
    FutureProjection,
    SalesProjection,
    SalesProjectionConfigEntry,
)
from app.kitchenops.modules.upt.models import SalesMix, UptValue  # noqa: E402,F401
from app.kitchenops.modules.buffers.models import DailyBuffer, ProductBuffer  # noqa: E402,F401
from app.kitchenops.modules.adjustments.models import Adjustment  # noqa: E402,F401
from app.kitchenops.modules.closures.models import ClosurePlan  # noqa: E402,F401
from app.kitchenops.modules.instructions.models import Instruction  # noqa: E402,F401
from app.kitchenops.modules.truck.models import TruckItem, TruckItemAssociation  # noqa: E402,F401
