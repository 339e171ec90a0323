from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.kitchenops.models import Base


class TruckItem(Base):
    """An item ordered on the weekly truck, with its par levels and storage details."""

    __tablename__ = "truck_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Basic information
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    uom: Mapped[str] = mapped_column(String(64), nullable=False)  # e.g. "2/5 Lb Ct Case"
    total_units: Mapped[float] = mapped_column(Float, nullable=False)  # units per case
    unit_type: Mapped[str] = mapped_column(String(16), nullable=False)  # lb | ct
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # Inventory management
    min_par_level: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_par_level: Mapped[float | None] = mapped_column(Float, nullable=True)
    on_hand_qty: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    lead_time: Mapped[int | None] = mapped_column(Integer, nullable=True)  # days

    # Storage
    storage_type: Mapped[str] = mapped_column(String(16), nullable=False, default="dry")
    storage_location: Mapped[str | None] = mapped_column(String(128), nullable=True)
    shelf_life: Mapped[int | None] = mapped_column(Integer, nullable=True)  # days
    priority_level: Mapped[str] = mapped_column(String(16), nullable=False, default="medium")

    # Usage
    avg_daily_usage: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    waste_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # Ordering history
    last_order_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_order_quantity: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_order_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    next_scheduled_delivery: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    associated_items: Mapped[list["TruckItemAssociation"]] = relationship(
        "TruckItemAssociation",
        back_populates="truck_item",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TruckItemAssociation.id",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "uom": self.uom,
            "totalUnits": self.total_units,
            "unitType": self.unit_type,
            "cost": self.cost,
            "associatedItems": [a.to_dict() for a in self.associated_items],
            "minParLevel": self.min_par_level,
            "maxParLevel": self.max_par_level,
            "onHandQty": self.on_hand_qty,
            "leadTime": self.lead_time,
            "storageType": self.storage_type,
            "storageLocation": self.storage_location,
            "shelfLife": self.shelf_life,
            "priorityLevel": self.priority_level,
            "avgDailyUsage": self.avg_daily_usage,
            "wastePercentage": self.waste_percentage,
            "lastOrderDate": self.last_order_date.isoformat() if self.last_order_date else None,
            "lastOrderQuantity": self.last_order_quantity,
            "lastOrderPrice": self.last_order_price,
            "nextScheduledDelivery": self.next_scheduled_delivery.isoformat() if self.next_scheduled_delivery else None,
            "notes": self.notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class TruckItemAssociation(Base):
    """A menu item (named as in the sales-mix report) that uses `usage` units of a truck item per sale."""

    __tablename__ = "truck_item_associations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    truck_item_id: Mapped[int] = mapped_column(ForeignKey("truck_items.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    usage: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(16), nullable=False)

    truck_item: Mapped["TruckItem"] = relationship("TruckItem", back_populates="associated_items")

    def to_dict(self) -> dict:
        return {"name": self.name, "usage": self.usage, "unit": self.unit}
