from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean, DateTime, ForeignKey, Integer, JSON, Numeric, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, ULIDMixin, utcnow


class Comparison(Base, ULIDMixin):
    __tablename__ = "comparisons"
    __table_args__ = (
        UniqueConstraint(
            "move_in_inspection_id", "move_out_inspection_id",
            name="uq_comparisons_inspection_pair",
        ),
    )

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    property_id: Mapped[str] = mapped_column(String(26), ForeignKey("properties.id"), index=True)
    move_in_inspection_id: Mapped[str] = mapped_column(String(26), ForeignKey("inspections.id"))
    move_out_inspection_id: Mapped[str] = mapped_column(String(26), ForeignKey("inspections.id"))
    status: Mapped[str] = mapped_column(String(20), default="processing")  # processing | completed | failed
    differences_detected: Mapped[int] = mapped_column(Integer, default=0)
    new_damages: Mapped[int] = mapped_column(Integer, default=0)
    estimated_repair_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    strictness_level: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow,
    )

    property = relationship("Property", lazy="selectin")
    move_in_inspection = relationship("Inspection", foreign_keys=[move_in_inspection_id], lazy="selectin")
    move_out_inspection = relationship("Inspection", foreign_keys=[move_out_inspection_id], lazy="selectin")
    differences = relationship(
        "ComparisonDifference", back_populates="comparison", lazy="selectin",
        order_by="ComparisonDifference.created_at",
    )


class ComparisonDifference(Base, ULIDMixin):
    __tablename__ = "comparison_differences"

    comparison_id: Mapped[str] = mapped_column(String(26), ForeignKey("comparisons.id"), index=True)
    before_photo_id: Mapped[str] = mapped_column(String(26), ForeignKey("inspection_photos.id"))
    after_photo_id: Mapped[str] = mapped_column(String(26), ForeignKey("inspection_photos.id"))
    room_name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(Text, default="")
    severity: Mapped[str] = mapped_column(String(10), default="medium")  # low | medium | high | urgent
    is_new_damage: Mapped[bool] = mapped_column(Boolean, default=False)
    is_natural_wear: Mapped[bool] = mapped_column(Boolean, default=False)
    estimated_repair_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    markers: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    comparison = relationship("Comparison", back_populates="differences")
    before_photo = relationship("InspectionPhoto", foreign_keys=[before_photo_id], lazy="selectin")
    after_photo = relationship("InspectionPhoto", foreign_keys=[after_photo_id], lazy="selectin")
