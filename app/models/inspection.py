"""Inspection rows owned by the capture subsystem (read-only for comparisons)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, ULIDMixin


class Inspection(Base, ULIDMixin):
    __tablename__ = "inspections"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    property_id: Mapped[str] = mapped_column(String(26), ForeignKey("properties.id"), index=True)
    type: Mapped[str] = mapped_column(String(20))  # move_in | move_out
    ai_strictness_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    property = relationship("Property", back_populates="inspections")
    photos = relationship("InspectionPhoto", back_populates="inspection", lazy="selectin")


class InspectionPhoto(Base, ULIDMixin):
    __tablename__ = "inspection_photos"

    inspection_id: Mapped[str] = mapped_column(String(26), ForeignKey("inspections.id"), index=True)
    room_name: Mapped[str] = mapped_column(String(100))
    storage_path: Mapped[str] = mapped_column(String(500))
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    inspection = relationship("Inspection", back_populates="photos")
