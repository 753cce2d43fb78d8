"""Account rows owned by the billing/auth subsystem; read and debited here."""

from __future__ import annotations

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, ULIDMixin


class User(Base, ULIDMixin):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(255), default="")
    credits: Mapped[int] = mapped_column(Integer, default=0)

    settings = relationship("UserSettings", back_populates="user", uselist=False, lazy="selectin")


class UserSettings(Base, ULIDMixin):
    __tablename__ = "user_settings"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), unique=True)
    ai_inspection_strictness: Mapped[str | None] = mapped_column(String(20), nullable=True)  # standard | strict | very_strict

    user = relationship("User", back_populates="settings")
