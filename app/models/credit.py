"""Credit accounting: audit ledger rows and per-comparison reservations."""

from __future__ import annotations

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, ULIDMixin


class CreditUsage(Base, ULIDMixin):
    __tablename__ = "credit_usage"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    comparison_id: Mapped[str] = mapped_column(String(26), ForeignKey("comparisons.id"), unique=True)
    credits_used: Mapped[int] = mapped_column(Integer)
    credits_before: Mapped[int] = mapped_column(Integer)
    credits_after: Mapped[int] = mapped_column(Integer)
    reason: Mapped[str] = mapped_column(String(255), default="")


class CreditReservation(Base, ULIDMixin):
    __tablename__ = "credit_reservations"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    comparison_id: Mapped[str] = mapped_column(String(26), ForeignKey("comparisons.id"), unique=True)
    amount: Mapped[int] = mapped_column(Integer, default=1)
    credits_before: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default="reserved")  # reserved | committed | released
