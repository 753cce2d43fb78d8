"""Metered credit accounting for comparisons.

A credit is reserved when a comparison is submitted, committed into the
``credit_usage`` audit ledger when it completes, and released back to the
user when it fails. None of these functions commit; the caller owns the
transaction so a reservation can be written together with its comparison
and a commit together with the ``completed`` status.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import CreditReservation, CreditUsage, User
from app.services.errors import InsufficientCreditsError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Inspection comparison"


async def get_balance(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(select(User.credits).where(User.id == user_id))
    balance = result.scalar_one_or_none()
    if balance is None:
        raise NotFoundError("User not found")
    return balance


async def check_balance(db: AsyncSession, user_id: str, amount: int = 1) -> int:
    """Submission-time pre-check. Raises InsufficientCreditsError."""
    balance = await get_balance(db, user_id)
    if balance < amount:
        raise InsufficientCreditsError(
            "Insufficient credits. Purchase more credits to create comparisons."
        )
    return balance


async def _debit(db: AsyncSession, user_id: str, amount: int) -> int:
    """Atomically take ``amount`` credits. Returns the balance before the debit."""
    result = await db.execute(
        update(User)
        .where(User.id == user_id, User.credits >= amount)
        .values(credits=User.credits - amount)
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        await get_balance(db, user_id)  # NotFoundError for an unknown user
        raise InsufficientCreditsError(
            "Insufficient credits. Purchase more credits to create comparisons."
        )
    return await get_balance(db, user_id) + amount


async def reserve(
    db: AsyncSession, user_id: str, comparison_id: str, amount: int = 1
) -> CreditReservation:
    """Hold ``amount`` credits for a comparison."""
    before = await _debit(db, user_id, amount)
    reservation = CreditReservation(
        user_id=user_id, comparison_id=comparison_id,
        amount=amount, credits_before=before,
    )
    db.add(reservation)
    await db.flush()
    logger.info("Reserved %d credit(s) for comparison %s (%d -> %d)",
                amount, comparison_id, before, before - amount)
    return reservation


async def get_usage_for_comparison(db: AsyncSession, comparison_id: str) -> CreditUsage | None:
    result = await db.execute(
        select(CreditUsage).where(CreditUsage.comparison_id == comparison_id)
    )
    return result.scalars().first()


async def get_reservation(db: AsyncSession, comparison_id: str) -> CreditReservation | None:
    result = await db.execute(
        select(CreditReservation).where(CreditReservation.comparison_id == comparison_id)
    )
    return result.scalars().first()


async def commit(
    db: AsyncSession, user_id: str, comparison_id: str,
    amount: int = 1, reason: str = DEFAULT_REASON,
) -> CreditUsage:
    """Record the charge for a completed comparison, at most once.

    Uses the submission-time reservation when there is one, otherwise
    debits the balance directly.
    """
    existing = await get_usage_for_comparison(db, comparison_id)
    if existing is not None:
        logger.warning("Comparison %s already charged; skipping", comparison_id)
        return existing

    reservation = await get_reservation(db, comparison_id)
    if reservation is not None and reservation.status == "reserved":
        amount = reservation.amount
        before = reservation.credits_before
        reservation.status = "committed"
    else:
        before = await _debit(db, user_id, amount)

    usage = CreditUsage(
        user_id=user_id,
        comparison_id=comparison_id,
        credits_used=amount,
        credits_before=before,
        credits_after=before - amount,
        reason=reason,
    )
    db.add(usage)
    await db.flush()
    logger.info("Charged %d credit(s) for comparison %s (%d -> %d)",
                amount, comparison_id, before, before - amount)
    return usage


async def release(db: AsyncSession, comparison_id: str) -> bool:
    """Return a held reservation to the user. False if nothing was held."""
    reservation = await get_reservation(db, comparison_id)
    if reservation is None or reservation.status != "reserved":
        return False
    await db.execute(
        update(User)
        .where(User.id == reservation.user_id)
        .values(credits=User.credits + reservation.amount)
        .execution_options(synchronize_session="fetch")
    )
    reservation.status = "released"
    await db.flush()
    logger.info("Released %d credit(s) held for comparison %s", reservation.amount, comparison_id)
    return True


async def list_usage(db: AsyncSession, user_id: str, limit: int | None = None) -> list[CreditUsage]:
    query = (
        select(CreditUsage)
        .where(CreditUsage.user_id == user_id)
        .order_by(CreditUsage.created_at.desc())
    )
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())
