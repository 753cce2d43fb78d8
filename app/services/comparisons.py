"""Synchronous half of a comparison: validate the request and create the shell."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db import crud
from app.models import Comparison, ComparisonJob
from app.services import credit_ledger
from app.services.errors import (
    ComparisonValidationError, DuplicateComparisonError, NotFoundError,
)

logger = logging.getLogger(__name__)


async def create_comparison(
    db: AsyncSession,
    user_id: str,
    property_id: str,
    move_in_inspection_id: str,
    move_out_inspection_id: str,
) -> tuple[Comparison, ComparisonJob]:
    """Validate ownership and shape, hold a credit, insert the comparison and its job.

    Returns (comparison, job) with the comparison in ``processing``. Raises a
    ComparisonError subclass on any rejection; nothing is written then.
    """
    amount = get_settings().comparison.credits_per_comparison

    user = await crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    await credit_ledger.check_balance(db, user_id, amount)

    prop = await crud.get_owned_property(db, property_id, user_id)
    if not prop:
        raise NotFoundError("Property not found")

    if move_in_inspection_id == move_out_inspection_id:
        raise ComparisonValidationError("A move-in and a move-out inspection are required")

    inspections = await crud.list_owned_inspections(
        db, [move_in_inspection_id, move_out_inspection_id], user_id
    )
    if len(inspections) != 2:
        raise NotFoundError("One or both inspections were not found")

    if any(insp.property_id != property_id for insp in inspections):
        raise ComparisonValidationError("Both inspections must belong to the same property")

    by_id = {insp.id: insp for insp in inspections}
    if (by_id[move_in_inspection_id].type != "move_in"
            or by_id[move_out_inspection_id].type != "move_out"):
        raise ComparisonValidationError("A move-in and a move-out inspection are required")

    if await crud.find_comparison_for_pair(db, move_in_inspection_id, move_out_inspection_id):
        raise DuplicateComparisonError("A comparison for these inspections already exists")

    comparison = Comparison(
        user_id=user_id,
        property_id=property_id,
        move_in_inspection_id=move_in_inspection_id,
        move_out_inspection_id=move_out_inspection_id,
        status="processing",
    )
    try:
        db.add(comparison)
        await db.flush()
        await credit_ledger.reserve(db, user_id, comparison.id, amount)
        job = ComparisonJob(comparison_id=comparison.id)
        db.add(job)
        await db.commit()
    except IntegrityError:
        # the unique pair constraint lost a race with a concurrent submission
        await db.rollback()
        raise DuplicateComparisonError("A comparison for these inspections already exists")
    except Exception:
        await db.rollback()
        raise

    await db.refresh(comparison)
    await db.refresh(comparison, ["property", "move_in_inspection", "move_out_inspection"])
    logger.info("[Comparison %s] Created for property %s (job %s)", comparison.id, property_id, job.id)
    return comparison, job
