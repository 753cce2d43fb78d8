"""CRUD operations for comparison-pipeline models."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import (
    User, UserSettings, Property, Inspection, InspectionPhoto,
    Comparison, ComparisonDifference, ComparisonJob,
)


# ── User ──────────────────────────────────────────────────

async def create_user(
    db: AsyncSession, email: str, credits: int = 0,
    display_name: str = "", strictness: str | None = None,
) -> User:
    user = User(email=email, credits=credits, display_name=display_name)
    db.add(user)
    await db.flush()
    if strictness:
        db.add(UserSettings(user_id=user.id, ai_inspection_strictness=strictness))
    await db.commit()
    await db.refresh(user)
    return user


async def get_user(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def get_user_strictness(db: AsyncSession, user_id: str) -> str | None:
    """The user's default AI strictness setting, if one is stored."""
    result = await db.execute(
        select(UserSettings.ai_inspection_strictness).where(UserSettings.user_id == user_id)
    )
    return result.scalars().first()


# ── Property ──────────────────────────────────────────────

async def create_property(db: AsyncSession, user_id: str, name: str, address: str = "") -> Property:
    prop = Property(user_id=user_id, name=name, address=address)
    db.add(prop)
    await db.commit()
    await db.refresh(prop)
    return prop


async def get_owned_property(db: AsyncSession, property_id: str, user_id: str) -> Property | None:
    result = await db.execute(
        select(Property).where(
            Property.id == property_id,
            Property.user_id == user_id,
            Property.deleted_at.is_(None),
        )
    )
    return result.scalars().first()


# ── Inspection ────────────────────────────────────────────

async def create_inspection(
    db: AsyncSession, user_id: str, property_id: str, inspection_type: str,
    ai_strictness_level: str | None = None,
) -> Inspection:
    insp = Inspection(
        user_id=user_id, property_id=property_id, type=inspection_type,
        ai_strictness_level=ai_strictness_level,
    )
    db.add(insp)
    await db.commit()
    await db.refresh(insp)
    return insp


async def get_inspection(db: AsyncSession, inspection_id: str) -> Inspection | None:
    return await db.get(Inspection, inspection_id)


async def list_owned_inspections(
    db: AsyncSession, inspection_ids: list[str], user_id: str
) -> list[Inspection]:
    """Non-deleted inspections among ``inspection_ids`` that belong to the user."""
    result = await db.execute(
        select(Inspection).where(
            Inspection.id.in_(inspection_ids),
            Inspection.user_id == user_id,
            Inspection.deleted_at.is_(None),
        )
    )
    return list(result.scalars().all())


# ── InspectionPhoto ───────────────────────────────────────

async def create_inspection_photo(
    db: AsyncSession, inspection_id: str, room_name: str, storage_path: str,
) -> InspectionPhoto:
    photo = InspectionPhoto(inspection_id=inspection_id, room_name=room_name, storage_path=storage_path)
    db.add(photo)
    await db.commit()
    await db.refresh(photo)
    return photo


async def list_photos_for_inspection(db: AsyncSession, inspection_id: str) -> list[InspectionPhoto]:
    result = await db.execute(
        select(InspectionPhoto)
        .where(
            InspectionPhoto.inspection_id == inspection_id,
            InspectionPhoto.deleted_at.is_(None),
        )
        .order_by(InspectionPhoto.room_name, InspectionPhoto.created_at)
    )
    return list(result.scalars().all())


# ── Comparison ────────────────────────────────────────────

async def find_comparison_for_pair(
    db: AsyncSession, move_in_inspection_id: str, move_out_inspection_id: str
) -> Comparison | None:
    result = await db.execute(
        select(Comparison).where(
            Comparison.move_in_inspection_id == move_in_inspection_id,
            Comparison.move_out_inspection_id == move_out_inspection_id,
        )
    )
    return result.scalars().first()


async def get_comparison(db: AsyncSession, comparison_id: str) -> Comparison | None:
    return await db.get(Comparison, comparison_id)


async def get_owned_comparison(db: AsyncSession, comparison_id: str, user_id: str) -> Comparison | None:
    result = await db.execute(
        select(Comparison).where(Comparison.id == comparison_id, Comparison.user_id == user_id)
    )
    return result.scalars().first()


async def update_comparison(db: AsyncSession, comparison: Comparison, **kwargs) -> Comparison:
    for k, v in kwargs.items():
        setattr(comparison, k, v)
    await db.commit()
    await db.refresh(comparison)
    return comparison


async def list_comparisons(
    db: AsyncSession, user_id: str,
    property_id: str | None = None, status: str | None = None,
) -> list[Comparison]:
    query = (
        select(Comparison)
        .where(Comparison.user_id == user_id)
        .order_by(Comparison.created_at.desc())
    )
    if property_id:
        query = query.where(Comparison.property_id == property_id)
    if status and status != "all":
        query = query.where(Comparison.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


# ── ComparisonDifference ──────────────────────────────────

async def create_difference(
    db: AsyncSession,
    comparison_id: str,
    before_photo_id: str,
    after_photo_id: str,
    room_name: str,
    description: str = "",
    severity: str = "medium",
    is_new_damage: bool = False,
    is_natural_wear: bool = False,
    estimated_repair_cost: Decimal = Decimal("0"),
    location: str = "",
) -> ComparisonDifference:
    diff = ComparisonDifference(
        comparison_id=comparison_id,
        before_photo_id=before_photo_id,
        after_photo_id=after_photo_id,
        room_name=room_name,
        description=description,
        severity=severity,
        is_new_damage=is_new_damage,
        is_natural_wear=is_natural_wear,
        estimated_repair_cost=estimated_repair_cost,
        markers={"location": location},
    )
    db.add(diff)
    await db.commit()
    await db.refresh(diff)
    return diff


async def list_differences(db: AsyncSession, comparison_id: str) -> list[ComparisonDifference]:
    result = await db.execute(
        select(ComparisonDifference)
        .where(ComparisonDifference.comparison_id == comparison_id)
        .order_by(ComparisonDifference.created_at)
    )
    return list(result.scalars().all())


async def count_differences(db: AsyncSession, comparison_id: str) -> int:
    result = await db.execute(
        select(func.count(ComparisonDifference.id))
        .where(ComparisonDifference.comparison_id == comparison_id)
    )
    return int(result.scalar_one())


# ── ComparisonJob ─────────────────────────────────────────

async def get_job(db: AsyncSession, job_id: str) -> ComparisonJob | None:
    return await db.get(ComparisonJob, job_id)


async def get_job_for_comparison(db: AsyncSession, comparison_id: str) -> ComparisonJob | None:
    result = await db.execute(
        select(ComparisonJob)
        .where(ComparisonJob.comparison_id == comparison_id)
        .order_by(ComparisonJob.created_at.desc())
    )
    return result.scalars().first()


async def update_job(db: AsyncSession, job: ComparisonJob, **kwargs) -> ComparisonJob:
    for k, v in kwargs.items():
        setattr(job, k, v)
    await db.commit()
    await db.refresh(job)
    return job


async def list_jobs_by_status(db: AsyncSession, status: str) -> list[ComparisonJob]:
    result = await db.execute(
        select(ComparisonJob)
        .where(ComparisonJob.status == status)
        .order_by(ComparisonJob.created_at)
    )
    return list(result.scalars().all())
