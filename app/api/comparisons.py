from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import require_user
from app.models import User
from app.schemas import (
    ComparisonCreate, ComparisonCreated, ComparisonDetail, ComparisonList,
    ComparisonRead, DifferenceRead,
)
from app.services.comparisons import create_comparison
from app.services.errors import ComparisonError
from app.services.job_queue import job_queue
from app.services.storage import public_url

router = APIRouter(prefix="/api/comparisons", tags=["comparisons"])


@router.post("", response_model=ComparisonCreated, status_code=201)
async def submit_comparison(
    body: ComparisonCreate,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        comparison, job = await create_comparison(
            db, user.id, body.property_id,
            body.move_in_inspection_id, body.move_out_inspection_id,
        )
    except ComparisonError as e:
        raise HTTPException(e.status_code, e.detail)

    # Analysis runs on the job queue; the caller polls for the outcome
    await job_queue.submit(job.id)
    return ComparisonCreated(
        comparison=ComparisonRead.model_validate(comparison),
        job_id=job.id,
        message="Comparison created. Processing is in progress.",
    )


@router.get("", response_model=ComparisonList)
async def list_comparisons(
    property_id: str | None = Query(default=None),
    status: str | None = Query(default=None),
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    if status not in (None, "all", "processing", "completed", "failed"):
        raise HTTPException(400, "status must be one of: all, processing, completed, failed")
    comps = await crud.list_comparisons(db, user.id, property_id=property_id, status=status)
    return ComparisonList(
        comparisons=[ComparisonRead.model_validate(c) for c in comps],
        count=len(comps),
    )


@router.get("/{comparison_id}", response_model=ComparisonDetail)
async def get_comparison(
    comparison_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    comp = await crud.get_owned_comparison(db, comparison_id, user.id)
    if not comp:
        raise HTTPException(404, "Comparison not found")

    differences = []
    for diff in await crud.list_differences(db, comp.id):
        differences.append(DifferenceRead.model_validate(diff).model_copy(update={
            "before_photo_url": public_url(diff.before_photo.storage_path) if diff.before_photo else None,
            "after_photo_url": public_url(diff.after_photo.storage_path) if diff.after_photo else None,
        }))

    detail = ComparisonDetail.model_validate(comp, from_attributes=True)
    return detail.model_copy(update={"differences": differences})
