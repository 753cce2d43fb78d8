from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import require_user
from app.models import User
from app.schemas import JobRead

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("/{job_id}", response_model=JobRead)
async def get_job(
    job_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    job = await crud.get_job(db, job_id)
    if job:
        comp = await crud.get_owned_comparison(db, job.comparison_id, user.id)
        if comp:
            return job
    raise HTTPException(404, "Job not found")
