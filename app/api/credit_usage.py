from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_db
from app.dependencies import require_user
from app.models import User
from app.schemas import CreditUsageList, CreditUsageRead
from app.services import credit_ledger

router = APIRouter(prefix="/api/credit-usage", tags=["credits"])


@router.get("", response_model=CreditUsageList)
async def list_credit_usage(
    limit: int | None = Query(default=None, ge=1, le=500),
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    rows = await credit_ledger.list_usage(db, user.id, limit=limit)
    return CreditUsageList(
        credit_usage=[CreditUsageRead.model_validate(r) for r in rows],
        count=len(rows),
    )
