"""FastAPI dependency providers for settings, DB sessions and the caller's identity."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.db import crud
from app.db.engine import get_db
from app.models import User


@lru_cache
def get_settings_dep() -> Settings:
    return get_settings()


async def require_user(
    x_user_id: str = Header(default=""),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the caller from the ``X-User-Id`` header set by the auth gateway."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user = await crud.get_user(db, x_user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
