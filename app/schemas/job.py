from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class JobRead(BaseModel):
    id: str
    comparison_id: str
    status: str
    attempts: int
    error: str | None = None
    created_at: datetime
    started_at: datetime | None = None
    finished_at: datetime | None = None

    model_config = {"from_attributes": True}
