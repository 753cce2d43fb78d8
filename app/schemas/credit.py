from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class CreditUsageRead(BaseModel):
    id: str
    user_id: str
    comparison_id: str
    credits_used: int
    credits_before: int
    credits_after: int
    reason: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CreditUsageList(BaseModel):
    credit_usage: list[CreditUsageRead]
    count: int
