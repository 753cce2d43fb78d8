from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import BaseModel


class ComparisonCreate(BaseModel):
    property_id: str
    move_in_inspection_id: str
    move_out_inspection_id: str


class PropertySummary(BaseModel):
    id: str
    name: str
    address: str

    model_config = {"from_attributes": True}


class InspectionSummary(BaseModel):
    id: str
    type: str
    created_at: datetime

    model_config = {"from_attributes": True}


class DifferenceRead(BaseModel):
    id: str
    comparison_id: str
    before_photo_id: str
    after_photo_id: str
    room_name: str
    description: str
    severity: str
    is_new_damage: bool
    is_natural_wear: bool
    estimated_repair_cost: float
    markers: dict[str, Any] | None = None
    before_photo_url: str | None = None
    after_photo_url: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ComparisonRead(BaseModel):
    id: str
    user_id: str
    property_id: str
    move_in_inspection_id: str
    move_out_inspection_id: str
    status: str
    differences_detected: int
    new_damages: int
    estimated_repair_cost: float
    strictness_level: str | None = None
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime
    property: PropertySummary | None = None
    move_in_inspection: InspectionSummary | None = None
    move_out_inspection: InspectionSummary | None = None

    model_config = {"from_attributes": True}


class ComparisonDetail(ComparisonRead):
    differences: list[DifferenceRead] = []


class ComparisonCreated(BaseModel):
    comparison: ComparisonRead
    job_id: str
    message: str


class ComparisonList(BaseModel):
    comparisons: list[ComparisonRead]
    count: int
