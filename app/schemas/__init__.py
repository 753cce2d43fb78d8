"""Pydantic request/response schemas."""

from app.schemas.analysis import DetectedDifference, DifferenceAnalysis
from app.schemas.comparison import (
    ComparisonCreate, ComparisonRead, ComparisonDetail, ComparisonCreated,
    ComparisonList, DifferenceRead, PropertySummary, InspectionSummary,
)
from app.schemas.credit import CreditUsageRead, CreditUsageList
from app.schemas.job import JobRead

__all__ = [
    "DetectedDifference", "DifferenceAnalysis",
    "ComparisonCreate", "ComparisonRead", "ComparisonDetail", "ComparisonCreated",
    "ComparisonList", "DifferenceRead", "PropertySummary", "InspectionSummary",
    "CreditUsageRead", "CreditUsageList",
    "JobRead",
]
