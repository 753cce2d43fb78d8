"""Structured output contract for the vision-analysis reply.

Field aliases match the camelCase JSON the model is asked to return.
Missing or malformed leaf values are repaired; a reply without the
required top-level shape does not validate and becomes an
``unparseable`` result instead.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, Field, StrictBool, field_validator

SEVERITIES = ("low", "medium", "high", "urgent")

# Largest amount a Numeric(12, 2) column holds
MAX_COST = 9_999_999_999.99

Severity = Literal["low", "medium", "high", "urgent"]


def _coerce_str(v: Any) -> str:
    return "" if v is None else str(v)


def _coerce_cost(v: Any) -> float:
    if isinstance(v, bool) or v is None:
        return 0.0
    try:
        cost = float(v)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(cost) or abs(cost) > MAX_COST:
        return 0.0
    return cost


def _coerce_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("true", "yes", "1")
    return bool(v)


class DetectedDifference(BaseModel):
    description: str = ""
    is_new_damage: bool = Field(default=False, alias="isNewDamage")
    is_natural_wear: bool = Field(default=False, alias="isNaturalWear")
    severity: Severity = "medium"
    estimated_cost: float = Field(default=0.0, alias="estimatedCost")
    location: str = ""

    model_config = {"populate_by_name": True}

    @field_validator("description", "location", mode="before")
    @classmethod
    def _strings(cls, v: Any) -> str:
        return _coerce_str(v)

    @field_validator("is_new_damage", "is_natural_wear", mode="before")
    @classmethod
    def _flags(cls, v: Any) -> bool:
        return _coerce_bool(v)

    @field_validator("severity", mode="before")
    @classmethod
    def _severity(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip().lower() in SEVERITIES:
            return v.strip().lower()
        return "medium"

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _cost(cls, v: Any) -> float:
        return _coerce_cost(v)


class DifferenceAnalysis(BaseModel):
    has_difference: StrictBool = Field(alias="hasDifference")
    differences: list[DetectedDifference] = Field(alias="differences")
    overall_assessment: str = Field(default="", alias="overallAssessment")
    total_estimated_cost: float = Field(default=0.0, alias="totalEstimatedCost")
    outcome: Literal["parsed", "unparseable"] = "parsed"
    error: str | None = None

    model_config = {"populate_by_name": True}

    @field_validator("overall_assessment", mode="before")
    @classmethod
    def _assessment(cls, v: Any) -> str:
        return _coerce_str(v)

    @field_validator("total_estimated_cost", mode="before")
    @classmethod
    def _total(cls, v: Any) -> float:
        return _coerce_cost(v)

    @property
    def is_unparseable(self) -> bool:
        return self.outcome == "unparseable"

    @classmethod
    def unparseable(cls, reason: str) -> "DifferenceAnalysis":
        """Safe empty result used when the reply cannot be trusted."""
        return cls(
            has_difference=False,
            differences=[],
            overall_assessment="",
            total_estimated_cost=0.0,
            outcome="unparseable",
            error=reason,
        )
