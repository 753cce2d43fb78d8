from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from app.schemas import (
    ComparisonCreate,
    ComparisonRead,
    DetectedDifference,
    DifferenceAnalysis,
)


def test_comparison_create_valid():
    body = ComparisonCreate(property_id="p1", move_in_inspection_id="a", move_out_inspection_id="b")
    assert body.move_in_inspection_id == "a"


def test_comparison_create_requires_all_ids():
    with pytest.raises(ValidationError):
        ComparisonCreate(property_id="p1", move_in_inspection_id="a")


def test_detected_difference_accepts_camel_and_snake_case():
    camel = DetectedDifference.model_validate({"isNewDamage": True, "estimatedCost": 10})
    snake = DetectedDifference(is_new_damage=True, estimated_cost=10)
    assert camel == snake


def test_unparseable_result_is_empty():
    result = DifferenceAnalysis.unparseable("bad")
    assert result.has_difference is False
    assert result.differences == []
    assert result.total_estimated_cost == 0
    assert result.error == "bad"


def test_comparison_read_from_orm_like_object():
    now = datetime.now(timezone.utc)
    row = SimpleNamespace(
        id="c1", user_id="u1", property_id="p1",
        move_in_inspection_id="a", move_out_inspection_id="b",
        status="completed", differences_detected=2, new_damages=1,
        estimated_repair_cost=Decimal("99.90"), strictness_level="standard",
        error_message=None, created_at=now, updated_at=now,
        property=SimpleNamespace(id="p1", name="Casa", address="Rua 1"),
        move_in_inspection=None, move_out_inspection=None,
    )
    read = ComparisonRead.model_validate(row)
    assert read.estimated_repair_cost == pytest.approx(99.9)
    assert read.property.name == "Casa"
