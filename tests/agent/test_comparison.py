"""Tests for the Comparison Agent tools and per-room analyzer."""

import json
import pytest

from app.agents.comparison.analyzer import compare_photos
from app.agents.comparison.graph import resolve_strictness
from app.agents.comparison.tools import (
    build_comparison_prompt,
    extract_json_object,
    parse_analysis_response,
)
from app.services.errors import ExternalServiceError
from tests.helpers import ScriptedProvider, damage, reply


# ── parse_analysis_response tests ────────────────────────────────────

def test_parse_valid_reply():
    raw = json.dumps({
        "hasDifference": True,
        "differences": [damage("Deep scratch", cost=180.0)],
        "overallAssessment": "One new damage",
        "totalEstimatedCost": 180.0,
    })
    result = parse_analysis_response(raw)
    assert result.outcome == "parsed"
    assert result.has_difference is True
    assert result.differences[0].severity == "high"
    assert result.differences[0].estimated_cost == 180.0
    assert result.total_estimated_cost == 180.0


def test_parse_reply_surrounded_by_prose():
    result = parse_analysis_response(reply([damage("Stain", cost=50)]))
    assert result.has_difference is True
    assert len(result.differences) == 1


def test_parse_reply_in_code_fence():
    payload = {"hasDifference": False, "differences": [], "overallAssessment": "Clean", "totalEstimatedCost": 0}
    result = parse_analysis_response(f"```json\n{json.dumps(payload)}\n```")
    assert result.outcome == "parsed"
    assert result.overall_assessment == "Clean"


def test_parse_non_json_prose_returns_safe_empty_result():
    result = parse_analysis_response("I could not see the photos clearly, sorry.")
    assert result.is_unparseable
    assert result.has_difference is False
    assert result.differences == []
    assert result.total_estimated_cost == 0


def test_parse_empty_reply():
    assert parse_analysis_response("").is_unparseable
    assert parse_analysis_response(None).is_unparseable


def test_invalid_severity_becomes_medium():
    raw = json.dumps({
        "hasDifference": True,
        "differences": [{"description": "crack", "severity": "catastrophic"}, {"description": "x"}],
    })
    result = parse_analysis_response(raw)
    assert [d.severity for d in result.differences] == ["medium", "medium"]


def test_severity_is_case_insensitive():
    raw = json.dumps({"hasDifference": True, "differences": [{"severity": "URGENT"}]})
    assert parse_analysis_response(raw).differences[0].severity == "urgent"


def test_missing_fields_are_repaired():
    raw = json.dumps({
        "hasDifference": True,
        "differences": [{"description": None, "estimatedCost": "n/a", "isNewDamage": True}],
    })
    result = parse_analysis_response(raw)
    diff = result.differences[0]
    assert diff.description == ""
    assert diff.location == ""
    assert diff.estimated_cost == 0.0
    assert diff.is_new_damage is True
    assert diff.is_natural_wear is False
    assert result.overall_assessment == ""
    assert result.total_estimated_cost == 0.0


def test_wrong_top_level_shape_is_unparseable():
    assert parse_analysis_response('{"hasDifference": "yes", "differences": []}').is_unparseable
    assert parse_analysis_response('{"hasDifference": true, "differences": "many"}').is_unparseable
    assert parse_analysis_response('{"hasDifference": true}').is_unparseable


def test_extract_json_skips_non_object_braces():
    text = 'Values {not json} then {"hasDifference": false, "differences": []} end'
    assert extract_json_object(text) == {"hasDifference": False, "differences": []}
    assert extract_json_object("no braces here") is None


# ── prompt tests ─────────────────────────────────────────────────────

def test_prompt_embeds_room_and_strictness_rules():
    standard = build_comparison_prompt("Cozinha", "standard")
    strict = build_comparison_prompt("Cozinha", "strict")
    very = build_comparison_prompt("Cozinha", "very_strict")
    assert '"Cozinha"' in standard
    assert "CLEAR and EVIDENT" in standard
    assert "raise severity by one tier" in strict
    assert "Flag ANY visible change" in very
    assert "hasDifference" in very


def test_prompt_unknown_strictness_falls_back_to_standard():
    assert "STANDARD" in build_comparison_prompt("Sala", "lenient")


def test_resolve_strictness_precedence():
    assert resolve_strictness("very_strict", "strict", "standard") == "very_strict"
    assert resolve_strictness(None, None, "strict") == "strict"
    assert resolve_strictness(None, "bogus", None) == "standard"
    assert resolve_strictness(None, None, None, default="strict") == "strict"


# ── compare_photos tests ─────────────────────────────────────────────

@pytest.mark.asyncio
async def test_compare_photos_sends_both_images_in_order():
    llm = ScriptedProvider([reply([damage("Hole in door", cost=300)])])
    result = await compare_photos(llm, "http://x/before.jpg", "http://x/after.jpg", "Quarto", "strict")

    assert result.has_difference is True
    call = llm.calls[0]
    assert call["image_urls"] == ["http://x/before.jpg", "http://x/after.jpg"]
    assert "BEFORE" in call["labels"][0] and "AFTER" in call["labels"][1]
    assert "raise severity by one tier" in call["prompt"]


@pytest.mark.asyncio
async def test_compare_photos_never_raises_on_service_error():
    llm = ScriptedProvider([ExternalServiceError("rate limited")])
    result = await compare_photos(llm, "a", "b", "Sala")
    assert result.is_unparseable
    assert "rate limited" in result.error
    assert result.differences == []


@pytest.mark.asyncio
async def test_compare_photos_never_raises_on_prose_reply():
    llm = ScriptedProvider(["The rooms look the same to me."])
    result = await compare_photos(llm, "a", "b", "Sala")
    assert result.has_difference is False
    assert result.total_estimated_cost == 0


def test_cost_beyond_column_range_becomes_zero():
    raw = json.dumps({
        "hasDifference": True,
        "differences": [{"estimatedCost": 1e30}, {"estimatedCost": 9999999999.99}],
        "totalEstimatedCost": -1e20,
    })
    result = parse_analysis_response(raw)
    assert [d.estimated_cost for d in result.differences] == [0.0, 9999999999.99]
    assert result.total_estimated_cost == 0.0
