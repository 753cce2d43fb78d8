"""Comparison Agent tools: reply parsing and prompt assembly."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from app.agents.comparison.prompts import COMPARE_ROOM_PROMPT, STRICTNESS_INSTRUCTIONS
from app.config import STRICTNESS_LEVELS
from app.schemas.analysis import DifferenceAnalysis

logger = logging.getLogger(__name__)


def build_comparison_prompt(room: str, strictness: str) -> str:
    """Instruction for one room, with the grading rules for ``strictness``."""
    if strictness not in STRICTNESS_LEVELS:
        strictness = "standard"
    return COMPARE_ROOM_PROMPT.format(
        room=room,
        strictness_instructions=STRICTNESS_INSTRUCTIONS[strictness],
    )


def extract_json_object(text: str) -> dict | None:
    """Return the first JSON object embedded in ``text``, or None."""
    if "```json" in text:
        fenced = text.split("```json", 1)[1].split("```", 1)[0]
        text = fenced + "\n" + text
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)
    return None


def parse_analysis_response(response: str | None) -> DifferenceAnalysis:
    """Parse a vision reply into a DifferenceAnalysis. Never raises."""
    if not response:
        return DifferenceAnalysis.unparseable("empty reply")
    payload = extract_json_object(response)
    if payload is None:
        logger.error("Vision reply contains no JSON object: %.200s", response)
        return DifferenceAnalysis.unparseable("no JSON object in reply")
    try:
        return DifferenceAnalysis.model_validate(payload)
    except ValidationError as e:
        logger.error("Vision reply failed schema validation: %s", e.errors()[:3])
        return DifferenceAnalysis.unparseable("reply does not match schema")
