"""Per-room difference analysis against the vision-analysis service."""

from __future__ import annotations

import logging
import time

from app.agents.comparison.prompts import AFTER_LABEL, BEFORE_LABEL
from app.agents.comparison.tools import build_comparison_prompt, parse_analysis_response
from app.agents.llm_provider import LLMProvider
from app.schemas.analysis import DifferenceAnalysis

logger = logging.getLogger(__name__)


async def compare_photos(
    llm: LLMProvider,
    before_url: str,
    after_url: str,
    room: str,
    strictness: str = "standard",
) -> DifferenceAnalysis:
    """Compare one before/after photo pair for ``room``.

    Failures of the vision call and malformed replies both produce an
    ``unparseable`` result so a single room cannot abort a comparison run.
    """
    prompt = build_comparison_prompt(room, strictness)
    started = time.monotonic()
    try:
        reply = await llm.analyze_images(
            [before_url, after_url], prompt, labels=[BEFORE_LABEL, AFTER_LABEL]
        )
    except Exception as e:
        logger.error("Vision analysis failed for room %r: %s", room, e)
        return DifferenceAnalysis.unparseable(f"vision call failed: {e}")

    logger.info("Vision analysis for room %r took %.1fs", room, time.monotonic() - started)
    result = parse_analysis_response(reply)
    if result.is_unparseable:
        logger.warning("Unparseable vision reply for room %r: %s", room, result.error)
    return result
