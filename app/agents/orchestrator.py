"""Comparison orchestrator: drives one run to a terminal status."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.agents.llm_provider import LLMProvider, get_llm_provider
from app.db import crud
from app.services import credit_ledger

logger = logging.getLogger(__name__)


async def mark_comparison_failed(db: AsyncSession, comparison_id: str, reason: str) -> bool:
    """processing → failed, returning any held credit. Difference rows are kept."""
    comparison = await crud.get_comparison(db, comparison_id)
    if not comparison or comparison.status != "processing":
        return False
    comparison.status = "failed"
    comparison.error_message = reason[:1000]
    await credit_ledger.release(db, comparison_id)
    await db.commit()
    logger.error("[Comparison %s] Marked as failed: %s", comparison_id, reason)
    return True


async def run_comparison_pipeline(
    comparison_id: str, db: AsyncSession, llm: LLMProvider | None = None
) -> dict:
    """Run comparison agent for a move-in/move-out pair.

    Any exception escaping the run forces the comparison to ``failed``;
    there is no retry and no resume.
    """
    from app.agents.comparison.graph import run_comparison

    comparison = await crud.get_comparison(db, comparison_id)
    if not comparison:
        logger.error("[Comparison %s] Not found, nothing to run", comparison_id)
        return {"status": "missing"}
    if comparison.status != "processing":
        logger.warning("[Comparison %s] Already %s, not re-running", comparison_id, comparison.status)
        return {"status": comparison.status}

    logger.info("[Comparison %s] Starting: move_in=%s move_out=%s", comparison_id,
                comparison.move_in_inspection_id, comparison.move_out_inspection_id)
    try:
        if llm is None:
            llm = get_llm_provider()
        result = await run_comparison(comparison, db, llm)
    except Exception as e:
        logger.exception("[Comparison %s] Fatal error during processing", comparison_id)
        await db.rollback()
        await mark_comparison_failed(db, comparison_id, f"{type(e).__name__}: {e}")
        return {"status": "failed", "error": str(e)}

    logger.info(
        "[Comparison %s] Completed: %d differences, %d new damages, cost %s",
        comparison_id, result["differences_detected"], result["new_damages"],
        result["estimated_repair_cost"],
    )
    return result
