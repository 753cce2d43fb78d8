"""Comparison Agent: LangGraph StateGraph implementation.

Graph: load_photos → match_rooms → analyze_rooms → finalize

Every external call inside a run is awaited in turn; rooms are analyzed one
at a time to stay inside the vision service's rate limits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from langgraph.graph import StateGraph, END
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.agents.comparison.analyzer import compare_photos
from app.agents.comparison.room_matcher import RoomPair, match_photos_by_room
from app.agents.llm_provider import LLMProvider
from app.agents.state import ComparisonState
from app.config import STRICTNESS_LEVELS, get_settings
from app.db import crud
from app.models.comparison import Comparison
from app.services import credit_ledger
from app.services.errors import FatalPipelineError, PersistenceError
from app.services.storage import public_url

logger = logging.getLogger(__name__)


@dataclass
class RunTotals:
    """Tallies for one run, built up room by room and returned at the end."""

    differences_detected: int = 0
    new_damages: int = 0
    estimated_repair_cost: Decimal = Decimal("0")
    rooms_analyzed: int = 0
    rooms_skipped: list[str] = field(default_factory=list)

    def record(self, is_new_damage: bool, cost: Decimal) -> None:
        self.differences_detected += 1
        if is_new_damage:
            self.new_damages += 1
            self.estimated_repair_cost += cost

    def as_dict(self) -> dict:
        return {
            "differences_detected": self.differences_detected,
            "new_damages": self.new_damages,
            "estimated_repair_cost": self.estimated_repair_cost,
            "rooms_analyzed": self.rooms_analyzed,
            "rooms_skipped": list(self.rooms_skipped),
        }


@dataclass(frozen=True)
class PhotoRef:
    """Detached copy of the photo columns a run needs; survives a session rollback."""

    id: str
    room_name: str
    storage_path: str


def resolve_strictness(*candidates: str | None, default: str = "standard") -> str:
    """First valid strictness level among ``candidates``, highest precedence first."""
    for level in candidates:
        if level in STRICTNESS_LEVELS:
            return level
    return default if default in STRICTNESS_LEVELS else "standard"


def _to_cost(value: float) -> Decimal:
    try:
        return Decimal(str(value)).quantize(Decimal("0.01"))
    except InvalidOperation:
        logger.warning("Unusable repair cost %r, recorded as 0", value)
        return Decimal("0")


async def analyze_room_pairs(
    db: AsyncSession,
    llm: LLMProvider,
    comparison_id: str,
    pairs: list[RoomPair],
    strictness: str,
) -> RunTotals:
    """Analyze each complete pair and persist its differences as they arrive."""
    totals = RunTotals()
    tag = f"[Comparison {comparison_id}]"

    for pair in pairs:
        if not pair.is_complete:
            logger.warning(
                "%s Room %r skipped: %d before, %d after",
                tag, pair.room_name, len(pair.before_photos), len(pair.after_photos),
            )
            totals.rooms_skipped.append(pair.room_name)
            continue

        # Only the first photo of each side is compared
        before_photo = pair.before_photos[0]
        after_photo = pair.after_photos[0]
        logger.info("%s Analyzing room %r", tag, pair.room_name)

        analysis = await compare_photos(
            llm,
            public_url(before_photo.storage_path),
            public_url(after_photo.storage_path),
            pair.room_name,
            strictness,
        )
        totals.rooms_analyzed += 1

        if not analysis.has_difference or not analysis.differences:
            logger.info("%s Room %r has no differences", tag, pair.room_name)
            continue

        for diff in analysis.differences:
            cost = _to_cost(diff.estimated_cost)
            try:
                await _persist_difference(db, comparison_id, pair.room_name,
                                          before_photo.id, after_photo.id, diff, cost)
            except PersistenceError as e:
                logger.error("%s Skipping rest of room %r: %s", tag, pair.room_name, e)
                break
            totals.record(diff.is_new_damage, cost)

    return totals


async def _persist_difference(db, comparison_id, room_name, before_id, after_id, diff, cost):
    try:
        await crud.create_difference(
            db,
            comparison_id=comparison_id,
            before_photo_id=before_id,
            after_photo_id=after_id,
            room_name=room_name,
            description=diff.description,
            severity=diff.severity,
            is_new_damage=diff.is_new_damage,
            is_natural_wear=diff.is_natural_wear,
            estimated_repair_cost=cost,
            location=diff.location,
        )
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError(f"could not save difference: {e}") from e


# ── Build graph ───────────────────────────────────────────

def build_comparison_graph(db: AsyncSession, llm: LLMProvider):
    """Compile the comparison graph bound to one DB session and provider."""

    async def load_photos(state: ComparisonState) -> dict:
        mi_insp = await crud.get_inspection(db, state["move_in_inspection_id"])
        mo_insp = await crud.get_inspection(db, state["move_out_inspection_id"])
        if not mi_insp or not mo_insp:
            raise FatalPipelineError("Inspections for this comparison no longer exist")

        move_in = [PhotoRef(p.id, p.room_name, p.storage_path)
                   for p in await crud.list_photos_for_inspection(db, mi_insp.id)]
        move_out = [PhotoRef(p.id, p.room_name, p.storage_path)
                    for p in await crud.list_photos_for_inspection(db, mo_insp.id)]

        user_default = await crud.get_user_strictness(db, state["user_id"])
        strictness = resolve_strictness(
            mo_insp.ai_strictness_level,
            mi_insp.ai_strictness_level,
            user_default,
            default=state["config"].get("default_strictness", "standard"),
        )
        logger.info(
            "[Comparison %s] Loaded %d move-in / %d move-out photos, strictness=%s",
            state["comparison_id"], len(move_in), len(move_out), strictness,
        )
        return {"move_in_photos": move_in, "move_out_photos": move_out, "strictness": strictness}

    def match_rooms(state: ComparisonState) -> dict:
        pairs = match_photos_by_room(
            state["move_in_photos"], state["move_out_photos"],
            fuzzy_threshold=state["config"].get("fuzzy_room_threshold"),
        )
        for pair in pairs:
            logger.debug("[Comparison %s] Room %r: %d before, %d after",
                         state["comparison_id"], pair.room_name,
                         len(pair.before_photos), len(pair.after_photos))
        return {"room_pairs": pairs}

    async def analyze_rooms(state: ComparisonState) -> dict:
        totals = await analyze_room_pairs(
            db, llm, state["comparison_id"], state["room_pairs"], state["strictness"],
        )
        return {"totals": totals.as_dict()}

    async def finalize(state: ComparisonState) -> dict:
        """Mark completed and charge the credit in one commit."""
        totals = state["totals"]
        comparison = await crud.get_comparison(db, state["comparison_id"])
        if comparison is None or comparison.status != "processing":
            raise FatalPipelineError("Comparison is no longer processing")
        comparison.status = "completed"
        comparison.differences_detected = totals["differences_detected"]
        comparison.new_damages = totals["new_damages"]
        comparison.estimated_repair_cost = totals["estimated_repair_cost"]
        comparison.strictness_level = state["strictness"]
        await credit_ledger.commit(
            db, state["user_id"], state["comparison_id"],
            amount=state["config"].get("credits_per_comparison", 1),
        )
        await db.commit()
        return {"totals": totals}

    graph = StateGraph(ComparisonState)

    graph.add_node("load_photos", load_photos)
    graph.add_node("match_rooms", match_rooms)
    graph.add_node("analyze_rooms", analyze_rooms)
    graph.add_node("finalize", finalize)

    graph.set_entry_point("load_photos")
    graph.add_edge("load_photos", "match_rooms")
    graph.add_edge("match_rooms", "analyze_rooms")
    graph.add_edge("analyze_rooms", "finalize")
    graph.add_edge("finalize", END)

    return graph.compile()


# ── Public API ────────────────────────────────────────────

async def run_comparison(comparison: Comparison, db: AsyncSession, llm: LLMProvider) -> dict:
    """Run the comparison agent for a move-in/move-out inspection pair."""
    settings = get_settings()

    initial_state: ComparisonState = {
        "comparison_id": comparison.id,
        "user_id": comparison.user_id,
        "move_in_inspection_id": comparison.move_in_inspection_id,
        "move_out_inspection_id": comparison.move_out_inspection_id,
        "strictness": settings.comparison.default_strictness,
        "move_in_photos": [],
        "move_out_photos": [],
        "room_pairs": [],
        "totals": {},
        "config": {
            "default_strictness": settings.comparison.default_strictness,
            "fuzzy_room_threshold": settings.comparison.fuzzy_room_threshold,
            "credits_per_comparison": settings.comparison.credits_per_comparison,
        },
    }

    graph = build_comparison_graph(db, llm)
    result = await graph.ainvoke(initial_state)

    totals = result["totals"]
    return {
        "status": "completed",
        "strictness": result["strictness"],
        "rooms": len(result["room_pairs"]),
        **totals,
    }
