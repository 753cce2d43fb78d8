"""LangGraph TypedDict state for the comparison agent."""

from __future__ import annotations

from typing import TypedDict, Any


class ComparisonState(TypedDict):
    comparison_id: str
    user_id: str
    move_in_inspection_id: str
    move_out_inspection_id: str
    strictness: str
    move_in_photos: list[Any]  # [PhotoRef]
    move_out_photos: list[Any]
    room_pairs: list[Any]  # [RoomPair]
    totals: dict  # {differences_detected, new_damages, estimated_repair_cost, rooms_analyzed, rooms_skipped}
    config: dict
