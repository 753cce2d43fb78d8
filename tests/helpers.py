"""Shared seeding helpers and a scripted vision provider for tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from app.agents.llm_provider import LLMProvider
from app.db import crud


def reply(differences: list[dict] | None = None, assessment: str = "ok") -> str:
    """A well-formed vision reply wrapped in a little prose."""
    differences = differences or []
    payload = {
        "hasDifference": bool(differences),
        "differences": differences,
        "overallAssessment": assessment,
        "totalEstimatedCost": sum(d.get("estimatedCost", 0) for d in differences),
    }
    return f"Here is my analysis:\n{json.dumps(payload)}\nLet me know if you need more."


def damage(description: str, cost: float = 100.0, new: bool = True, severity: str = "high") -> dict:
    return {
        "description": description,
        "isNewDamage": new,
        "isNaturalWear": not new,
        "severity": severity,
        "estimatedCost": cost if new else 0,
        "location": "left wall",
    }


class ScriptedProvider(LLMProvider):
    """Returns (or raises) the queued replies in order and records every call."""

    def __init__(self, replies: list):
        self.replies = list(replies)
        self.calls: list[dict] = []

    async def analyze_images(self, image_urls, prompt, labels=None):
        self.calls.append({"image_urls": image_urls, "prompt": prompt, "labels": labels})
        if not self.replies:
            raise AssertionError("unexpected vision call")
        item = self.replies.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@dataclass
class Seeded:
    user_id: str
    property_id: str
    move_in_id: str
    move_out_id: str
    photos: dict = field(default_factory=dict)


async def seed_inspection_pair(
    db: AsyncSession,
    credits: int = 5,
    before_rooms: list[str] = ("Bedroom", "Kitchen"),
    after_rooms: list[str] = ("Bedroom", "Kitchen"),
    email: str = "owner@example.com",
    user_strictness: str | None = None,
    move_out_strictness: str | None = None,
) -> Seeded:
    user = await crud.create_user(db, email, credits=credits, strictness=user_strictness)
    prop = await crud.create_property(db, user.id, "Rua das Flores 10", "Apt 3")
    mi = await crud.create_inspection(db, user.id, prop.id, "move_in")
    mo = await crud.create_inspection(db, user.id, prop.id, "move_out",
                                      ai_strictness_level=move_out_strictness)
    photos = {"before": [], "after": []}
    for i, room in enumerate(before_rooms):
        photos["before"].append(await crud.create_inspection_photo(db, mi.id, room, f"{mi.id}/{i}.jpg"))
    for i, room in enumerate(after_rooms):
        photos["after"].append(await crud.create_inspection_photo(db, mo.id, room, f"{mo.id}/{i}.jpg"))
    return Seeded(user.id, prop.id, mi.id, mo.id, photos)
