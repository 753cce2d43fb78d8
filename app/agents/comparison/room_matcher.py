"""Group move-in and move-out photos into per-room pairs."""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Sequence

logger = logging.getLogger(__name__)


@dataclass
class RoomPair:
    room_name: str
    before_photos: list[Any] = field(default_factory=list)
    after_photos: list[Any] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return bool(self.before_photos) and bool(self.after_photos)


def normalize_room_name(name: str) -> str:
    """Grouping key for a room name. Never used for display."""
    return (name or "").strip().lower()


def _fuzzy_key(name: str) -> str:
    text = unicodedata.normalize("NFD", normalize_room_name(name))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[^a-z0-9\s]", "", text)
    return re.sub(r"\s+", " ", text).strip()


def _base_name(key: str) -> str:
    return re.sub(r"\s+", " ", re.sub(r"\d+", "", key)).strip()


def levenshtein(a: str, b: str) -> int:
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        cur = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost))
        prev = cur
    return prev[-1]


def similarity(a: str, b: str) -> float:
    """1.0 for identical strings, 0.0 for completely different ones."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest


def _best_fuzzy_match(name: str, candidates: Sequence[str], threshold: float) -> str | None:
    target = _fuzzy_key(name)
    target_base = _base_name(target)
    best, best_score = None, 0.0
    for key in candidates:
        cand = _fuzzy_key(key)
        score = max(similarity(cand, target), similarity(_base_name(cand), target_base))
        if score >= threshold and score > best_score:
            best, best_score = key, score
    return best


def match_photos_by_room(
    before: Sequence[Any],
    after: Sequence[Any],
    fuzzy_threshold: float | None = None,
) -> list[RoomPair]:
    """Pair photos by normalized ``room_name``.

    Output order is first-seen order, before-set first. A room that only
    appears on one side gets an empty list on the other. With
    ``fuzzy_threshold`` set, an after-photo whose room has no exact match is
    attached to the most similar before-set room at or above the threshold.
    """
    rooms: dict[str, RoomPair] = {}
    before_keys: list[str] = []

    for photo in before:
        key = normalize_room_name(photo.room_name)
        if key not in rooms:
            rooms[key] = RoomPair(room_name=photo.room_name)
            before_keys.append(key)
        rooms[key].before_photos.append(photo)

    for photo in after:
        key = normalize_room_name(photo.room_name)
        if key not in rooms and fuzzy_threshold is not None:
            match = _best_fuzzy_match(photo.room_name, before_keys, fuzzy_threshold)
            if match is not None:
                logger.debug("Room %r fuzzy-matched to %r", photo.room_name, rooms[match].room_name)
                key = match
        if key not in rooms:
            rooms[key] = RoomPair(room_name=photo.room_name)
        rooms[key].after_photos.append(photo)

    return list(rooms.values())
