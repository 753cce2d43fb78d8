"""Resolve stored photo references to fetchable URLs."""

from __future__ import annotations

from urllib.parse import quote

from app.config import get_settings


def public_url(storage_path: str) -> str:
    """Public URL of an object in the inspection-photo bucket."""
    if storage_path.startswith(("http://", "https://")):
        return storage_path
    cfg = get_settings().storage
    base = cfg.public_base_url.rstrip("/")
    return f"{base}/{cfg.bucket}/{quote(storage_path.lstrip('/'))}"
