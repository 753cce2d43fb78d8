"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

STRICTNESS_LEVELS = ("standard", "strict", "very_strict")


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class VisionConfig(BaseSettings):
    provider: str = "auto"  # auto | openai | anthropic
    openai_model: str = "gpt-4o"
    anthropic_model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048
    temperature: float = 0.3
    timeout_seconds: float = 120.0


class ComparisonConfig(BaseSettings):
    default_strictness: str = "standard"
    # None disables fuzzy room matching; exact normalized names only
    fuzzy_room_threshold: float | None = None
    credits_per_comparison: int = 1


class StorageConfig(BaseSettings):
    public_base_url: str = "http://localhost:8000/storage"
    bucket: str = "inspection-photos"


class JobsConfig(BaseSettings):
    worker_count: int = 2
    max_queue_size: int = 100


class LoggingConfig(BaseSettings):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/comparisons.db"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    vision: VisionConfig = Field(default_factory=VisionConfig)
    comparison: ComparisonConfig = Field(default_factory=ComparisonConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    jobs: JobsConfig = Field(default_factory=JobsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _yaml
    vision = VisionConfig(**y.get("vision", {}))
    comp = ComparisonConfig(**y.get("comparison", {}))
    storage = StorageConfig(**y.get("storage", {}))
    jobs = JobsConfig(**y.get("jobs", {}))
    log = LoggingConfig(**y.get("logging", {}))
    db_url = y.get("database", {}).get("url", "sqlite+aiosqlite:///data/comparisons.db")
    return Settings(
        database_url=db_url,
        vision=vision,
        comparison=comp,
        storage=storage,
        jobs=jobs,
        logging=log,
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from the ``logging`` section."""
    import logging

    cfg = (settings or get_settings()).logging
    logging.basicConfig(level=cfg.level.upper(), format=cfg.format)
