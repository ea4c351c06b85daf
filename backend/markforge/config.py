"""Application configuration from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from markforge.engine.constants import (
    CANDIDATES_PER_GENERATION,
    MIN_QUALITY_SCORE,
    REGISTRY_CAPACITY,
    REGISTRY_KEY,
)


class Settings(BaseSettings):
    env: str = "development"
    log_level: str = "info"

    # Dedup registry
    registry_dir: Path = Path.home() / ".markforge"
    registry_key: str = REGISTRY_KEY
    registry_capacity: int = REGISTRY_CAPACITY

    # Candidate selection
    quality_threshold: int = MIN_QUALITY_SCORE
    max_attempts: int = CANDIDATES_PER_GENERATION
    variations: int = 3

    # Digest backend: hashlib when True, pure-Python SHA-256 otherwise
    prefer_platform_digest: bool = True

    model_config = SettingsConfigDict(
        env_prefix="MARKFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
