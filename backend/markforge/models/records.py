"""Persisted registry models."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class HashRecord(BaseModel):
    """One generated design, kept for dedup and audit."""

    digest: str = Field(..., description="64-char hex digest of the winning attempt")
    brand_name: str
    algorithm_id: str
    variant_index: int = 0
    created_at: int = Field(..., description="Milliseconds since the epoch")
    quality_score: int = Field(default=0, ge=0, le=100)


class RegistryDocument(BaseModel):
    """The JSON document stored under the registry key.

    ``hashes`` and ``records`` are parallel lists.
    """

    hashes: list[str] = Field(default_factory=list)
    records: list[HashRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _parallel(self) -> RegistryDocument:
        if len(self.hashes) != len(self.records):
            raise ValueError(
                f"hashes ({len(self.hashes)}) and records ({len(self.records)}) differ in length"
            )
        return self
