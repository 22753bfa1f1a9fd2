"""Sequence counter request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NextCodeRequest(BaseModel):
    """Draw the next code in a partition."""

    entity_type: str = Field(..., min_length=1, max_length=32)
    year: int | None = None
    sub_type: str | None = None


class GeneratedCodeResponse(BaseModel):
    code: str
    entity_type: str
    year: int
    seq: int
    sub_type: str | None = None


class SequenceCounterResponse(BaseModel):
    """One row of the sequence_counters table."""

    model_config = ConfigDict(from_attributes=True)

    entity_type: str
    year: int
    sub_type: str | None
    last_seq: int
    updated_at: datetime

    @field_validator("sub_type", mode="before")
    @classmethod
    def _empty_as_none(cls, value: str | None) -> str | None:
        return value or None
