"""Sequence counter endpoints — inspect counters and draw codes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_sequence_generator
from app.api.schemas.sequences import GeneratedCodeResponse, NextCodeRequest, SequenceCounterResponse
from app.numbering import SequenceGenerator, parse_code

router = APIRouter(prefix="/sequences", tags=["Sequences"])


@router.get("", response_model=list[SequenceCounterResponse])
async def list_counters(
    year: int | None = Query(default=None),
    entity_type: str | None = Query(default=None),
    generator: SequenceGenerator = Depends(get_sequence_generator),
) -> list[SequenceCounterResponse]:
    """List sequence counters, newest year first."""
    counters = await generator.list_counters(year=year, entity_type=entity_type)
    return [SequenceCounterResponse.model_validate(c) for c in counters]


@router.post("/next", response_model=GeneratedCodeResponse, status_code=201)
async def next_code(
    payload: NextCodeRequest,
    generator: SequenceGenerator = Depends(get_sequence_generator),
) -> GeneratedCodeResponse:
    """Reserve and return the next code in a partition."""
    generated = await generator.next_code(payload.entity_type, payload.year, payload.sub_type)
    return GeneratedCodeResponse(**generated.to_dict())


@router.get("/parse", response_model=GeneratedCodeResponse)
async def parse(code: str = Query(..., min_length=1)) -> GeneratedCodeResponse:
    """Split a rendered code back into its partition and sequence."""
    return GeneratedCodeResponse(**parse_code(code).to_dict())
