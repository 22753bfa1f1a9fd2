"""Debit / credit note endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_actor_id, get_issuance_service
from app.api.schemas.documents import NoteCreate, NoteResponse
from app.issuance import IssuanceService

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.post("", response_model=NoteResponse, status_code=201)
async def create_note(
    payload: NoteCreate,
    service: IssuanceService = Depends(get_issuance_service),
    actor_id: int | None = Depends(get_actor_id),
) -> NoteResponse:
    """Issue a DN or CN; CN may split the premium across co-insurers."""
    note = await service.issue_note(payload.model_dump(), actor_id=actor_id)
    return NoteResponse.model_validate(note)
