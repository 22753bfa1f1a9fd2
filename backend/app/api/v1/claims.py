"""Claim registration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_actor_id, get_issuance_service
from app.api.schemas.documents import ClaimCreate, ClaimResponse
from app.issuance import IssuanceService

router = APIRouter(prefix="/claims", tags=["Claims"])


@router.post("", response_model=ClaimResponse, status_code=201)
async def create_claim(
    payload: ClaimCreate,
    service: IssuanceService = Depends(get_issuance_service),
    actor_id: int | None = Depends(get_actor_id),
) -> ClaimResponse:
    claim = await service.register_claim(payload.model_dump(), actor_id=actor_id)
    return ClaimResponse.model_validate(claim)
