"""Endorsement issuance endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_actor_id, get_issuance_service
from app.api.schemas.documents import EndorsementCreate, EndorsementResponse
from app.issuance import IssuanceService

router = APIRouter(prefix="/policies", tags=["Endorsements"])


@router.post("/{policy_id}/endorsements", response_model=EndorsementResponse, status_code=201)
async def create_endorsement(
    policy_id: int,
    payload: EndorsementCreate,
    service: IssuanceService = Depends(get_issuance_service),
    actor_id: int | None = Depends(get_actor_id),
) -> EndorsementResponse:
    """Issue END/{YYYY}/{SEQ} against a policy with a costed premium delta."""
    endorsement = await service.issue_endorsement(policy_id, payload.model_dump(), actor_id=actor_id)
    return EndorsementResponse.model_validate(endorsement)
