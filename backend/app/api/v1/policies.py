"""Policy creation and bulk import endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_actor_id, get_issuance_service
from app.api.schemas.documents import (
    ImportBatchResponse,
    ImportRowResponse,
    PolicyCreate,
    PolicyImportRequest,
    PolicyResponse,
)
from app.issuance import IssuanceService

router = APIRouter(prefix="/policies", tags=["Policies"])


@router.post("", response_model=PolicyResponse, status_code=201)
async def create_policy(
    payload: PolicyCreate,
    service: IssuanceService = Depends(get_issuance_service),
    actor_id: int | None = Depends(get_actor_id),
) -> PolicyResponse:
    """
    Create a policy numbered POL/{YYYY}/{SEQ}.

    Returns 422 BELOW_MIN_PREMIUM when the premium is under the LOB minimum.
    """
    policy = await service.issue_policy(payload.model_dump(), actor_id=actor_id)
    return PolicyResponse.model_validate(policy)


@router.post("/import", response_model=ImportBatchResponse, status_code=201)
async def import_policies(
    payload: PolicyImportRequest,
    service: IssuanceService = Depends(get_issuance_service),
    actor_id: int | None = Depends(get_actor_id),
) -> ImportBatchResponse:
    """Import parsed rows under one IMP batch; bad rows are reported, not fatal."""
    outcome = await service.import_policies(payload.rows, filename=payload.filename, actor_id=actor_id)
    batch = outcome.batch
    return ImportBatchResponse(
        id=batch.id,
        batch_number=batch.batch_number,
        filename=batch.filename,
        status=batch.status,
        total_rows=batch.total_rows,
        succeeded=batch.succeeded,
        failed=batch.failed,
        rows=[ImportRowResponse(**vars(r)) for r in outcome.rows],
    )
