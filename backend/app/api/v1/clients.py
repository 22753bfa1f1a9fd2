"""Client registration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_actor_id, get_issuance_service
from app.api.schemas.documents import ClientCreate, ClientResponse
from app.issuance import IssuanceService

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    payload: ClientCreate,
    service: IssuanceService = Depends(get_issuance_service),
    actor_id: int | None = Depends(get_actor_id),
) -> ClientResponse:
    """Register a client; the client code is generated."""
    client = await service.register_client(
        company_name=payload.company_name,
        client_type=payload.client_type,
        email=payload.email,
        actor_id=actor_id,
    )
    return ClientResponse.model_validate(client)
