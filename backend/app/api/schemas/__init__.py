"""API schema package."""

from app.api.schemas.calculator import (
    AutoPopulateRequest,
    AutoPopulateResponse,
    BreakdownRequest,
    MinimumPremiumRequest,
    MinimumPremiumResponse,
    PremiumBreakdownResponse,
    SlabResponse,
)
from app.api.schemas.documents import (
    ClaimCreate,
    ClaimResponse,
    ClientCreate,
    ClientResponse,
    EndorsementCreate,
    EndorsementResponse,
    ImportBatchResponse,
    NoteCreate,
    NoteResponse,
    PolicyCreate,
    PolicyImportRequest,
    PolicyResponse,
)
from app.api.schemas.sequences import GeneratedCodeResponse, NextCodeRequest, SequenceCounterResponse

__all__ = [
    "AutoPopulateRequest",
    "AutoPopulateResponse",
    "BreakdownRequest",
    "ClaimCreate",
    "ClaimResponse",
    "ClientCreate",
    "ClientResponse",
    "EndorsementCreate",
    "EndorsementResponse",
    "GeneratedCodeResponse",
    "ImportBatchResponse",
    "MinimumPremiumRequest",
    "MinimumPremiumResponse",
    "NextCodeRequest",
    "NoteCreate",
    "NoteResponse",
    "PolicyCreate",
    "PolicyImportRequest",
    "PolicyResponse",
    "PremiumBreakdownResponse",
    "SequenceCounterResponse",
    "SlabResponse",
]
