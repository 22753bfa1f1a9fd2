"""Client, policy, endorsement, note and claim schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_GENERATED_FIELDS = ("policy_number", "policyNumber")


# ─── Clients ──────────────────────────────────────────────

class ClientCreate(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    client_type: str | None = Field(default=None, description="IND or CORP (aliases: individual, corporate)")
    email: str | None = Field(default=None, max_length=320)


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_code: str
    client_type: str | None
    company_name: str
    email: str | None
    status: str
    created_at: datetime


# ─── Policies ─────────────────────────────────────────────

class PolicyCreate(BaseModel):
    """Two of sum_insured / gross_premium / rate_pct are required."""

    client_id: int
    insurer_id: int
    lob_id: int
    sub_lob_id: int | None = None
    sum_insured: Decimal | None = None
    gross_premium: Decimal | None = None
    rate_pct: Decimal | None = None
    brokerage_pct: Decimal | None = None
    currency: str = Field(default="NGN", min_length=3, max_length=3)
    policy_start_date: date
    policy_end_date: date

    @model_validator(mode="before")
    @classmethod
    def _reject_policy_number(cls, data: Any) -> Any:
        if isinstance(data, dict) and any(name in data for name in _GENERATED_FIELDS):
            raise ValueError("policy_number is generated by the system and cannot be supplied")
        return data


class PolicyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policy_number: str
    policy_year: int
    client_id: int
    insurer_id: int
    lob_id: int
    sub_lob_id: int | None
    import_batch_id: int | None
    sum_insured: Decimal
    gross_premium: Decimal
    rate_pct: Decimal | None
    brokerage_pct: Decimal | None
    currency: str
    policy_start_date: date
    policy_end_date: date
    status: str
    created_at: datetime


class PolicyImportRequest(BaseModel):
    """Rows already parsed from the upload; each row uses PolicyCreate's fields."""

    filename: str | None = None
    rows: list[dict[str, Any]] = Field(..., min_length=1)


class ImportRowResponse(BaseModel):
    row: int
    policy_number: str | None = None
    error: str | None = None
    code: str | None = None


class ImportBatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    batch_number: str
    filename: str | None
    status: str
    total_rows: int
    succeeded: int
    failed: int
    rows: list[ImportRowResponse] = Field(default_factory=list)


# ─── Shared breakdown snapshot ────────────────────────────

class PremiumSnapshotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    brokerage_pct: Decimal
    brokerage_amount: Decimal
    vat_pct: Decimal
    vat_on_brokerage: Decimal
    agent_commission_pct: Decimal
    agent_commission_amount: Decimal
    net_brokerage: Decimal
    levies: dict[str, Decimal]
    levies_total: Decimal
    net_amount_due: Decimal
    insurer_net_amount: Decimal


# ─── Endorsements ─────────────────────────────────────────

class EndorsementCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=50)
    effective_date: date
    description: str | None = None
    sum_insured_delta: Decimal = Decimal("0")
    gross_premium_delta: Decimal = Decimal("0")
    brokerage_pct: Decimal | None = None
    vat_pct: Decimal | None = None
    agent_commission_pct: Decimal | None = None
    levies: dict[str, Any] | str | None = None


class EndorsementResponse(PremiumSnapshotResponse):
    id: int
    endorsement_number: str
    policy_id: int
    type: str
    effective_date: date
    description: str | None
    sum_insured_delta: Decimal
    gross_premium_delta: Decimal
    status: str
    prepared_by: int | None


# ─── Notes ────────────────────────────────────────────────

class CoInsuranceShareIn(BaseModel):
    insurer_id: int
    percentage: Decimal


class CoInsuranceShareResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    insurer_id: int
    percentage: Decimal
    amount: Decimal


class NoteCreate(BaseModel):
    note_type: str
    policy_id: int
    client_id: int | None = None
    insurer_id: int | None = None
    gross_premium: Decimal | None = None
    brokerage_pct: Decimal | None = None
    vat_pct: Decimal | None = None
    agent_commission_pct: Decimal | None = None
    levies: dict[str, Any] | str | None = None
    payable_bank_account_id: int | None = None
    co_insurance_shares: list[CoInsuranceShareIn] = Field(default_factory=list)


class NoteResponse(PremiumSnapshotResponse):
    id: int
    note_number: str
    note_type: str
    client_id: int
    policy_id: int
    insurer_id: int | None
    gross_premium: Decimal
    currency: str
    status: str
    prepared_by: int | None
    co_insurance_shares: list[CoInsuranceShareResponse] = Field(default_factory=list)


# ─── Claims ───────────────────────────────────────────────

class ClaimCreate(BaseModel):
    policy_id: int
    claimant_name: str = Field(..., min_length=1, max_length=255)
    claimant_phone: str | None = None
    claimant_email: str | None = None
    loss_date: date
    reported_date: date | None = None
    loss_location: str | None = None
    loss_description: str = Field(..., min_length=1)
    claim_amount: Decimal
    currency: str | None = None
    exchange_rate: Decimal | None = None
    priority: str | None = None


class ClaimResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    claim_number: str
    policy_id: int
    claimant_name: str
    loss_date: date
    reported_date: date
    claim_amount: Decimal
    currency: str
    status: str
    priority: str
    registered_by: int | None
