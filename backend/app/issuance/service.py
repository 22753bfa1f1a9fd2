"""
Document issuance — number, cost and persist business records.

Every issue_* method follows the same order:

    1. Validate inputs and resolve referents (LOB, policy, client ...).
       Nothing has been numbered yet, so a failure here moves no counter.
    2. Compute the premium breakdown (pure).
    3. Draw the document number from the SequenceGenerator.  The number is
       committed in the generator's own transaction.
    4. Add the record to the request session and flush.  If the insert
       fails the number is handed back with a best-effort release (a gap
       is left when that is no longer possible) and IssuanceError is raised.

The request session is committed by the caller (`get_db`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping

from sqlalchemy import select
from pydantic import ValidationError
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas.documents import PolicyCreate
from app.core.clock import Clock
from app.core.config import settings
from app.core.constants import (
    ClaimPriority,
    ClaimStatus,
    DocumentStatus,
    EntityType,
    ImportBatchStatus,
    NoteType,
    PolicyStatus,
)
from app.core.errors import (
    BrokerageError,
    CoInsuranceError,
    InvalidFieldError,
    IssuanceError,
    NotFoundError,
)
from app.core.logging import get_logger
from app.db.models.base import utcnow
from app.db.models.claim import Claim
from app.db.models.client import Client
from app.db.models.endorsement import Endorsement
from app.db.models.import_batch import ImportBatch
from app.db.models.note import CoInsuranceShare, Note
from app.db.models.policy import Policy
from app.finance import (
    PremiumBreakdown,
    allocate_co_insurance,
    coerce_levy_rates,
    compute_breakdown,
    ensure_minimum_premium,
    solve_premium_triangle,
    validate_amount,
    validate_percentage,
)
from app.numbering import GeneratedCode, SequenceGenerator, normalize_client_type, normalize_sub_type
from app.repositories import catalog as catalog_repository

logger = get_logger(__name__)


@dataclass
class ImportRowResult:
    row: int
    policy_number: str | None = None
    error: str | None = None
    code: str | None = None


@dataclass
class ImportOutcome:
    batch: ImportBatch
    policies: list[Policy] = field(default_factory=list)
    rows: list[ImportRowResult] = field(default_factory=list)


def _code_taken(exc: DBAPIError, *columns: str) -> bool:
    """True when the insert collided on one of the generated number columns."""
    if not isinstance(exc, IntegrityError):
        return False
    message = str(exc.orig)
    return any(column in message for column in columns)


def _describe_validation(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "Invalid row: " + "; ".join(parts)


def _as_date(value: Any) -> date:
    """Accept a date or an ISO "YYYY-MM-DD" string (import rows)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


@dataclass
class _PreparedPolicy:
    row: int
    values: dict[str, Any]
    year: int


class IssuanceService:
    """Issues clients, policies, endorsements, notes and claims."""

    def __init__(
        self,
        db: AsyncSession,
        generator: SequenceGenerator,
        *,
        clock: Clock | None = None,
        compensate: bool | None = None,
    ) -> None:
        self.db = db
        self.generator = generator
        self.clock = clock or generator.clock
        self.compensate = settings.SEQUENCE_COMPENSATE_ON_FAILURE if compensate is None else compensate

    # ── Shared steps ──────────────────────────────────────

    async def _persist(self, generated: GeneratedCode, *records: Any, number_column: str) -> None:
        """
        Add and flush records that carry `generated`; release on failure.

        When the insert collided on `number_column` itself, the code is
        held by another row and the number is left burned.
        """
        try:
            self.db.add_all(records)
            await self.db.flush()
        except (IntegrityError, DataError) as exc:
            await self.db.rollback()
            if _code_taken(exc, number_column):
                logger.warning("Generated code already in use, number not released", code=generated.code)
            else:
                await self._release(generated)
            logger.error("Record insert failed after numbering", code=generated.code, error=str(exc.orig))
            raise IssuanceError(
                f"Could not save {generated.entity_type.value.lower()} {generated.code}",
                details={"code": generated.code},
            ) from exc

    async def _release(self, *generated: GeneratedCode) -> None:
        if not self.compensate:
            return
        # Newest first so each conditional decrement can still match.
        for item in sorted(generated, key=lambda g: g.seq, reverse=True):
            await self.generator.release(item)

    async def _get_policy(self, policy_id: int) -> Policy:
        policy = await self.db.get(Policy, policy_id)
        if policy is None:
            raise NotFoundError(f"Policy {policy_id} not found", details={"policy_id": policy_id})
        return policy

    async def _get_client(self, client_id: int) -> Client:
        client = await self.db.get(Client, client_id)
        if client is None:
            raise NotFoundError(f"Client {client_id} not found", details={"client_id": client_id})
        return client

    @staticmethod
    def _breakdown(
        gross_premium: Decimal,
        brokerage_pct: Any,
        *,
        vat_pct: Any = None,
        agent_commission_pct: Any = None,
        levies: Any = None,
    ) -> PremiumBreakdown:
        return compute_breakdown(
            gross_premium,
            validate_percentage("brokerage_pct", brokerage_pct),
            vat_pct=None if vat_pct is None else validate_percentage("vat_pct", vat_pct),
            agent_commission_pct=(
                None if agent_commission_pct is None
                else validate_percentage("agent_commission_pct", agent_commission_pct)
            ),
            levy_rates=coerce_levy_rates(levies),
        )

    # ── Clients ───────────────────────────────────────────

    async def register_client(
        self,
        *,
        company_name: str,
        client_type: str | None = None,
        email: str | None = None,
        actor_id: int | None = None,
    ) -> Client:
        client_type = normalize_client_type(client_type)
        name = company_name.strip()

        existing = await self.db.execute(select(Client.id).where(Client.company_name == name))
        if existing.first() is not None:
            raise IssuanceError(
                f"Client {name!r} already exists",
                details={"company_name": name},
            )

        generated = await self.generator.next_code(EntityType.CLIENT)
        client = Client(
            client_code=generated.code,
            client_type=client_type,
            company_name=name,
            email=email,
            created_by=actor_id,
        )
        await self._persist(generated, client, number_column="client_code")
        logger.info("Client registered", client_id=client.id, client_code=client.client_code)
        return client

    # ── Policies ──────────────────────────────────────────

    async def _prepare_policy(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Validate one policy payload and return the column values (minus numbering)."""
        await self._get_client(int(data["client_id"]))
        sub_lob_id = data.get("sub_lob_id")
        defaults = await catalog_repository.resolve_product_defaults(
            self.db, int(data["lob_id"]), None if sub_lob_id in (None, "") else int(sub_lob_id)
        )

        start, end = _as_date(data["policy_start_date"]), _as_date(data["policy_end_date"])
        if end < start:
            raise InvalidFieldError(
                "policy_end_date must not be before policy_start_date",
                field="policy_end_date",
                value=end,
            )

        triangle = solve_premium_triangle(
            data.get("sum_insured"), data.get("gross_premium"), data.get("rate_pct")
        )
        if triangle is None:
            raise InvalidFieldError(
                "Two of sum_insured, gross_premium and rate_pct are required",
                field="gross_premium",
                value=data.get("gross_premium"),
            )
        validate_amount("sum_insured", triangle.sum_insured)
        gross = validate_amount("gross_premium", triangle.gross_premium)

        currency = (data.get("currency") or settings.DEFAULT_CURRENCY).upper()
        ensure_minimum_premium(gross, defaults.min_premium, currency=currency)

        brokerage = data.get("brokerage_pct")
        brokerage_pct = defaults.brokerage_pct if brokerage is None else validate_percentage("brokerage_pct", brokerage)

        return {
            "client_id": int(data["client_id"]),
            "insurer_id": int(data["insurer_id"]),
            "lob_id": defaults.lob_id,
            "sub_lob_id": defaults.sub_lob_id,
            "sum_insured": triangle.sum_insured,
            "gross_premium": gross,
            "rate_pct": triangle.rate_pct,
            "brokerage_pct": brokerage_pct,
            "currency": currency,
            "policy_start_date": start,
            "policy_end_date": end,
            "status": PolicyStatus.ACTIVE.value,
        }

    async def issue_policy(self, data: Mapping[str, Any], *, actor_id: int | None = None) -> Policy:
        """
        Create a policy numbered POL/{current year}/{SEQ}.

        Raises BelowMinimumPremiumError before numbering when the premium is
        under the LOB / Sub-LOB minimum.
        """
        values = await self._prepare_policy(data)
        generated = await self.generator.next_code(EntityType.POLICY)
        policy = Policy(
            policy_number=generated.code,
            policy_seq=generated.seq,
            policy_year=generated.year,
            created_by=actor_id,
            **values,
        )
        await self._persist(generated, policy, number_column="policy_number")
        logger.info("Policy issued", policy_id=policy.id, policy_number=policy.policy_number)
        return policy

    async def import_policies(
        self,
        rows: Iterable[Mapping[str, Any]],
        *,
        filename: str | None = None,
        actor_id: int | None = None,
    ) -> ImportOutcome:
        """
        Bulk-create policies from parsed rows under one IMP/{YYYY}/{SEQ} batch.

        Each imported policy is numbered in the year of its start date.
        Each row is checked against the single-policy payload first.  Invalid
        rows are recorded on the batch and skipped; valid rows are all saved
        together.
        """
        rows = list(rows)
        results: list[ImportRowResult] = []
        prepared: list[_PreparedPolicy] = []

        for index, row in enumerate(rows, start=1):
            try:
                payload = PolicyCreate.model_validate(row).model_dump()
                values = await self._prepare_policy(payload)
            except ValidationError as exc:
                results.append(ImportRowResult(row=index, error=_describe_validation(exc), code="INVALID_ROW"))
                continue
            except BrokerageError as exc:
                results.append(ImportRowResult(row=index, error=exc.message, code=exc.code))
                continue
            prepared.append(_PreparedPolicy(row=index, values=values, year=values["policy_start_date"].year))

        batch_code = await self.generator.next_code(EntityType.IMPORT_BATCH)
        issued: list[GeneratedCode] = [batch_code]
        policies: list[Policy] = []
        for item in prepared:
            generated = await self.generator.next_code(EntityType.POLICY, year=item.year)
            issued.append(generated)
            policies.append(
                Policy(
                    policy_number=generated.code,
                    policy_seq=generated.seq,
                    policy_year=generated.year,
                    created_by=actor_id,
                    **item.values,
                )
            )
            results.append(ImportRowResult(row=item.row, policy_number=generated.code))

        results.sort(key=lambda r: r.row)
        failed = [r for r in results if r.error is not None]
        if not policies:
            status = ImportBatchStatus.FAILED
        elif failed:
            status = ImportBatchStatus.PARTIALLY_COMPLETED
        else:
            status = ImportBatchStatus.COMPLETED

        batch = ImportBatch(
            batch_number=batch_code.code,
            filename=filename,
            status=status.value,
            total_rows=len(rows),
            succeeded=len(policies),
            failed=len(failed),
            errors=[{"row": r.row, "error": r.error, "code": r.code} for r in failed],
            imported_by=actor_id,
            completed_at=utcnow(),
        )
        try:
            self.db.add(batch)
            await self.db.flush()
            for policy in policies:
                policy.import_batch_id = batch.id
            self.db.add_all(policies)
            await self.db.flush()
        except (IntegrityError, DataError) as exc:
            await self.db.rollback()
            if _code_taken(exc, "batch_number", "policy_number"):
                logger.warning("Generated code already in use, numbers not released", batch_number=batch_code.code)
            else:
                await self._release(*issued)
            logger.error("Import batch insert failed", batch_number=batch_code.code, error=str(exc.orig))
            raise IssuanceError(
                f"Could not save import batch {batch_code.code}",
                details={"batch_number": batch_code.code},
            ) from exc

        logger.info(
            "Policy import finished",
            batch_number=batch.batch_number,
            total=batch.total_rows,
            succeeded=batch.succeeded,
            failed=batch.failed,
        )
        return ImportOutcome(batch=batch, policies=policies, rows=results)

    # ── Endorsements ──────────────────────────────────────

    async def issue_endorsement(
        self,
        policy_id: int,
        data: Mapping[str, Any],
        *,
        actor_id: int | None = None,
    ) -> Endorsement:
        """
        Create END/{YYYY}/{SEQ} against a policy.

        Brokerage % falls back to the Sub-LOB override, then the LOB default.
        The premium delta may be negative (return premium).
        """
        policy = await self._get_policy(policy_id)
        defaults = await catalog_repository.resolve_product_defaults(self.db, policy.lob_id, policy.sub_lob_id)

        brokerage = data.get("brokerage_pct")
        vat = data.get("vat_pct")
        breakdown = self._breakdown(
            Decimal(str(data.get("gross_premium_delta") or 0)),
            defaults.brokerage_pct if brokerage is None else brokerage,
            vat_pct=defaults.vat_pct if vat is None else vat,
            agent_commission_pct=data.get("agent_commission_pct"),
            levies=data.get("levies"),
        )

        generated = await self.generator.next_code(EntityType.ENDORSEMENT)
        endorsement = Endorsement(
            endorsement_number=generated.code,
            endorsement_seq=generated.seq,
            endorsement_year=generated.year,
            policy_id=policy.id,
            type=str(data["type"]).strip(),
            effective_date=data["effective_date"],
            description=data.get("description"),
            sum_insured_delta=Decimal(str(data.get("sum_insured_delta") or 0)),
            gross_premium_delta=breakdown.gross_premium,
            status=DocumentStatus.DRAFT.value,
            prepared_by=actor_id,
        )
        endorsement.apply_breakdown(breakdown)
        await self._persist(generated, endorsement, number_column="endorsement_number")
        logger.info(
            "Endorsement issued",
            endorsement_id=endorsement.id,
            endorsement_number=endorsement.endorsement_number,
            policy_id=policy.id,
        )
        return endorsement

    # ── Debit / credit notes ──────────────────────────────

    async def issue_note(self, data: Mapping[str, Any], *, actor_id: int | None = None) -> Note:
        """
        Create a DN/{YYYY}/{SEQ} or CN/{YYYY}/{SEQ} note.

        Gross premium defaults to the policy's.  A credit note may carry
        co-insurance shares, which must total 100%.
        """
        note_type = normalize_sub_type(EntityType.NOTE, data.get("note_type"))
        policy = await self._get_policy(int(data["policy_id"]))
        client_id = int(data.get("client_id") or policy.client_id)
        await self._get_client(client_id)

        gross_raw = data.get("gross_premium")
        gross = validate_amount("gross_premium", policy.gross_premium if gross_raw is None else gross_raw)

        defaults = await catalog_repository.resolve_product_defaults(self.db, policy.lob_id, policy.sub_lob_id)
        brokerage = data.get("brokerage_pct")
        if brokerage is None:
            brokerage = policy.brokerage_pct if policy.brokerage_pct is not None else defaults.brokerage_pct
        vat = data.get("vat_pct")
        breakdown = self._breakdown(
            gross,
            brokerage,
            vat_pct=defaults.vat_pct if vat is None else vat,
            agent_commission_pct=data.get("agent_commission_pct"),
            levies=data.get("levies"),
        )

        shares_payload = data.get("co_insurance_shares") or []
        if shares_payload and note_type != NoteType.CREDIT.value:
            raise CoInsuranceError("Co-insurance shares are only allowed on credit notes")
        allocations = allocate_co_insurance(gross, shares_payload) if shares_payload else []

        generated = await self.generator.next_code(EntityType.NOTE, sub_type=note_type)
        note = Note(
            note_number=generated.code,
            note_type=note_type,
            note_seq=generated.seq,
            note_year=generated.year,
            client_id=client_id,
            policy_id=policy.id,
            insurer_id=data.get("insurer_id") or policy.insurer_id,
            gross_premium=breakdown.gross_premium,
            currency=policy.currency,
            payable_bank_account_id=data.get("payable_bank_account_id"),
            status=DocumentStatus.DRAFT.value,
            prepared_by=actor_id,
        )
        note.apply_breakdown(breakdown)
        note.co_insurance_shares = [
            CoInsuranceShare(insurer_id=a.insurer_id, percentage=a.percentage, amount=a.amount)
            for a in allocations
        ]
        await self._persist(generated, note, number_column="note_number")
        logger.info("Note issued", note_id=note.id, note_number=note.note_number, shares=len(allocations))
        return note

    # ── Claims ────────────────────────────────────────────

    async def register_claim(self, data: Mapping[str, Any], *, actor_id: int | None = None) -> Claim:
        """Register CLM/{YYYY}/{SEQ}; the loss date must fall inside the policy period."""
        policy = await self._get_policy(int(data["policy_id"]))
        amount = validate_amount("claim_amount", data.get("claim_amount"))

        loss_date: date = data["loss_date"]
        if not policy.policy_start_date <= loss_date <= policy.policy_end_date:
            raise InvalidFieldError(
                "loss_date must fall within the policy period",
                field="loss_date",
                value=loss_date,
                details={
                    "policy_start_date": policy.policy_start_date.isoformat(),
                    "policy_end_date": policy.policy_end_date.isoformat(),
                },
            )

        generated = await self.generator.next_code(EntityType.CLAIM)
        claim = Claim(
            claim_number=generated.code,
            claim_seq=generated.seq,
            claim_year=generated.year,
            policy_id=policy.id,
            claimant_name=str(data["claimant_name"]).strip(),
            claimant_phone=data.get("claimant_phone"),
            claimant_email=data.get("claimant_email"),
            loss_date=loss_date,
            reported_date=data.get("reported_date") or self.clock.today(),
            loss_location=data.get("loss_location"),
            loss_description=str(data["loss_description"]).strip(),
            claim_amount=amount,
            currency=(data.get("currency") or policy.currency).upper(),
            exchange_rate=Decimal(str(data.get("exchange_rate") or 1)),
            status=ClaimStatus.REGISTERED.value,
            priority=data.get("priority") or ClaimPriority.MEDIUM.value,
            registered_by=actor_id,
        )
        await self._persist(generated, claim, number_column="claim_number")
        logger.info("Claim registered", claim_id=claim.id, claim_number=claim.claim_number)
        return claim
