"""Issuance workflow: guards before numbering, numbering, persistence, release."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

from app.core.errors import (
    BelowMinimumPremiumError,
    CoInsuranceError,
    InvalidFieldError,
    InvalidSubTypeError,
    IssuanceError,
    NotFoundError,
)
from app.db.models import Client, Policy
from app.issuance import IssuanceService


async def _issue(session_factory, generator, method: str, *args, **kwargs):
    """Run one service call in its own committed session, like a request."""
    async with session_factory() as db:
        service = IssuanceService(db, generator)
        result = await getattr(service, method)(*args, **kwargs)
        await db.commit()
        return result


class TestClients:
    @pytest.mark.asyncio
    async def test_register_client_with_type(self, session_factory, generator):
        client = await _issue(
            session_factory, generator, "register_client", company_name="Zenith Foods", client_type="Corporate"
        )

        assert client.client_code == "MEIBL/CL/2025/00001"
        assert client.client_type == "CORP"

    @pytest.mark.asyncio
    async def test_client_types_share_one_series(self, session_factory, generator):
        await _issue(session_factory, generator, "register_client", company_name="Zenith Foods", client_type="CORP")
        person = await _issue(session_factory, generator, "register_client", company_name="Ada Obi", client_type="IND")
        untyped = await _issue(session_factory, generator, "register_client", company_name="Acme Ltd")

        assert person.client_code == "MEIBL/CL/2025/00002"
        assert (untyped.client_code, untyped.client_type) == ("MEIBL/CL/2025/00003", None)

    @pytest.mark.asyncio
    async def test_unknown_client_type_moves_no_counter(self, session_factory, generator):
        with pytest.raises(InvalidSubTypeError):
            await _issue(
                session_factory, generator, "register_client", company_name="Zenith Foods", client_type="Partnership"
            )
        assert await generator.current_value("CLIENT") == 0

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected_before_numbering(self, session_factory, generator, catalog):
        with pytest.raises(IssuanceError):
            await _issue(
                session_factory, generator, "register_client", company_name="Dangote Foods Ltd", client_type="CORP"
            )
        assert await generator.current_value("CLIENT") == 0

    @pytest.mark.asyncio
    async def test_taken_code_is_burned_not_released(self, session_factory, generator):
        # A legacy row already holds the code the counter will hand out next.
        async with session_factory() as db:
            db.add(Client(client_code="MEIBL/CL/2025/00001", client_type="IND", company_name="Legacy Import Ltd"))
            await db.commit()

        with pytest.raises(IssuanceError) as exc_info:
            await _issue(session_factory, generator, "register_client", company_name="Acme Ltd", client_type="IND")

        assert exc_info.value.details["code"] == "MEIBL/CL/2025/00001"
        assert await generator.current_value("CLIENT") == 1

        client = await _issue(session_factory, generator, "register_client", company_name="Acme Ltd", client_type="IND")
        assert client.client_code == "MEIBL/CL/2025/00002"

    @pytest.mark.asyncio
    async def test_other_insert_failure_releases_the_number(self, session_factory, generator, catalog):
        generated = await generator.next_code("CLIENT")
        # Same name as the seeded client, so the insert fails on company_name.
        duplicate = Client(client_code=generated.code, client_type="CORP", company_name="Dangote Foods Ltd")

        async with session_factory() as db:
            with pytest.raises(IssuanceError):
                await IssuanceService(db, generator)._persist(generated, duplicate, number_column="client_code")

        assert await generator.current_value("CLIENT") == 0


class TestPolicies:
    @pytest.mark.asyncio
    async def test_issue_policy_uses_lob_defaults(self, session_factory, generator, policy_payload):
        policy = await _issue(session_factory, generator, "issue_policy", policy_payload, actor_id=7)

        assert policy.policy_number == "POL/2025/000001"
        assert (policy.policy_seq, policy.policy_year) == (1, 2025)
        assert policy.brokerage_pct == Decimal("15")
        assert policy.rate_pct == Decimal("0.2000")
        assert policy.created_by == 7

    @pytest.mark.asyncio
    async def test_below_minimum_premium_moves_no_counter(self, session_factory, generator, policy_payload):
        policy_payload["gross_premium"] = "9999.99"

        with pytest.raises(BelowMinimumPremiumError) as exc_info:
            await _issue(session_factory, generator, "issue_policy", policy_payload)

        assert exc_info.value.http_status == 422
        assert await generator.current_value("POLICY") == 0

    @pytest.mark.asyncio
    async def test_sub_lob_minimum_overrides_lob(self, session_factory, generator, catalog, policy_payload):
        policy_payload.update(sub_lob_id=catalog.stock_id, gross_premium="15000")

        with pytest.raises(BelowMinimumPremiumError) as exc_info:
            await _issue(session_factory, generator, "issue_policy", policy_payload)
        assert Decimal(exc_info.value.details["minPremium"]) == Decimal("20000")

        policy_payload["sub_lob_id"] = catalog.standard_id
        policy = await _issue(session_factory, generator, "issue_policy", policy_payload)
        assert policy.policy_number == "POL/2025/000001"

    @pytest.mark.asyncio
    async def test_unknown_lob(self, session_factory, generator, policy_payload):
        policy_payload["lob_id"] = 999

        with pytest.raises(NotFoundError):
            await _issue(session_factory, generator, "issue_policy", policy_payload)

    @pytest.mark.asyncio
    async def test_import_numbers_by_start_date_year(self, session_factory, generator, policy_payload):
        rows = [
            {**policy_payload, "policy_start_date": "2024-07-01", "policy_end_date": "2025-06-30"},
            {**policy_payload},
            {**policy_payload, "gross_premium": "500"},
            {**policy_payload, "client_id": None},
        ]

        outcome = await _issue(session_factory, generator, "import_policies", rows, filename="march.csv")

        batch = outcome.batch
        assert batch.batch_number == "IMP/2025/000001"
        assert batch.status == "PartiallyCompleted"
        assert (batch.total_rows, batch.succeeded, batch.failed) == (4, 2, 2)
        assert [p.policy_number for p in outcome.policies] == ["POL/2024/000001", "POL/2025/000001"]
        assert batch.errors[0]["row"] == 3
        assert batch.errors[0]["code"] == "BELOW_MIN_PREMIUM"
        assert batch.errors[1]["code"] == "INVALID_ROW"

        async with session_factory() as db:
            saved = (await db.execute(select(Policy).where(Policy.import_batch_id == batch.id))).scalars().all()
        assert len(saved) == 2

    @pytest.mark.asyncio
    async def test_import_reports_malformed_row_and_keeps_the_rest(self, session_factory, generator, policy_payload):
        rows = [
            {**policy_payload},
            {**policy_payload, "currency": 566},
            {**policy_payload, "currency": "NGNX"},
            {**policy_payload, "policy_number": "POL/2025/000777"},
        ]

        outcome = await _issue(session_factory, generator, "import_policies", rows, filename="bad-cells.csv")

        assert outcome.batch.status == "PartiallyCompleted"
        assert [r.policy_number for r in outcome.rows] == ["POL/2025/000001", None, None, None]
        assert [r.code for r in outcome.rows[1:]] == ["INVALID_ROW"] * 3
        assert "currency" in outcome.rows[1].error
        assert await generator.current_value("POLICY") == 1


class TestEndorsementsAndNotes:
    @pytest.mark.asyncio
    async def test_endorsement_uses_sub_lob_brokerage(self, session_factory, generator, catalog, policy_payload):
        policy_payload.update(sub_lob_id=catalog.stock_id, gross_premium="40000")
        policy = await _issue(session_factory, generator, "issue_policy", policy_payload)

        endorsement = await _issue(
            session_factory,
            generator,
            "issue_endorsement",
            policy.id,
            {"type": "Extension", "effective_date": date(2025, 6, 1), "gross_premium_delta": "10000"},
        )

        assert endorsement.endorsement_number == "END/2025/000001"
        assert endorsement.brokerage_pct == Decimal("12.5")
        assert endorsement.brokerage_amount == Decimal("1250.00")
        assert endorsement.levies == {"niacom": "100.00", "ncrib": "50.00", "ed_tax": "50.00"}

    @pytest.mark.asyncio
    async def test_debit_note_snapshots_breakdown(self, session_factory, generator, policy_payload):
        policy = await _issue(session_factory, generator, "issue_policy", policy_payload)

        note = await _issue(session_factory, generator, "issue_note", {"note_type": "DN", "policy_id": policy.id})

        assert note.note_number == "DN/2025/000001"
        assert note.gross_premium == Decimal("100000.00")
        assert note.net_amount_due == Decimal("81875.00")

    @pytest.mark.asyncio
    async def test_credit_note_with_co_insurance(self, session_factory, generator, policy_payload):
        policy = await _issue(session_factory, generator, "issue_policy", policy_payload)

        note = await _issue(
            session_factory,
            generator,
            "issue_note",
            {
                "note_type": "credit",
                "policy_id": policy.id,
                "co_insurance_shares": [
                    {"insurer_id": 3, "percentage": 70},
                    {"insurer_id": 4, "percentage": 30},
                ],
            },
        )

        assert note.note_number == "CN/2025/000001"
        assert [s.amount for s in note.co_insurance_shares] == [Decimal("70000.00"), Decimal("30000.00")]

    @pytest.mark.asyncio
    async def test_bad_shares_move_no_counter(self, session_factory, generator, policy_payload):
        policy = await _issue(session_factory, generator, "issue_policy", policy_payload)
        shares = [{"insurer_id": 3, "percentage": 70}, {"insurer_id": 4, "percentage": 20}]

        with pytest.raises(CoInsuranceError):
            await _issue(
                session_factory,
                generator,
                "issue_note",
                {"note_type": "CN", "policy_id": policy.id, "co_insurance_shares": shares},
            )
        assert await generator.current_value("NOTE", sub_type="CN") == 0


class TestClaims:
    @pytest.mark.asyncio
    async def test_loss_date_must_fall_in_policy_period(self, session_factory, generator, policy_payload):
        policy = await _issue(session_factory, generator, "issue_policy", policy_payload)
        claim = {
            "policy_id": policy.id,
            "claimant_name": "Ada Obi",
            "loss_description": "Warehouse fire",
            "claim_amount": "250000",
            "loss_date": date(2026, 2, 1),
        }

        with pytest.raises(InvalidFieldError):
            await _issue(session_factory, generator, "register_claim", claim)
        assert await generator.current_value("CLAIM") == 0

        claim["loss_date"] = date(2025, 2, 1)
        registered = await _issue(session_factory, generator, "register_claim", claim)

        assert registered.claim_number == "CLM/2025/000001"
        assert registered.reported_date == date(2025, 3, 14)
        assert registered.status == "Registered"
