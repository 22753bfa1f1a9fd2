"""End-to-end API behaviour: status codes, error envelope and payload shapes."""

from decimal import Decimal

import pytest


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "env": "test"}


class TestCalculator:
    @pytest.mark.asyncio
    async def test_breakdown(self, client):
        response = await client.post(
            "/api/v1/calculator/breakdown",
            json={"gross_premium": "100000", "brokerage_pct": "15"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["brokerage_amount"] == "15000.00"
        assert body["vat_on_brokerage"] == "1125.00"
        assert body["levies_total"] == "2000.00"
        assert body["net_amount_due"] == "81875.00"
        assert body["insurer_net_amount"] == "83000.00"

    @pytest.mark.asyncio
    async def test_brokerage_out_of_range(self, client):
        response = await client.post(
            "/api/v1/calculator/breakdown",
            json={"gross_premium": "100000", "brokerage_pct": "150"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "PCT_RANGE"
        assert body["details"]["field"] == "brokerage_pct"

    @pytest.mark.asyncio
    async def test_malformed_levies(self, client):
        response = await client.post(
            "/api/v1/calculator/breakdown",
            json={"gross_premium": "100000", "brokerage_pct": "15", "levies": "not json"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_LEVIES"

    @pytest.mark.asyncio
    async def test_slab(self, client):
        response = await client.get("/api/v1/calculator/slab", params={"gross_premium": "2000000"})
        assert response.status_code == 200
        assert response.json()["slab_name"] == "Standard (15%)"

    @pytest.mark.asyncio
    async def test_minimum_premium_from_lob(self, client, catalog):
        response = await client.post(
            "/api/v1/calculator/minimum-premium",
            json={"gross_premium": "15000", "lob_id": catalog.lob_id, "sub_lob_id": catalog.stock_id},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is False
        assert "20,000.00" in body["message"]

    @pytest.mark.asyncio
    async def test_minimum_premium_needs_a_minimum(self, client):
        response = await client.post("/api/v1/calculator/minimum-premium", json={"gross_premium": "15000"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FIELD"

    @pytest.mark.asyncio
    async def test_auto_populate_fills_rate(self, client):
        response = await client.post(
            "/api/v1/calculator/auto-populate",
            json={"sum_insured": "50000000", "gross_premium": "100000", "brokerage_pct": "15"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["rate_pct"] == "0.2000"
        assert body["breakdown"]["net_amount_due"] == "81875.00"


class TestSequences:
    @pytest.mark.asyncio
    async def test_next_policy_code(self, client):
        response = await client.post("/api/v1/sequences/next", json={"entity_type": "policy"})
        assert response.status_code == 201
        assert response.json() == {
            "code": "POL/2025/000001",
            "entity_type": "POLICY",
            "year": 2025,
            "seq": 1,
            "sub_type": None,
        }

    @pytest.mark.asyncio
    async def test_note_requires_sub_type(self, client):
        response = await client.post("/api/v1/sequences/next", json={"entity_type": "NOTE"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SUB_TYPE"

    @pytest.mark.asyncio
    async def test_unknown_entity(self, client):
        response = await client.post("/api/v1/sequences/next", json={"entity_type": "INVOICE"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_counters(self, client):
        await client.post("/api/v1/sequences/next", json={"entity_type": "NOTE", "sub_type": "DN"})
        await client.post("/api/v1/sequences/next", json={"entity_type": "CLAIM", "year": 2024})

        response = await client.get("/api/v1/sequences", params={"year": 2025})
        assert response.status_code == 200
        counters = response.json()
        assert [(c["entity_type"], c["sub_type"], c["last_seq"]) for c in counters] == [("NOTE", "DN", 1)]

    @pytest.mark.asyncio
    async def test_parse(self, client):
        response = await client.get("/api/v1/sequences/parse", params={"code": "CN/2025/000042"})
        assert response.status_code == 200
        body = response.json()
        assert (body["entity_type"], body["sub_type"], body["seq"]) == ("NOTE", "CN", 42)

    @pytest.mark.asyncio
    async def test_parse_garbage(self, client):
        response = await client.get("/api/v1/sequences/parse", params={"code": "hello"})
        assert response.status_code == 400


class TestDocuments:
    @pytest.mark.asyncio
    async def test_create_client_records_actor(self, client):
        response = await client.post(
            "/api/v1/clients",
            json={"company_name": "Ada Obi", "client_type": "individual"},
            headers={"X-User-Id": "12"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["client_code"] == "MEIBL/CL/2025/00001"
        assert body["client_type"] == "IND"

    @pytest.mark.asyncio
    async def test_malformed_actor_header(self, client):
        response = await client.post(
            "/api/v1/clients",
            json={"company_name": "Ada Obi", "client_type": "IND"},
            headers={"X-User-Id": "abc"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_client_type_is_rejected(self, client):
        response = await client.post("/api/v1/clients", json={"company_name": "Ada Obi", "client_type": "Partnership"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SUB_TYPE"

    @pytest.mark.asyncio
    async def test_policy_number_cannot_be_supplied(self, client, policy_payload):
        payload = {**policy_payload, "policy_number": "POL/2025/000999"}
        payload["policy_start_date"] = payload["policy_start_date"].isoformat()
        payload["policy_end_date"] = payload["policy_end_date"].isoformat()

        response = await client.post("/api/v1/policies", json=payload)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_policy_below_minimum(self, client, generator, policy_payload):
        payload = {
            **policy_payload,
            "gross_premium": "5000",
            "policy_start_date": "2025-01-01",
            "policy_end_date": "2025-12-31",
        }

        response = await client.post("/api/v1/policies", json=payload)
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "BELOW_MIN_PREMIUM"
        assert Decimal(body["details"]["minPremium"]) == Decimal("10000")
        assert await generator.current_value("POLICY") == 0

    @pytest.mark.asyncio
    async def test_policy_then_credit_note(self, client, policy_payload):
        payload = {**policy_payload, "policy_start_date": "2025-01-01", "policy_end_date": "2025-12-31"}
        policy = await client.post("/api/v1/policies", json=payload, headers={"X-User-Id": "7"})
        assert policy.status_code == 201
        assert policy.json()["policy_number"] == "POL/2025/000001"

        note = await client.post(
            "/api/v1/notes",
            json={
                "note_type": "CN",
                "policy_id": policy.json()["id"],
                "co_insurance_shares": [
                    {"insurer_id": 3, "percentage": "60"},
                    {"insurer_id": 5, "percentage": "40"},
                ],
            },
        )
        assert note.status_code == 201
        body = note.json()
        assert body["note_number"] == "CN/2025/000001"
        assert [s["amount"] for s in body["co_insurance_shares"]] == ["60000.00", "40000.00"]

    @pytest.mark.asyncio
    async def test_import(self, client, policy_payload):
        row = {**policy_payload, "policy_start_date": "2025-02-01", "policy_end_date": "2026-01-31"}
        response = await client.post(
            "/api/v1/policies/import",
            json={"filename": "feb.csv", "rows": [row, {**row, "gross_premium": "1"}]},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["batch_number"] == "IMP/2025/000001"
        assert body["status"] == "PartiallyCompleted"
        assert body["rows"][0]["policy_number"] == "POL/2025/000001"
        assert body["rows"][1]["code"] == "BELOW_MIN_PREMIUM"

    @pytest.mark.asyncio
    async def test_import_with_malformed_cell(self, client, policy_payload):
        row = {**policy_payload, "policy_start_date": "2025-02-01", "policy_end_date": "2026-01-31"}
        response = await client.post(
            "/api/v1/policies/import",
            json={"rows": [row, {**row, "currency": 566}]},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PartiallyCompleted"
        assert (body["succeeded"], body["failed"]) == (1, 1)
        assert body["rows"][1]["code"] == "INVALID_ROW"
