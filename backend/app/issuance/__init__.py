"""Issuance package — the workflow that numbers, costs and persists documents."""

from app.issuance.service import ImportOutcome, ImportRowResult, IssuanceService

__all__ = ["ImportOutcome", "ImportRowResult", "IssuanceService"]
