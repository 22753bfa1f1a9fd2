"""Shared constants and enums used across the application."""

from enum import StrEnum


class EntityType(StrEnum):
    """Numbering series backed by the sequence counter table."""

    CLIENT = "CLIENT"
    POLICY = "POLICY"
    ENDORSEMENT = "ENDORSEMENT"
    NOTE = "NOTE"
    CLAIM = "CLAIM"
    IMPORT_BATCH = "IMPORT_BATCH"
    AGENT = "AGENT"
    INSURER = "INSURER"
    BANK = "BANK"
    SLIP = "SLIP"


class ClientType(StrEnum):
    """Client / agent sub-type partition."""

    INDIVIDUAL = "IND"
    CORPORATE = "CORP"


class NoteType(StrEnum):
    """Debit or credit note."""

    DEBIT = "DN"
    CREDIT = "CN"


class DocumentStatus(StrEnum):
    """Lifecycle status shared by notes and endorsements."""

    DRAFT = "Draft"
    APPROVED = "Approved"
    ISSUED = "Issued"


class PolicyStatus(StrEnum):
    """Policy lifecycle status."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class ClaimStatus(StrEnum):
    """Claim lifecycle status."""

    REGISTERED = "Registered"
    UNDER_REVIEW = "UnderReview"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    SETTLED = "Settled"
    CLOSED = "Closed"


class ClaimPriority(StrEnum):
    """Claim handling priority."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class ImportBatchStatus(StrEnum):
    """Outcome of a bulk policy import."""

    PROCESSING = "Processing"
    COMPLETED = "Completed"
    PARTIALLY_COMPLETED = "PartiallyCompleted"
    FAILED = "Failed"


class BrokerageSlab(StrEnum):
    """Named brokerage tiers offered to operators as a hint."""

    BASIC = "Basic"
    STANDARD = "Standard"
    PREMIUM = "Premium"


# Empty string stands for "no sub-type" in the counter key so that the
# unique constraint treats it as its own partition (NULLs never collide).
NO_SUB_TYPE = ""
