"""
Domain-specific exception hierarchy for numbering, costing and issuance.

All exceptions inherit from BrokerageError so callers can catch broadly
or narrowly as needed.  Each exception carries a stable `code` and
structured `details` for logging and for the API error payload.
"""

from __future__ import annotations

from typing import Any


class BrokerageError(Exception):
    """Base exception for all domain errors."""

    code: str = "BROKERAGE_ERROR"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the JSON error response."""
        return {"error": self.message, "code": self.code, "details": self.details}


# ─── Sequence generator ──────────────────────────────────

class SequenceError(BrokerageError):
    """Base class for sequence generator failures."""

    code = "SEQUENCE_GENERATION_FAILED"


class SequenceConflictError(SequenceError):
    """The increment could not be committed after all retry attempts."""

    code = "SEQUENCE_CONFLICT"

    def __init__(self, message: str, *, attempts: int = 0, **kwargs) -> None:
        self.attempts = attempts
        super().__init__(message, **kwargs)
        self.details.setdefault("attempts", attempts)


class SequenceStoreError(SequenceError):
    """The sequence store is unreachable or failed unexpectedly."""

    code = "SEQUENCE_STORE_UNAVAILABLE"


class UnknownEntityTypeError(SequenceError):
    """The numbering series does not exist."""

    code = "UNKNOWN_ENTITY_TYPE"
    http_status = 400


class InvalidSubTypeError(SequenceError):
    """The sub-type is missing, not allowed, or not recognised."""

    code = "INVALID_SUB_TYPE"
    http_status = 400


class InvalidYearError(SequenceError):
    """The partition year is not a 4-digit calendar year."""

    code = "INVALID_YEAR"
    http_status = 400


class MalformedCodeError(SequenceError):
    """A document code string does not match any known template."""

    code = "MALFORMED_CODE"
    http_status = 400


# ─── Financial calculator guards ─────────────────────────

class InvalidPercentageError(BrokerageError):
    """A percentage argument falls outside [0, 100] or is not numeric."""

    code = "PCT_RANGE"
    http_status = 400

    def __init__(self, message: str, *, field: str, value: Any = None, **kwargs) -> None:
        self.field = field
        self.value = value
        super().__init__(message, **kwargs)
        self.details.setdefault("field", field)
        self.details.setdefault("value", str(value))


class InvalidFieldError(BrokerageError):
    """A request field is malformed or out of range (amounts, dates)."""

    code = "INVALID_FIELD"
    http_status = 400

    def __init__(self, message: str, *, field: str, value: Any = None, **kwargs) -> None:
        self.field = field
        super().__init__(message, **kwargs)
        self.details.setdefault("field", field)
        self.details.setdefault("value", str(value))


class BelowMinimumPremiumError(BrokerageError):
    """Gross premium is below the LOB / Sub-LOB minimum."""

    code = "BELOW_MIN_PREMIUM"
    http_status = 422

    def __init__(self, message: str, *, gross_premium: Any, min_premium: Any, **kwargs) -> None:
        self.gross_premium = gross_premium
        self.min_premium = min_premium
        super().__init__(message, **kwargs)
        self.details.setdefault("providedPremium", str(gross_premium))
        self.details.setdefault("minPremium", str(min_premium))


class MalformedLeviesError(BrokerageError):
    """The levies structure cannot be coerced to a numeric mapping."""

    code = "INVALID_LEVIES"
    http_status = 400


class CoInsuranceError(BrokerageError):
    """Co-insurance shares are missing or do not sum to 100%."""

    code = "INVALID_COINSURANCE_PCT"
    http_status = 400


# ─── Issuance workflow ───────────────────────────────────

class NotFoundError(BrokerageError):
    """A referenced record (LOB, policy, client ...) does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class IssuanceError(BrokerageError):
    """The owning record could not be persisted after numbering."""

    code = "ISSUANCE_FAILED"
    http_status = 409
