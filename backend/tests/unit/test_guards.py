"""Edge validation of percentages, amounts, levies and minimum premium."""

from decimal import Decimal

import pytest

from app.core.errors import (
    BelowMinimumPremiumError,
    InvalidFieldError,
    InvalidPercentageError,
    MalformedLeviesError,
)
from app.finance import coerce_levy_rates, ensure_minimum_premium, validate_amount, validate_percentage


class TestValidatePercentage:
    @pytest.mark.parametrize("value", [0, "7.5", 100])
    def test_accepts_range(self, value):
        assert validate_percentage("vat_pct", value) == Decimal(str(value))

    @pytest.mark.parametrize("value", ["-0.01", "100.01", "abc"])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(InvalidPercentageError) as exc_info:
            validate_percentage("brokerage_pct", value)
        assert exc_info.value.code == "PCT_RANGE"
        assert exc_info.value.details["field"] == "brokerage_pct"


def test_validate_amount():
    assert validate_amount("claim_amount", "1,500.50") == Decimal("1500.50")
    with pytest.raises(InvalidFieldError):
        validate_amount("claim_amount", 0)
    assert validate_amount("claim_amount", 0, allow_zero=True) == Decimal("0")


class TestCoerceLevyRates:
    def test_none_means_defaults(self):
        assert coerce_levy_rates(None) is None

    def test_json_string(self):
        assert coerce_levy_rates('{"niacom": "1.5", "ncrib": 0.5}') == {
            "niacom": Decimal("1.5"),
            "ncrib": Decimal("0.5"),
        }

    def test_unparseable_value_becomes_zero(self):
        assert coerce_levy_rates({"ed_tax": "n/a"}) == {"ed_tax": Decimal("0")}

    def test_negative_rate_rejected(self):
        with pytest.raises(MalformedLeviesError):
            coerce_levy_rates({"niacom": -1})

    @pytest.mark.parametrize("raw", [[1, 2], "not json", "[1, 2]", 42])
    def test_non_mapping_rejected(self, raw):
        with pytest.raises(MalformedLeviesError) as exc_info:
            coerce_levy_rates(raw)
        assert exc_info.value.code == "INVALID_LEVIES"


def test_ensure_minimum_premium():
    ensure_minimum_premium(10000, 10000)

    with pytest.raises(BelowMinimumPremiumError) as exc_info:
        ensure_minimum_premium("9999.99", "10000")

    error = exc_info.value
    assert error.http_status == 422
    assert error.details == {"providedPremium": "9999.99", "minPremium": "10000"}
