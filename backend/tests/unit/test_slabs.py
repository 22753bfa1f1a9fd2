"""Slabs, minimum premium, commission and co-insurance splits."""

from decimal import Decimal

import pytest

from app.core.errors import CoInsuranceError
from app.finance import (
    allocate_co_insurance,
    format_currency,
    format_percentage,
    slab_name,
    split_commission,
    suggest_brokerage_slab,
    validate_minimum_premium,
)


@pytest.mark.parametrize(
    "gross, expected",
    [
        ("999999.99", Decimal("9")),
        ("1000000", Decimal("15")),
        ("9999999.99", Decimal("15")),
        ("10000000", Decimal("20")),
    ],
)
def test_suggest_brokerage_slab_boundaries(gross, expected):
    assert suggest_brokerage_slab(gross) == expected


def test_slab_names():
    assert slab_name(9) == "Basic (9%)"
    assert slab_name(Decimal("15.0000")) == "Standard (15%)"
    assert slab_name(20) == "Premium (20%)"
    assert slab_name("12.5") == "Custom (12.5%)"


class TestMinimumPremium:
    def test_one_cent_below_fails(self):
        check = validate_minimum_premium("9999.99", 10000)
        assert check.valid is False
        assert check.message == "Gross premium (₦9,999.99) is below minimum required (₦10,000.00)"

    def test_equal_to_minimum_passes(self):
        check = validate_minimum_premium(10000, 10000)
        assert check.valid is True
        assert check.message is None

    def test_zero_minimum_always_passes(self):
        assert validate_minimum_premium(0, 0).valid is True


def test_format_currency():
    assert format_currency(1234567.891) == "₦1,234,567.89"
    assert format_currency(-50, "USD") == "-$50.00"
    assert format_currency(10, "XOF") == "XOF 10.00"


def test_format_percentage():
    assert format_percentage(Decimal("12.5")) == "12.50%"
    assert format_percentage("0.20005", decimals=4) == "0.2001%"


def test_split_commission():
    shares = split_commission(10000, [{"agent_id": 1, "percentage": 60}, {"agent_id": 2, "percentage": 40}])

    assert [(s.agent_id, s.amount) for s in shares] == [(1, Decimal("6000.00")), (2, Decimal("4000.00"))]


class TestCoInsurance:
    def test_allocates_by_percentage(self):
        allocations = allocate_co_insurance(
            250000, [{"insurer_id": 1, "percentage": 60}, {"insurer_id": 2, "percentage": 40}]
        )
        assert [a.amount for a in allocations] == [Decimal("150000.00"), Decimal("100000.00")]

    def test_total_within_tolerance_is_accepted(self):
        allocations = allocate_co_insurance(
            100, [{"insurer_id": 1, "percentage": "33.33"}, {"insurer_id": 2, "percentage": "66.675"}]
        )
        assert len(allocations) == 2

    def test_total_must_be_100(self):
        with pytest.raises(CoInsuranceError) as exc_info:
            allocate_co_insurance(1000, [{"insurer_id": 1, "percentage": 60}, {"insurer_id": 2, "percentage": 30}])
        assert exc_info.value.code == "INVALID_COINSURANCE_PCT"
        assert exc_info.value.details["total_percentage"] == "90.00"
        assert exc_info.value.message.endswith("got 90.00%")

    def test_empty_shares_rejected(self):
        with pytest.raises(CoInsuranceError):
            allocate_co_insurance(1000, [])

    def test_non_positive_share_rejected(self):
        with pytest.raises(CoInsuranceError):
            allocate_co_insurance(1000, [{"insurer_id": 1, "percentage": 100}, {"insurer_id": 2, "percentage": 0}])
