from decimal import Decimal

import pytest

from app.money import (
    InvalidAmountError, format_amount, from_cents, is_negligible, quantize, to_amount, to_cents,
)


def test_to_amount_parses_strings_ints_and_floats():
    assert to_amount("12.50") == Decimal("12.50")
    assert to_amount(3) == Decimal("3")
    assert to_amount(0.1) == Decimal("0.1")


@pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", float("nan"), float("inf"), "abc", None, True])
def test_to_amount_rejects_malformed(value):
    with pytest.raises(InvalidAmountError):
        to_amount(value)


def test_to_amount_rejects_negative_unless_allowed():
    with pytest.raises(InvalidAmountError):
        to_amount("-1")
    assert to_amount("-1", allow_negative=True) == Decimal("-1")


def test_invalid_amount_is_value_error():
    assert issubclass(InvalidAmountError, ValueError)


def test_quantize_rounds_half_up():
    assert quantize(Decimal("0.005")) == Decimal("0.01")
    assert quantize(Decimal("33.333")) == Decimal("33.33")


def test_cents_conversion():
    assert to_cents(Decimal("100.00")) == 10000
    assert from_cents(3334) == Decimal("33.34")


def test_is_negligible():
    assert is_negligible(Decimal("0.001"))
    assert is_negligible(Decimal("-0.01"))
    assert not is_negligible(Decimal("0.02"))


def test_format_amount_never_negative_zero():
    assert format_amount(Decimal("-0.001")) == "0.00"
    assert format_amount(Decimal("-12.5")) == "-12.50"


@pytest.mark.parametrize("value", ["1e30", "123456789012.34", "100000000"])
def test_to_amount_rejects_amounts_outside_column_range(value):
    with pytest.raises(InvalidAmountError):
        to_amount(value)


def test_to_amount_rounds_to_cents():
    assert str(to_amount("12.345")) == "12.35"
    assert to_amount("99999999.99") == Decimal("99999999.99")
