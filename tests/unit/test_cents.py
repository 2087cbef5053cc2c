"""Unit tests for integer-cents money helpers."""

from decimal import Decimal

import pytest

from src.rc_common.cents import cents_to_decimal, cents_to_display, to_cents


class TestToCents:
    def test_two_decimal_amount(self) -> None:
        assert to_cents(Decimal("800.00")) == 80000

    def test_accepts_int_and_str(self) -> None:
        assert to_cents(15) == 1500
        assert to_cents("0.05") == 5

    def test_float_uses_its_decimal_repr(self) -> None:
        assert to_cents(0.1) == 10

    def test_zero_is_allowed(self) -> None:
        assert to_cents(Decimal("0")) == 0

    @pytest.mark.parametrize("bad", [Decimal("-0.01"), "abc", Decimal("1.005"), "NaN", "Infinity"])
    def test_rejects_invalid_amounts(self, bad) -> None:
        with pytest.raises(ValueError):
            to_cents(bad)


def test_cents_to_decimal() -> None:
    assert cents_to_decimal(80000) == Decimal("800.00")
    assert str(cents_to_decimal(5)) == "0.05"


def test_cents_to_display() -> None:
    assert cents_to_display(80000) == "$800.00"
    assert cents_to_display(123456789) == "$1,234,567.89"
    assert cents_to_display(-1200) == "-$12.00"
