"""Unit tests for the charge status machine."""

import pytest

from src.rc_charge.domain.transitions import can_transition, is_payable


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        ("PENDING", "PAID", True),
        ("PENDING", "OVERDUE", True),
        ("OVERDUE", "PAID", True),
        ("OVERDUE", "PENDING", False),
        ("PAID", "PENDING", False),
        ("PAID", "OVERDUE", False),
        ("CANCELLED", "PAID", False),
        ("PENDING", "CANCELLED", False),
    ],
)
def test_can_transition(current, target, allowed) -> None:
    assert can_transition(current, target) is allowed


def test_payable_statuses() -> None:
    assert is_payable("PENDING")
    assert is_payable("OVERDUE")
    assert not is_payable("PAID")
    assert not is_payable("CANCELLED")


def test_unknown_status_raises() -> None:
    with pytest.raises(ValueError):
        can_transition("REFUNDED", "PAID")
