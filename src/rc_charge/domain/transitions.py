"""Charge status transitions.

    PENDING ──► PAID
       │          ▲
       └──► OVERDUE
PAID and CANCELLED are terminal. The repository enforces the same rule in
the WHERE clause of every guarded UPDATE; this module is the in-memory
mirror used to pick the right error once an UPDATE matched no row.
"""

from src.rc_common.enums import ChargeStatus

_ALLOWED: dict[ChargeStatus, frozenset[ChargeStatus]] = {
    ChargeStatus.PENDING: frozenset({ChargeStatus.PAID, ChargeStatus.OVERDUE}),
    ChargeStatus.OVERDUE: frozenset({ChargeStatus.PAID}),
    ChargeStatus.PAID: frozenset(),
    ChargeStatus.CANCELLED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return ChargeStatus(target) in _ALLOWED[ChargeStatus(current)]


def is_payable(status: str) -> bool:
    return can_transition(status, ChargeStatus.PAID.value)
