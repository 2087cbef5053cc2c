"""Domain models for rc_charge: pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class Charge:
    id: str
    resident_id: str
    issued_by: str
    type: str                       # ChargeType value
    amount_cents: int
    due_date: date
    status: str                     # ChargeStatus value
    paid_date: datetime | None
    description: str | None
    gateway_ref: str | None
    created_at: datetime
    updated_at: datetime
    # Denormalised from residents/accounts for notifications and listings
    account_id: str = ""
    house_number: str = ""
    resident_name: str = ""
    resident_email: str = ""


@dataclass
class ChargeFilter:
    resident_id: str | None = None
    status: str | None = None
    type: str | None = None
    date_from: date | None = None   # inclusive, on created_at
    date_to: date | None = None     # inclusive, on created_at


@dataclass
class ChargeSummary:
    """Per-resident counts and outstanding (PENDING + OVERDUE) amount."""

    pending: int = 0
    paid: int = 0
    overdue: int = 0
    outstanding_cents: int = 0


@dataclass
class StatusBucket:
    count: int = 0
    amount_cents: int = 0


@dataclass
class ChargeStats:
    """Global counts and summed amounts across every resident."""

    total: StatusBucket = field(default_factory=StatusBucket)
    pending: StatusBucket = field(default_factory=StatusBucket)
    paid: StatusBucket = field(default_factory=StatusBucket)
    overdue: StatusBucket = field(default_factory=StatusBucket)
    cancelled: StatusBucket = field(default_factory=StatusBucket)
    by_type: dict[str, StatusBucket] = field(default_factory=dict)

    @property
    def outstanding_cents(self) -> int:
        return self.pending.amount_cents + self.overdue.amount_cents
