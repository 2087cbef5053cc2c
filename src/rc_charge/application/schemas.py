"""Pydantic schemas for the charge ledger.

Amounts travel as decimals with two fractional digits and are converted to
int cents here, at the edge. Responses carry all three renderings:
    amount="800.00", amountCents=80000, amountDisplay="$800.00"
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from config.settings import settings
from src.rc_charge.domain.models import Charge, ChargeStats, ChargeSummary, StatusBucket
from src.rc_common.cents import cents_to_decimal, cents_to_display, to_cents
from src.rc_common.enums import ChargeStatus, ChargeType
from src.rc_common.response import CamelModel

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateChargeRequest(CamelModel):
    resident_id: uuid.UUID
    type: ChargeType
    amount: Decimal = Field(..., ge=0, le=settings.MAX_CHARGE_AMOUNT, decimal_places=2)
    due_date: date
    description: str | None = Field(None, max_length=500)

    @property
    def amount_cents(self) -> int:
        return to_cents(self.amount)


class CreateMassChargesRequest(CamelModel):
    type: ChargeType
    amount: Decimal = Field(..., ge=0, le=settings.MAX_CHARGE_AMOUNT, decimal_places=2)
    due_date: date
    description: str | None = Field(None, max_length=500)

    @property
    def amount_cents(self) -> int:
        return to_cents(self.amount)


class SweepRequest(CamelModel):
    as_of: date | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ChargeResidentInfo(CamelModel):
    id: str
    house_number: str
    name: str
    email: str


class ChargeOut(CamelModel):
    id: str
    resident_id: str
    type: str
    amount: Decimal
    amount_cents: int
    amount_display: str
    due_date: date
    status: str
    paid_date: datetime | None
    description: str | None
    gateway_ref: str | None
    created_at: datetime
    updated_at: datetime
    resident: ChargeResidentInfo

    @classmethod
    def from_domain(cls, c: Charge) -> "ChargeOut":
        return cls(
            id=c.id,
            resident_id=c.resident_id,
            type=c.type,
            amount=cents_to_decimal(c.amount_cents),
            amount_cents=c.amount_cents,
            amount_display=cents_to_display(c.amount_cents),
            due_date=c.due_date,
            status=c.status,
            paid_date=c.paid_date,
            description=c.description,
            gateway_ref=c.gateway_ref,
            created_at=c.created_at,
            updated_at=c.updated_at,
            resident=ChargeResidentInfo(
                id=c.resident_id,
                house_number=c.house_number,
                name=c.resident_name,
                email=c.resident_email,
            ),
        )


def charges_json(charges: list[Charge]) -> list[dict]:
    return [ChargeOut.from_domain(c).to_json() for c in charges]


class ChargeSummaryOut(CamelModel):
    pending: int
    paid: int
    overdue: int
    outstanding_amount: Decimal
    outstanding_display: str

    @classmethod
    def from_domain(cls, s: ChargeSummary) -> "ChargeSummaryOut":
        return cls(
            pending=s.pending,
            paid=s.paid,
            overdue=s.overdue,
            outstanding_amount=cents_to_decimal(s.outstanding_cents),
            outstanding_display=cents_to_display(s.outstanding_cents),
        )


class BucketOut(CamelModel):
    count: int
    amount: Decimal
    amount_cents: int

    @classmethod
    def from_domain(cls, b: StatusBucket) -> "BucketOut":
        return cls(count=b.count, amount=cents_to_decimal(b.amount_cents), amount_cents=b.amount_cents)


class ChargeStatsOut(CamelModel):
    total: BucketOut
    pending: BucketOut
    paid: BucketOut
    overdue: BucketOut
    cancelled: BucketOut
    outstanding_amount: Decimal
    by_type: dict[str, BucketOut]

    @classmethod
    def from_domain(cls, s: ChargeStats) -> "ChargeStatsOut":
        return cls(
            total=BucketOut.from_domain(s.total),
            pending=BucketOut.from_domain(s.pending),
            paid=BucketOut.from_domain(s.paid),
            overdue=BucketOut.from_domain(s.overdue),
            cancelled=BucketOut.from_domain(s.cancelled),
            outstanding_amount=cents_to_decimal(s.outstanding_cents),
            by_type={
                t.value: BucketOut.from_domain(s.by_type.get(t.value, StatusBucket()))
                for t in ChargeType
            },
        )


class ChargeReportSummary(CamelModel):
    total_payments: int
    total_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal

    @classmethod
    def from_charges(cls, charges: list[Charge]) -> "ChargeReportSummary":
        total = sum(c.amount_cents for c in charges)
        paid = sum(c.amount_cents for c in charges if c.status == ChargeStatus.PAID.value)
        pending = sum(
            c.amount_cents
            for c in charges
            if c.status in (ChargeStatus.PENDING.value, ChargeStatus.OVERDUE.value)
        )
        return cls(
            total_payments=len(charges),
            total_amount=cents_to_decimal(total),
            paid_amount=cents_to_decimal(paid),
            pending_amount=cents_to_decimal(pending),
        )
