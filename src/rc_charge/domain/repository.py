"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_charge.domain.models import Charge, ChargeFilter, ChargeStats, ChargeSummary


class ChargeRepositoryProtocol(Protocol):
    async def insert_charge(
        self,
        db: AsyncSession,
        resident_id: str,
        issued_by: str,
        charge_type: str,
        amount_cents: int,
        due_date: date,
        description: str | None,
    ) -> Charge: ...

    async def get_by_id(
        self, db: AsyncSession, charge_id: str, resident_id: str | None = None
    ) -> Charge | None: ...

    async def get_by_gateway_ref(self, db: AsyncSession, gateway_ref: str) -> Charge | None: ...

    async def mark_paid(
        self,
        db: AsyncSession,
        charge_id: str,
        resident_id: str | None = None,
        gateway_ref: str | None = None,
    ) -> Charge | None: ...

    async def mark_overdue(self, db: AsyncSession, charge_id: str) -> Charge | None: ...

    async def list_overdue_candidates(self, db: AsyncSession, as_of: date) -> list[Charge]: ...

    async def list_charges(
        self, db: AsyncSession, flt: ChargeFilter, offset: int, limit: int | None
    ) -> list[Charge]: ...

    async def count_charges(self, db: AsyncSession, flt: ChargeFilter) -> int: ...

    async def list_payable_for_resident(
        self, db: AsyncSession, resident_id: str
    ) -> list[Charge]: ...

    async def summarize(self, db: AsyncSession, resident_id: str) -> ChargeSummary: ...

    async def aggregate_stats(self, db: AsyncSession) -> ChargeStats: ...
