"""ChargeLedgerService: create, query and settle charges.

Every public operation takes the caller as an ``Actor`` and runs the
capability check before touching the store. Writes commit in two steps:
first the charge row, then the notification it causes. A failed
notification therefore never undoes a committed charge.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_charge.domain.models import Charge, ChargeFilter, ChargeStats, ChargeSummary
from src.rc_charge.domain.repository import ChargeRepositoryProtocol
from src.rc_charge.domain.transitions import is_payable
from src.rc_charge.infrastructure.persistence import ChargeRepository
from src.rc_common.batch import BatchResult, run_batch
from src.rc_common.database import SessionFactory
from src.rc_common.datetime_utils import month_label
from src.rc_common.errors import (
    ChargeNotFoundError,
    ChargeNotPayableError,
    NoActiveResidentsError,
    ResidentInactiveError,
    ResidentNotFoundError,
)
from src.rc_common.response import Pagination, page_offset
from src.rc_gateway.auth.capabilities import Actor, Capability, authorize
from src.rc_notification.application import messages
from src.rc_notification.application.service import NotificationService
from src.rc_resident.domain.models import Resident
from src.rc_resident.domain.repository import ResidentRepositoryProtocol
from src.rc_resident.infrastructure.persistence import ResidentRepository

logger = logging.getLogger("rc.charge")

RECENT_CHARGES = 5


def default_description(charge_type: str, due_date: date) -> str:
    """('MAINTENANCE', 2025-01-15) -> 'Maintenance charge - January 2025'."""
    return f"{charge_type.capitalize()} charge - {month_label(due_date)}"


class ChargeLedgerService:
    def __init__(
        self,
        repo: ChargeRepositoryProtocol | None = None,
        residents: ResidentRepositoryProtocol | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        self._repo: ChargeRepositoryProtocol = repo or ChargeRepository()
        self._residents: ResidentRepositoryProtocol = residents or ResidentRepository()
        self._notifications = notifications or NotificationService()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def _issue(
        self,
        db: AsyncSession,
        issued_by: str,
        resident: Resident,
        charge_type: str,
        amount_cents: int,
        due_date: date,
        description: str | None,
    ) -> Charge:
        charge = await self._repo.insert_charge(
            db,
            resident.id,
            issued_by,
            charge_type,
            amount_cents,
            due_date,
            description or default_description(charge_type, due_date),
        )
        await db.commit()
        await self._notifications.emit(db, messages.charge_issued(charge))
        await db.commit()
        logger.info(
            "Charge %s issued: %s %d cents to %s due %s",
            charge.id, charge_type, amount_cents, resident.house_number, due_date,
        )
        return charge

    async def create_charge(
        self,
        db: AsyncSession,
        actor: Actor,
        resident_id: str,
        charge_type: str,
        amount_cents: int,
        due_date: date,
        description: str | None = None,
    ) -> Charge:
        authorize(actor, Capability.MANAGE_LEDGER)
        resident = await self._residents.get_by_id(db, resident_id)
        if resident is None:
            raise ResidentNotFoundError(resident_id)
        if not resident.is_active:
            raise ResidentInactiveError(resident_id)
        return await self._issue(
            db, actor.account_id, resident, charge_type, amount_cents, due_date, description
        )

    async def create_charges_for_all_active(
        self,
        session_factory: SessionFactory,
        actor: Actor,
        charge_type: str,
        amount_cents: int,
        due_date: date,
        description: str | None = None,
    ) -> BatchResult[Charge]:
        """Issue the same charge to every active resident.

        Each resident is an independent unit of work. The result lists one
        outcome per resident; committed charges stay when others fail.
        """
        authorize(actor, Capability.MANAGE_LEDGER)

        async with session_factory() as db:
            residents = await self._residents.list_active(db)
        if not residents:
            raise NoActiveResidentsError()

        async def _issue_one(db: AsyncSession, resident: Resident) -> Charge:
            return await self._issue(
                db, actor.account_id, resident, charge_type, amount_cents, due_date, description
            )

        result = await run_batch(
            session_factory, residents, _issue_one, key=lambda r: r.house_number
        )
        logger.info(
            "Mass %s charges: %d created, %d failed",
            charge_type, len(result.succeeded), len(result.failed),
        )
        return result

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    async def settle(
        self,
        db: AsyncSession,
        charge_id: str,
        resident_id: str | None = None,
        gateway_ref: str | None = None,
    ) -> Charge:
        """Move a PENDING or OVERDUE charge to PAID and notify its resident.

        ``resident_id`` scopes the lookup, so a foreign charge reads as missing.
        Callers must have authorized the actor already.
        """
        charge = await self._repo.mark_paid(db, charge_id, resident_id, gateway_ref)
        if charge is None:
            existing = await self._repo.get_by_id(db, charge_id, resident_id)
            if existing is None:
                raise ChargeNotFoundError(charge_id)
            raise ChargeNotPayableError(charge_id, existing.status)
        await db.commit()
        await self._notifications.emit(db, messages.charge_paid(charge))
        await db.commit()
        logger.info("Charge %s marked PAID (ref=%s)", charge.id, gateway_ref)
        return charge

    async def mark_paid(self, db: AsyncSession, actor: Actor, charge_id: str) -> Charge:
        """Administrator path: any resident's charge."""
        authorize(actor, Capability.MANAGE_LEDGER)
        return await self.settle(db, charge_id)

    async def mark_paid_by_resident(
        self, db: AsyncSession, actor: Actor, charge_id: str
    ) -> Charge:
        """Resident self-mark without processor confirmation."""
        authorize(actor, Capability.PAY_CHARGE)
        return await self.settle(db, charge_id, resident_id=actor.resident_id)

    async def get_payable_for_resident(
        self, db: AsyncSession, actor: Actor, charge_id: str
    ) -> Charge:
        authorize(actor, Capability.PAY_CHARGE)
        charge = await self._repo.get_by_id(db, charge_id, actor.resident_id)
        if charge is None:
            raise ChargeNotFoundError(charge_id)
        if not is_payable(charge.status):
            raise ChargeNotPayableError(charge_id, charge.status)
        return charge

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _scoped(self, actor: Actor, flt: ChargeFilter) -> ChargeFilter:
        if actor.is_admin:
            authorize(actor, Capability.MANAGE_LEDGER)
            return flt
        authorize(actor, Capability.VIEW_OWN_CHARGES)
        flt.resident_id = actor.resident_id
        return flt

    async def list_charges(
        self,
        db: AsyncSession,
        actor: Actor,
        flt: ChargeFilter,
        page: int,
        limit: int,
    ) -> tuple[list[Charge], Pagination]:
        """Newest-created first; residents only ever see their own charges."""
        flt = self._scoped(actor, flt)
        charges = await self._repo.list_charges(db, flt, page_offset(page, limit), limit)
        total = await self._repo.count_charges(db, flt)
        return charges, Pagination.build(page, limit, total)

    async def list_own_charges(
        self,
        db: AsyncSession,
        actor: Actor,
        flt: ChargeFilter,
        page: int,
        limit: int,
    ) -> tuple[list[Charge], Pagination]:
        """The caller's own charges; admins need a resident profile here too."""
        authorize(actor, Capability.VIEW_OWN_CHARGES)
        flt.resident_id = actor.resident_id
        charges = await self._repo.list_charges(db, flt, page_offset(page, limit), limit)
        total = await self._repo.count_charges(db, flt)
        return charges, Pagination.build(page, limit, total)

    async def list_pending(self, db: AsyncSession, actor: Actor) -> list[Charge]:
        authorize(actor, Capability.VIEW_OWN_CHARGES)
        return await self._repo.list_payable_for_resident(db, actor.resident_id or "")

    async def summarize(
        self, db: AsyncSession, actor: Actor
    ) -> tuple[ChargeSummary, list[Charge]]:
        authorize(actor, Capability.VIEW_OWN_CHARGES)
        resident_id = actor.resident_id or ""
        summary = await self._repo.summarize(db, resident_id)
        recent = await self._repo.list_charges(
            db, ChargeFilter(resident_id=resident_id), 0, RECENT_CHARGES
        )
        return summary, recent

    async def aggregate_stats(self, db: AsyncSession, actor: Actor) -> ChargeStats:
        authorize(actor, Capability.MANAGE_LEDGER)
        return await self._repo.aggregate_stats(db)

    async def report(self, db: AsyncSession, actor: Actor, flt: ChargeFilter) -> list[Charge]:
        """Every charge matching ``flt``, unpaginated."""
        authorize(actor, Capability.MANAGE_LEDGER)
        return await self._repo.list_charges(db, flt, 0, None)
