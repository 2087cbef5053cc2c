"""Admin application service: resident registry, dashboard stats, reports.

Charge, document and notification work is delegated to their own services;
this layer only adds the admin-console views on top.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_charge.application.service import ChargeLedgerService
from src.rc_charge.domain.models import Charge, ChargeFilter, ChargeStats
from src.rc_common.errors import ResidentNotFoundError
from src.rc_common.response import Pagination, page_offset
from src.rc_document.domain.models import Document
from src.rc_document.domain.repository import DocumentRepositoryProtocol
from src.rc_document.infrastructure.persistence import DocumentRepository
from src.rc_gateway.account.db_models import AccountModel
from src.rc_gateway.account.service import AccountService
from src.rc_gateway.auth.capabilities import Actor, Capability, authorize
from src.rc_resident.domain.models import Resident
from src.rc_resident.domain.repository import ResidentRepositoryProtocol
from src.rc_resident.infrastructure.persistence import ResidentRepository

logger = logging.getLogger("rc.admin")

RECENT_ITEMS = 10

_COUNTS_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM residents) AS total_residents,
        (SELECT COUNT(*) FROM residents WHERE is_active) AS active_residents,
        (SELECT COUNT(*) FROM accounts) AS total_accounts,
        (SELECT COUNT(*) FROM documents) AS total_documents,
        (SELECT COUNT(*) FROM notifications WHERE is_read = FALSE) AS unread_notifications
""")


@dataclass
class ResidentDetail:
    resident: Resident
    recent_charges: list[Charge]
    recent_documents: list[Document]


@dataclass
class DashboardStats:
    counts: dict[str, int]
    charges: ChargeStats


class AdminService:
    def __init__(
        self,
        residents: ResidentRepositoryProtocol | None = None,
        documents: DocumentRepositoryProtocol | None = None,
        ledger: ChargeLedgerService | None = None,
        accounts: AccountService | None = None,
    ) -> None:
        self._residents: ResidentRepositoryProtocol = residents or ResidentRepository()
        self._documents: DocumentRepositoryProtocol = documents or DocumentRepository()
        self._ledger = ledger or ChargeLedgerService()
        self._accounts = accounts or AccountService()

    # ------------------------------------------------------------------
    # Resident registry
    # ------------------------------------------------------------------

    async def list_residents(
        self,
        db: AsyncSession,
        actor: Actor,
        is_active: bool | None,
        search: str | None,
        page: int,
        limit: int,
    ) -> tuple[list[Resident], Pagination]:
        authorize(actor, Capability.MANAGE_RESIDENTS)
        search = search.strip() if search else None
        residents = await self._residents.list_residents(
            db, is_active, search or None, page_offset(page, limit), limit
        )
        total = await self._residents.count_residents(db, is_active, search or None)
        return residents, Pagination.build(page, limit, total)

    async def get_resident(self, db: AsyncSession, actor: Actor, resident_id: str) -> ResidentDetail:
        authorize(actor, Capability.MANAGE_RESIDENTS)
        resident = await self._residents.get_by_id(db, resident_id)
        if resident is None:
            raise ResidentNotFoundError(resident_id)
        charges, _ = await self._ledger.list_charges(
            db, actor, ChargeFilter(resident_id=resident_id), 1, RECENT_ITEMS
        )
        documents = await self._documents.list_documents(db, resident_id, None, 0, RECENT_ITEMS)
        return ResidentDetail(resident, charges, documents)

    async def set_resident_active(
        self, db: AsyncSession, actor: Actor, resident_id: str, is_active: bool
    ) -> Resident:
        """Deactivation blocks new charges; existing charges are untouched."""
        authorize(actor, Capability.MANAGE_RESIDENTS)
        resident = await self._residents.set_active(db, resident_id, is_active)
        if resident is None:
            raise ResidentNotFoundError(resident_id)
        logger.info(
            "Resident %s (%s) %s", resident.id, resident.house_number,
            "activated" if is_active else "deactivated",
        )
        return resident

    async def provision_resident(
        self,
        db: AsyncSession,
        actor: Actor,
        email: str,
        password: str,
        name: str,
        house_number: str,
        phone: str | None,
    ) -> AccountModel:
        authorize(actor, Capability.MANAGE_RESIDENTS)
        return await self._accounts.register(email, password, name, house_number, phone, db)

    async def create_admin(
        self, db: AsyncSession, actor: Actor, email: str, password: str, name: str
    ) -> AccountModel:
        authorize(actor, Capability.MANAGE_RESIDENTS)
        return await self._accounts.create_admin(email, password, name, db)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    async def dashboard_stats(self, db: AsyncSession, actor: Actor) -> DashboardStats:
        charges = await self._ledger.aggregate_stats(db, actor)
        row = (await db.execute(_COUNTS_SQL)).one()
        counts = {
            "totalResidents": int(row.total_residents),
            "activeResidents": int(row.active_residents),
            "totalAccounts": int(row.total_accounts),
            "totalDocuments": int(row.total_documents),
            "unreadNotifications": int(row.unread_notifications),
        }
        return DashboardStats(counts=counts, charges=charges)
