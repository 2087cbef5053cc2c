"""OverdueSweeper: reclassify stale PENDING charges as OVERDUE.

Triggered on demand (admin endpoint or scripts/run_overdue_sweep.py); there is
no scheduler in-process. Each candidate is flipped with a guarded UPDATE in its
own session, and a PAYMENT_DUE notification is written only when that UPDATE
actually moved the row. Running twice with the same cutoff is a no-op the
second time.
"""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_charge.domain.models import Charge
from src.rc_charge.domain.repository import ChargeRepositoryProtocol
from src.rc_charge.infrastructure.persistence import ChargeRepository
from src.rc_common.batch import BatchResult, run_batch
from src.rc_common.database import SessionFactory
from src.rc_common.datetime_utils import utc_today
from src.rc_gateway.auth.capabilities import Actor, Capability, authorize
from src.rc_notification.application import messages
from src.rc_notification.application.service import NotificationService

logger = logging.getLogger("rc.sweeper")


@dataclass
class SweepReport:
    as_of: date
    candidates: int
    result: BatchResult[Charge | None]

    @property
    def count(self) -> int:
        """Charges this run actually moved to OVERDUE."""
        return sum(1 for o in self.result.succeeded if o.value is not None)


class OverdueSweeper:
    def __init__(
        self,
        repo: ChargeRepositoryProtocol | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        self._repo: ChargeRepositoryProtocol = repo or ChargeRepository()
        self._notifications = notifications or NotificationService()

    async def _flip(self, db: AsyncSession, candidate: Charge) -> Charge | None:
        charge = await self._repo.mark_overdue(db, candidate.id)
        if charge is None:
            # paid or swept by someone else since the candidate query
            return None
        await db.commit()
        await self._notifications.emit(db, messages.charge_overdue(charge))
        await db.commit()
        return charge

    async def sweep(
        self,
        session_factory: SessionFactory,
        actor: Actor,
        as_of: date | None = None,
    ) -> SweepReport:
        authorize(actor, Capability.RUN_SWEEP)
        cutoff = as_of or utc_today()

        async with session_factory() as db:
            candidates = await self._repo.list_overdue_candidates(db, cutoff)

        result = await run_batch(session_factory, candidates, self._flip, key=lambda c: c.id)
        report = SweepReport(as_of=cutoff, candidates=len(candidates), result=result)
        logger.info(
            "Overdue sweep as of %s: %d candidates, %d marked OVERDUE, %d failed",
            cutoff, report.candidates, report.count, len(result.failed),
        )
        return report
