"""NotificationService: per-account outbox plus the emit hook used by other modules.

``emit`` only executes the INSERT; the caller decides when to commit so that a
notification is always a separate write from the event that caused it.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.batch import BatchResult, run_batch
from src.rc_common.database import SessionFactory
from src.rc_common.errors import NoActiveResidentsError, NotificationNotFoundError
from src.rc_common.response import Pagination, page_offset
from src.rc_gateway.auth.capabilities import Actor, Capability, authorize
from src.rc_notification.domain.models import Notification, NotificationDraft
from src.rc_notification.domain.repository import NotificationRepositoryProtocol
from src.rc_notification.infrastructure.persistence import NotificationRepository
from src.rc_resident.domain.models import Resident
from src.rc_resident.domain.repository import ResidentRepositoryProtocol
from src.rc_resident.infrastructure.persistence import ResidentRepository

logger = logging.getLogger("rc.notification")


class NotificationService:
    def __init__(
        self,
        repo: NotificationRepositoryProtocol | None = None,
        residents: ResidentRepositoryProtocol | None = None,
    ) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()
        self._residents: ResidentRepositoryProtocol = residents or ResidentRepository()

    async def emit(self, db: AsyncSession, draft: NotificationDraft) -> Notification:
        notification = await self._repo.insert(db, draft)
        logger.debug("Notification %s queued for account %s", draft.type, draft.account_id)
        return notification

    async def list_notifications(
        self,
        db: AsyncSession,
        actor: Actor,
        is_read: bool | None,
        page: int,
        limit: int,
    ) -> tuple[list[Notification], Pagination]:
        items = await self._repo.list_for_account(
            db, actor.account_id, is_read, page_offset(page, limit), limit
        )
        total = await self._repo.count_for_account(db, actor.account_id, is_read)
        return items, Pagination.build(page, limit, total)

    async def list_unread(self, db: AsyncSession, actor: Actor) -> list[Notification]:
        return await self._repo.list_for_account(db, actor.account_id, False, 0, None)

    async def unread_count(self, db: AsyncSession, actor: Actor) -> int:
        return await self._repo.count_for_account(db, actor.account_id, False)

    async def _get_owned(
        self, db: AsyncSession, actor: Actor, notification_id: str
    ) -> Notification:
        notification = await self._repo.get_by_id(db, notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        authorize(
            actor,
            Capability.MANAGE_OWN_NOTIFICATION,
            owner_account_id=notification.account_id,
        )
        return notification

    async def mark_read(
        self, db: AsyncSession, actor: Actor, notification_id: str
    ) -> Notification:
        await self._get_owned(db, actor, notification_id)
        notification = await self._repo.mark_read(db, notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        return notification

    async def mark_all_read(self, db: AsyncSession, actor: Actor) -> int:
        return await self._repo.mark_all_read(db, actor.account_id)

    async def delete(self, db: AsyncSession, actor: Actor, notification_id: str) -> None:
        await self._get_owned(db, actor, notification_id)
        if not await self._repo.delete(db, notification_id):
            raise NotificationNotFoundError(notification_id)

    async def send_mass(
        self,
        session_factory: SessionFactory,
        actor: Actor,
        title: str,
        message: str,
        notification_type: str,
        resident_ids: list[str] | None = None,
    ) -> BatchResult[Notification]:
        """Fan a notification out to every active resident, or the given subset."""
        authorize(actor, Capability.SEND_NOTIFICATIONS)

        async with session_factory() as db:
            residents = await self._residents.list_active(db, resident_ids)
        if not residents:
            raise NoActiveResidentsError()

        async def _send(db: AsyncSession, resident: Resident) -> Notification:
            draft = NotificationDraft(
                account_id=resident.account_id,
                title=title,
                message=message,
                type=notification_type,
            )
            notification = await self.emit(db, draft)
            await db.commit()
            return notification

        result = await run_batch(session_factory, residents, _send, key=lambda r: r.house_number)
        logger.info(
            "Mass notification sent: %d delivered, %d failed",
            len(result.succeeded),
            len(result.failed),
        )
        return result
