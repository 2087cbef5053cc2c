"""Repository Protocol for the notification outbox."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_notification.domain.models import Notification, NotificationDraft


class NotificationRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, draft: NotificationDraft) -> Notification: ...

    async def get_by_id(self, db: AsyncSession, notification_id: str) -> Notification | None: ...

    async def list_for_account(
        self,
        db: AsyncSession,
        account_id: str,
        is_read: bool | None,
        offset: int,
        limit: int | None,
    ) -> list[Notification]: ...

    async def count_for_account(
        self, db: AsyncSession, account_id: str, is_read: bool | None
    ) -> int: ...

    async def mark_read(self, db: AsyncSession, notification_id: str) -> Notification | None: ...

    async def mark_all_read(self, db: AsyncSession, account_id: str) -> int: ...

    async def delete(self, db: AsyncSession, notification_id: str) -> bool: ...
