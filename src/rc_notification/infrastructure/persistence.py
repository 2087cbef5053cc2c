"""NotificationRepository: raw text() SQL over the notifications table."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_notification.domain.models import Notification, NotificationDraft

_COLUMNS = "id, account_id, title, message, type, is_read, created_at"

_INSERT_SQL = text(f"""
    INSERT INTO notifications (account_id, title, message, type, is_read)
    VALUES (:account_id, :title, :message, :type, FALSE)
    RETURNING {_COLUMNS}
""")

_GET_SQL = text(f"SELECT {_COLUMNS} FROM notifications WHERE id = :id")

_FILTER = """
    account_id = :account_id
    AND (CAST(:is_read AS BOOLEAN) IS NULL OR is_read = CAST(:is_read AS BOOLEAN))
"""

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM notifications
    WHERE {_FILTER}
    ORDER BY created_at DESC, id DESC
    OFFSET :offset
    LIMIT :limit
""")

_COUNT_SQL = text(f"SELECT COUNT(*) FROM notifications WHERE {_FILTER}")

_MARK_READ_SQL = text(f"""
    UPDATE notifications SET is_read = TRUE
    WHERE id = :id
    RETURNING {_COLUMNS}
""")

_MARK_ALL_READ_SQL = text("""
    UPDATE notifications SET is_read = TRUE
    WHERE account_id = :account_id AND is_read = FALSE
""")

_DELETE_SQL = text("DELETE FROM notifications WHERE id = :id RETURNING id")


def _row_to_notification(row: object) -> Notification:
    return Notification(
        id=str(row.id),  # type: ignore[attr-defined]
        account_id=str(row.account_id),  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        message=row.message,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        is_read=row.is_read,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class NotificationRepository:
    async def insert(self, db: AsyncSession, draft: NotificationDraft) -> Notification:
        result = await db.execute(
            _INSERT_SQL,
            {
                "account_id": draft.account_id,
                "title": draft.title,
                "message": draft.message,
                "type": draft.type,
            },
        )
        return _row_to_notification(result.one())

    async def get_by_id(self, db: AsyncSession, notification_id: str) -> Notification | None:
        row = (await db.execute(_GET_SQL, {"id": notification_id})).fetchone()
        return _row_to_notification(row) if row else None

    async def list_for_account(
        self,
        db: AsyncSession,
        account_id: str,
        is_read: bool | None,
        offset: int,
        limit: int | None,
    ) -> list[Notification]:
        result = await db.execute(
            _LIST_SQL,
            {"account_id": account_id, "is_read": is_read, "offset": offset, "limit": limit},
        )
        return [_row_to_notification(row) for row in result.fetchall()]

    async def count_for_account(
        self, db: AsyncSession, account_id: str, is_read: bool | None
    ) -> int:
        result = await db.execute(_COUNT_SQL, {"account_id": account_id, "is_read": is_read})
        return int(result.scalar_one())

    async def mark_read(self, db: AsyncSession, notification_id: str) -> Notification | None:
        row = (await db.execute(_MARK_READ_SQL, {"id": notification_id})).fetchone()
        return _row_to_notification(row) if row else None

    async def mark_all_read(self, db: AsyncSession, account_id: str) -> int:
        result = await db.execute(_MARK_ALL_READ_SQL, {"account_id": account_id})
        return result.rowcount  # type: ignore[attr-defined]

    async def delete(self, db: AsyncSession, notification_id: str) -> bool:
        row = (await db.execute(_DELETE_SQL, {"id": notification_id})).fetchone()
        return row is not None
