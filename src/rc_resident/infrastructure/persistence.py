"""ResidentRepository: concrete implementation of ResidentRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_resident.domain.models import Resident

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    r.id, r.account_id, r.house_number, r.phone, r.is_active, r.created_at,
    a.name, a.email
"""

_GET_RESIDENT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM residents r
    JOIN accounts a ON a.id = r.account_id
    WHERE r.id = :resident_id
""")

_FILTER = """
    (CAST(:is_active AS BOOLEAN) IS NULL OR r.is_active = CAST(:is_active AS BOOLEAN))
    AND (
        CAST(:pattern AS TEXT) IS NULL
        OR r.house_number ILIKE CAST(:pattern AS TEXT) ESCAPE '\\'
        OR a.name ILIKE CAST(:pattern AS TEXT) ESCAPE '\\'
        OR a.email ILIKE CAST(:pattern AS TEXT) ESCAPE '\\'
    )
"""

_LIST_RESIDENTS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS},
           (SELECT COUNT(*) FROM charges c WHERE c.resident_id = r.id) AS payment_count,
           (SELECT COUNT(*) FROM documents d WHERE d.resident_id = r.id) AS document_count
    FROM residents r
    JOIN accounts a ON a.id = r.account_id
    WHERE {_FILTER}
    ORDER BY r.house_number ASC
    OFFSET :offset
    LIMIT :limit
""")

_COUNT_RESIDENTS_SQL = text(f"""
    SELECT COUNT(*)
    FROM residents r
    JOIN accounts a ON a.id = r.account_id
    WHERE {_FILTER}
""")

_LIST_ACTIVE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM residents r
    JOIN accounts a ON a.id = r.account_id
    WHERE r.is_active = TRUE
    ORDER BY r.house_number ASC
""")

_LIST_ACTIVE_IN_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM residents r
    JOIN accounts a ON a.id = r.account_id
    WHERE r.is_active = TRUE AND r.id = ANY(CAST(:resident_ids AS UUID[]))
    ORDER BY r.house_number ASC
""")

_SET_ACTIVE_SQL = text("""
    UPDATE residents
    SET is_active = :is_active
    WHERE id = :resident_id
    RETURNING id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_resident(row: object) -> Resident:
    return Resident(
        id=str(row.id),  # type: ignore[attr-defined]
        account_id=str(row.account_id),  # type: ignore[attr-defined]
        house_number=row.house_number,  # type: ignore[attr-defined]
        phone=row.phone,  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        payment_count=getattr(row, "payment_count", 0),
        document_count=getattr(row, "document_count", 0),
    )


def contains_pattern(search: str | None) -> str | None:
    """Substring ILIKE pattern with the LIKE wildcards in ``search`` escaped."""
    if not search:
        return None
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ResidentRepository:
    async def get_by_id(self, db: AsyncSession, resident_id: str) -> Resident | None:
        result = await db.execute(_GET_RESIDENT_SQL, {"resident_id": resident_id})
        row = result.fetchone()
        return _row_to_resident(row) if row else None

    async def list_residents(
        self,
        db: AsyncSession,
        is_active: bool | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> list[Resident]:
        result = await db.execute(
            _LIST_RESIDENTS_SQL,
            {
                "is_active": is_active,
                "pattern": contains_pattern(search),
                "offset": offset,
                "limit": limit,
            },
        )
        return [_row_to_resident(row) for row in result.fetchall()]

    async def count_residents(
        self, db: AsyncSession, is_active: bool | None, search: str | None
    ) -> int:
        result = await db.execute(
            _COUNT_RESIDENTS_SQL, {"is_active": is_active, "pattern": contains_pattern(search)}
        )
        return int(result.scalar_one())

    async def list_active(
        self, db: AsyncSession, resident_ids: list[str] | None = None
    ) -> list[Resident]:
        if resident_ids:
            result = await db.execute(_LIST_ACTIVE_IN_SQL, {"resident_ids": resident_ids})
        else:
            result = await db.execute(_LIST_ACTIVE_SQL)
        return [_row_to_resident(row) for row in result.fetchall()]

    async def set_active(
        self, db: AsyncSession, resident_id: str, is_active: bool
    ) -> Resident | None:
        result = await db.execute(
            _SET_ACTIVE_SQL, {"resident_id": resident_id, "is_active": is_active}
        )
        if result.fetchone() is None:
            return None
        return await self.get_by_id(db, resident_id)
