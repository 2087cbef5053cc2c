"""ChargeRepository: concrete implementation of ChargeRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Status changes are single guarded UPDATE statements: the allowed source
statuses sit in the WHERE clause, so a concurrent writer can never move a
charge out of PAID. Zero returned rows means "not found or not allowed";
the caller reads the row again to tell which.
"""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_charge.domain.models import (
    Charge,
    ChargeFilter,
    ChargeStats,
    ChargeSummary,
    StatusBucket,
)
from src.rc_common.enums import ChargeStatus

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_CHARGE_COLUMNS = """
    c.id, c.resident_id, c.issued_by, c.type, c.amount_cents, c.due_date,
    c.status, c.paid_date, c.description, c.gateway_ref, c.created_at, c.updated_at,
    r.account_id, r.house_number, a.name AS resident_name, a.email AS resident_email
"""

_JOIN_RESIDENT = """
    JOIN residents r ON r.id = c.resident_id
    JOIN accounts a ON a.id = r.account_id
"""

_INSERT_CHARGE_SQL = text(f"""
    WITH c AS (
        INSERT INTO charges
            (resident_id, issued_by, type, amount_cents, due_date, status, description)
        VALUES
            (:resident_id, :issued_by, :type, :amount_cents, :due_date, 'PENDING', :description)
        RETURNING *
    )
    SELECT {_CHARGE_COLUMNS}
    FROM c {_JOIN_RESIDENT}
""")

_GET_CHARGE_SQL = text(f"""
    SELECT {_CHARGE_COLUMNS}
    FROM charges c {_JOIN_RESIDENT}
    WHERE c.id = :charge_id
      AND (CAST(:resident_id AS UUID) IS NULL OR c.resident_id = CAST(:resident_id AS UUID))
""")

_GET_BY_GATEWAY_REF_SQL = text(f"""
    SELECT {_CHARGE_COLUMNS}
    FROM charges c {_JOIN_RESIDENT}
    WHERE c.gateway_ref = :gateway_ref
""")

_MARK_PAID_SQL = text(f"""
    WITH c AS (
        UPDATE charges
        SET status = 'PAID',
            paid_date = NOW(),
            gateway_ref = COALESCE(CAST(:gateway_ref AS TEXT), gateway_ref)
        WHERE id = :charge_id
          AND status IN ('PENDING', 'OVERDUE')
          AND (CAST(:resident_id AS UUID) IS NULL OR resident_id = CAST(:resident_id AS UUID))
        RETURNING *
    )
    SELECT {_CHARGE_COLUMNS}
    FROM c {_JOIN_RESIDENT}
""")

_MARK_OVERDUE_SQL = text(f"""
    WITH c AS (
        UPDATE charges
        SET status = 'OVERDUE'
        WHERE id = :charge_id AND status = 'PENDING'
        RETURNING *
    )
    SELECT {_CHARGE_COLUMNS}
    FROM c {_JOIN_RESIDENT}
""")

_LIST_OVERDUE_CANDIDATES_SQL = text(f"""
    SELECT {_CHARGE_COLUMNS}
    FROM charges c {_JOIN_RESIDENT}
    WHERE c.status = 'PENDING' AND c.due_date < :as_of
    ORDER BY c.due_date ASC, c.id ASC
""")

_FILTER = """
    (CAST(:resident_id AS UUID) IS NULL OR c.resident_id = CAST(:resident_id AS UUID))
    AND (CAST(:status AS TEXT) IS NULL OR c.status = CAST(:status AS TEXT))
    AND (CAST(:type AS TEXT) IS NULL OR c.type = CAST(:type AS TEXT))
    AND (CAST(:date_from AS DATE) IS NULL OR c.created_at >= CAST(:date_from AS DATE))
    AND (CAST(:date_to AS DATE) IS NULL OR c.created_at < CAST(:date_to AS DATE) + 1)
"""

# id DESC breaks created_at ties so pages are stable
_LIST_CHARGES_SQL = text(f"""
    SELECT {_CHARGE_COLUMNS}
    FROM charges c {_JOIN_RESIDENT}
    WHERE {_FILTER}
    ORDER BY c.created_at DESC, c.id DESC
    OFFSET :offset
    LIMIT :limit
""")

_COUNT_CHARGES_SQL = text(f"""
    SELECT COUNT(*)
    FROM charges c
    WHERE {_FILTER}
""")

_LIST_PAYABLE_SQL = text(f"""
    SELECT {_CHARGE_COLUMNS}
    FROM charges c {_JOIN_RESIDENT}
    WHERE c.resident_id = :resident_id AND c.status IN ('PENDING', 'OVERDUE')
    ORDER BY c.due_date ASC, c.id ASC
""")

_SUMMARY_SQL = text("""
    SELECT
        COUNT(*) FILTER (WHERE status = 'PENDING') AS pending,
        COUNT(*) FILTER (WHERE status = 'PAID') AS paid,
        COUNT(*) FILTER (WHERE status = 'OVERDUE') AS overdue,
        COALESCE(SUM(amount_cents) FILTER (WHERE status IN ('PENDING', 'OVERDUE')), 0)
            AS outstanding_cents
    FROM charges
    WHERE resident_id = :resident_id
""")

_STATS_BY_STATUS_SQL = text("""
    SELECT status, COUNT(*) AS count, COALESCE(SUM(amount_cents), 0) AS amount_cents
    FROM charges
    GROUP BY status
""")

_STATS_BY_TYPE_SQL = text("""
    SELECT type, COUNT(*) AS count, COALESCE(SUM(amount_cents), 0) AS amount_cents
    FROM charges
    GROUP BY type
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_charge(row: object) -> Charge:
    return Charge(
        id=str(row.id),  # type: ignore[attr-defined]
        resident_id=str(row.resident_id),  # type: ignore[attr-defined]
        issued_by=str(row.issued_by),  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        amount_cents=int(row.amount_cents),  # type: ignore[attr-defined]
        due_date=row.due_date,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        paid_date=row.paid_date,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        gateway_ref=row.gateway_ref,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
        account_id=str(row.account_id),  # type: ignore[attr-defined]
        house_number=row.house_number,  # type: ignore[attr-defined]
        resident_name=row.resident_name,  # type: ignore[attr-defined]
        resident_email=row.resident_email,  # type: ignore[attr-defined]
    )


def _filter_params(flt: ChargeFilter) -> dict[str, object]:
    return {
        "resident_id": flt.resident_id,
        "status": flt.status,
        "type": flt.type,
        "date_from": flt.date_from,
        "date_to": flt.date_to,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ChargeRepository:
    """Concrete repository. Transaction ownership stays with the caller."""

    async def insert_charge(
        self,
        db: AsyncSession,
        resident_id: str,
        issued_by: str,
        charge_type: str,
        amount_cents: int,
        due_date: date,
        description: str | None,
    ) -> Charge:
        result = await db.execute(
            _INSERT_CHARGE_SQL,
            {
                "resident_id": resident_id,
                "issued_by": issued_by,
                "type": charge_type,
                "amount_cents": amount_cents,
                "due_date": due_date,
                "description": description,
            },
        )
        return _row_to_charge(result.one())

    async def get_by_id(
        self, db: AsyncSession, charge_id: str, resident_id: str | None = None
    ) -> Charge | None:
        result = await db.execute(
            _GET_CHARGE_SQL, {"charge_id": charge_id, "resident_id": resident_id}
        )
        row = result.fetchone()
        return _row_to_charge(row) if row else None

    async def get_by_gateway_ref(self, db: AsyncSession, gateway_ref: str) -> Charge | None:
        result = await db.execute(_GET_BY_GATEWAY_REF_SQL, {"gateway_ref": gateway_ref})
        row = result.fetchone()
        return _row_to_charge(row) if row else None

    async def mark_paid(
        self,
        db: AsyncSession,
        charge_id: str,
        resident_id: str | None = None,
        gateway_ref: str | None = None,
    ) -> Charge | None:
        result = await db.execute(
            _MARK_PAID_SQL,
            {"charge_id": charge_id, "resident_id": resident_id, "gateway_ref": gateway_ref},
        )
        row = result.fetchone()
        return _row_to_charge(row) if row else None

    async def mark_overdue(self, db: AsyncSession, charge_id: str) -> Charge | None:
        result = await db.execute(_MARK_OVERDUE_SQL, {"charge_id": charge_id})
        row = result.fetchone()
        return _row_to_charge(row) if row else None

    async def list_overdue_candidates(self, db: AsyncSession, as_of: date) -> list[Charge]:
        result = await db.execute(_LIST_OVERDUE_CANDIDATES_SQL, {"as_of": as_of})
        return [_row_to_charge(row) for row in result.fetchall()]

    async def list_charges(
        self, db: AsyncSession, flt: ChargeFilter, offset: int, limit: int | None
    ) -> list[Charge]:
        # LIMIT NULL means no limit in PostgreSQL (used by the report)
        result = await db.execute(
            _LIST_CHARGES_SQL, {**_filter_params(flt), "offset": offset, "limit": limit}
        )
        return [_row_to_charge(row) for row in result.fetchall()]

    async def count_charges(self, db: AsyncSession, flt: ChargeFilter) -> int:
        result = await db.execute(_COUNT_CHARGES_SQL, _filter_params(flt))
        return int(result.scalar_one())

    async def list_payable_for_resident(
        self, db: AsyncSession, resident_id: str
    ) -> list[Charge]:
        result = await db.execute(_LIST_PAYABLE_SQL, {"resident_id": resident_id})
        return [_row_to_charge(row) for row in result.fetchall()]

    async def summarize(self, db: AsyncSession, resident_id: str) -> ChargeSummary:
        row = (await db.execute(_SUMMARY_SQL, {"resident_id": resident_id})).one()
        return ChargeSummary(
            pending=int(row.pending),
            paid=int(row.paid),
            overdue=int(row.overdue),
            outstanding_cents=int(row.outstanding_cents),
        )

    async def aggregate_stats(self, db: AsyncSession) -> ChargeStats:
        stats = ChargeStats()
        for row in (await db.execute(_STATS_BY_STATUS_SQL)).fetchall():
            bucket = StatusBucket(count=int(row.count), amount_cents=int(row.amount_cents))
            stats.total.count += bucket.count
            stats.total.amount_cents += bucket.amount_cents
            if row.status == ChargeStatus.PENDING.value:
                stats.pending = bucket
            elif row.status == ChargeStatus.PAID.value:
                stats.paid = bucket
            elif row.status == ChargeStatus.OVERDUE.value:
                stats.overdue = bucket
            else:
                stats.cancelled = bucket
        for row in (await db.execute(_STATS_BY_TYPE_SQL)).fetchall():
            stats.by_type[row.type] = StatusBucket(
                count=int(row.count), amount_cents=int(row.amount_cents)
            )
        return stats
