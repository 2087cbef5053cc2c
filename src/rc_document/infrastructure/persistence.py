"""DocumentRepository: raw text() SQL over the documents table."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_document.domain.models import Document

_COLUMNS = """
    d.id, d.resident_id, d.issued_by, d.type, d.title, d.content, d.file_ref,
    d.is_read, d.created_at, r.account_id, r.house_number, a.name AS resident_name
"""

_JOIN_RESIDENT = """
    JOIN residents r ON r.id = d.resident_id
    JOIN accounts a ON a.id = r.account_id
"""

_INSERT_SQL = text(f"""
    WITH d AS (
        INSERT INTO documents (resident_id, issued_by, type, title, content, file_ref, is_read)
        VALUES (:resident_id, :issued_by, :type, :title, :content, :file_ref, FALSE)
        RETURNING *
    )
    SELECT {_COLUMNS}
    FROM d {_JOIN_RESIDENT}
""")

_GET_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM documents d {_JOIN_RESIDENT}
    WHERE d.id = :id
""")

_FILTER = """
    (CAST(:resident_id AS UUID) IS NULL OR d.resident_id = CAST(:resident_id AS UUID))
    AND (CAST(:type AS TEXT) IS NULL OR d.type = CAST(:type AS TEXT))
"""

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM documents d {_JOIN_RESIDENT}
    WHERE {_FILTER}
    ORDER BY d.created_at DESC, d.id DESC
    OFFSET :offset
    LIMIT :limit
""")

_COUNT_SQL = text(f"SELECT COUNT(*) FROM documents d WHERE {_FILTER}")

_MARK_READ_SQL = text("UPDATE documents SET is_read = TRUE WHERE id = :id")


def _row_to_document(row: object) -> Document:
    return Document(
        id=str(row.id),  # type: ignore[attr-defined]
        resident_id=str(row.resident_id),  # type: ignore[attr-defined]
        issued_by=str(row.issued_by),  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        content=row.content,  # type: ignore[attr-defined]
        file_ref=row.file_ref,  # type: ignore[attr-defined]
        is_read=row.is_read,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        account_id=str(row.account_id),  # type: ignore[attr-defined]
        house_number=row.house_number,  # type: ignore[attr-defined]
        resident_name=row.resident_name,  # type: ignore[attr-defined]
    )


class DocumentRepository:
    async def insert(
        self,
        db: AsyncSession,
        resident_id: str,
        issued_by: str,
        doc_type: str,
        title: str,
        content: str | None,
        file_ref: str | None,
    ) -> Document:
        result = await db.execute(
            _INSERT_SQL,
            {
                "resident_id": resident_id,
                "issued_by": issued_by,
                "type": doc_type,
                "title": title,
                "content": content,
                "file_ref": file_ref,
            },
        )
        return _row_to_document(result.one())

    async def get_by_id(self, db: AsyncSession, document_id: str) -> Document | None:
        row = (await db.execute(_GET_SQL, {"id": document_id})).fetchone()
        return _row_to_document(row) if row else None

    async def list_documents(
        self,
        db: AsyncSession,
        resident_id: str | None,
        doc_type: str | None,
        offset: int,
        limit: int,
    ) -> list[Document]:
        result = await db.execute(
            _LIST_SQL,
            {"resident_id": resident_id, "type": doc_type, "offset": offset, "limit": limit},
        )
        return [_row_to_document(row) for row in result.fetchall()]

    async def count_documents(
        self, db: AsyncSession, resident_id: str | None, doc_type: str | None
    ) -> int:
        result = await db.execute(_COUNT_SQL, {"resident_id": resident_id, "type": doc_type})
        return int(result.scalar_one())

    async def mark_read(self, db: AsyncSession, document_id: str) -> None:
        await db.execute(_MARK_READ_SQL, {"id": document_id})
