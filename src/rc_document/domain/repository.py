"""Repository Protocol for the document store."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_document.domain.models import Document


class DocumentRepositoryProtocol(Protocol):
    async def insert(
        self,
        db: AsyncSession,
        resident_id: str,
        issued_by: str,
        doc_type: str,
        title: str,
        content: str | None,
        file_ref: str | None,
    ) -> Document: ...

    async def get_by_id(self, db: AsyncSession, document_id: str) -> Document | None: ...

    async def list_documents(
        self,
        db: AsyncSession,
        resident_id: str | None,
        doc_type: str | None,
        offset: int,
        limit: int,
    ) -> list[Document]: ...

    async def count_documents(
        self, db: AsyncSession, resident_id: str | None, doc_type: str | None
    ) -> int: ...

    async def mark_read(self, db: AsyncSession, document_id: str) -> None: ...
