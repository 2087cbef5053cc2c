"""DocumentService: record generated artifacts and serve their files.

Recording commits the document first and the DOCUMENT_SENT notification
second. Downloads by the owning resident flip the read flag; admin
downloads leave it alone.
"""

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_charge.domain.repository import ChargeRepositoryProtocol
from src.rc_charge.infrastructure.persistence import ChargeRepository
from src.rc_common.cents import cents_to_display
from src.rc_common.datetime_utils import format_day
from src.rc_common.enums import ChargeStatus, DocumentType
from src.rc_common.errors import (
    ChargeNotFoundError,
    ChargeNotPaidError,
    DocumentNotFoundError,
    InvalidInputError,
    ResidentNotFoundError,
    StoredFileNotFoundError,
)
from src.rc_common.response import Pagination, page_offset
from src.rc_document.domain.models import Document
from src.rc_document.domain.repository import DocumentRepositoryProtocol
from src.rc_document.infrastructure.file_store import FileStore
from src.rc_document.infrastructure.persistence import DocumentRepository
from src.rc_gateway.auth.capabilities import Actor, Capability, authorize
from src.rc_notification.application import messages
from src.rc_notification.application.service import NotificationService
from src.rc_resident.domain.repository import ResidentRepositoryProtocol
from src.rc_resident.infrastructure.persistence import ResidentRepository

logger = logging.getLogger("rc.document")


class DocumentService:
    def __init__(
        self,
        repo: DocumentRepositoryProtocol | None = None,
        residents: ResidentRepositoryProtocol | None = None,
        charges: ChargeRepositoryProtocol | None = None,
        notifications: NotificationService | None = None,
        files: FileStore | None = None,
    ) -> None:
        self._repo: DocumentRepositoryProtocol = repo or DocumentRepository()
        self._residents: ResidentRepositoryProtocol = residents or ResidentRepository()
        self._charges: ChargeRepositoryProtocol = charges or ChargeRepository()
        self._notifications = notifications or NotificationService()
        self._files = files or FileStore(settings.UPLOAD_DIR)

    async def record_document(
        self,
        db: AsyncSession,
        actor: Actor,
        resident_id: str,
        doc_type: str,
        title: str,
        content: str | None,
        file_ref: str | None = None,
    ) -> Document:
        authorize(actor, Capability.MANAGE_DOCUMENTS)
        if file_ref is not None and not self._files.is_safe(file_ref):
            raise InvalidInputError("fileRef must be a filename inside the upload directory")
        resident = await self._residents.get_by_id(db, resident_id)
        if resident is None:
            raise ResidentNotFoundError(resident_id)

        document = await self._repo.insert(
            db, resident_id, actor.account_id, doc_type, title, content, file_ref
        )
        await db.commit()
        await self._notifications.emit(
            db, messages.document_sent(resident.account_id, document.title)
        )
        await db.commit()
        logger.info("Document %s (%s) recorded for %s", document.id, doc_type, resident.house_number)
        return document

    async def generate_receipt(self, db: AsyncSession, actor: Actor, charge_id: str) -> Document:
        """Record a RECEIPT for a PAID charge. No file is rendered."""
        authorize(actor, Capability.MANAGE_DOCUMENTS)
        charge = await self._charges.get_by_id(db, charge_id)
        if charge is None:
            raise ChargeNotFoundError(charge_id)
        if charge.status != ChargeStatus.PAID.value or charge.paid_date is None:
            raise ChargeNotPaidError(charge_id)

        label = charge.type.capitalize()
        content = (
            f"Receipt for {charge.type.lower()} payment of {cents_to_display(charge.amount_cents)} "
            f"paid on {format_day(charge.paid_date.date())}"
        )
        if charge.gateway_ref:
            content += f" (ref {charge.gateway_ref})"
        return await self.record_document(
            db,
            actor,
            charge.resident_id,
            DocumentType.RECEIPT.value,
            f"Payment receipt - {label}",
            content,
        )

    async def generate_invoice(
        self,
        db: AsyncSession,
        actor: Actor,
        resident_id: str,
        charge_type: str,
        amount_cents: int,
        due_date: date,
        period: str,
        consumption: Decimal | None = None,
        description: str | None = None,
    ) -> Document:
        """Record a WATER or MAINTENANCE INVOICE for one period. No file is rendered."""
        label = charge_type.capitalize()
        parts = [
            f"{label} invoice for {cents_to_display(amount_cents)} for period {period}",
            f"due {format_day(due_date)}",
        ]
        if consumption is not None:
            parts.append(f"consumption {consumption} m3")
        if description:
            parts.append(description)
        return await self.record_document(
            db,
            actor,
            resident_id,
            DocumentType.INVOICE.value,
            f"{label} invoice - {period}",
            ", ".join(parts),
        )

    async def list_documents(
        self,
        db: AsyncSession,
        actor: Actor,
        resident_id: str | None,
        doc_type: str | None,
        page: int,
        limit: int,
    ) -> tuple[list[Document], Pagination]:
        """Admins see everything (optionally one resident); residents only their own."""
        if actor.is_admin:
            scope = resident_id
        else:
            authorize(actor, Capability.VIEW_DOCUMENT, owner_resident_id=actor.resident_id)
            scope = actor.resident_id
        documents = await self._repo.list_documents(
            db, scope, doc_type, page_offset(page, limit), limit
        )
        total = await self._repo.count_documents(db, scope, doc_type)
        return documents, Pagination.build(page, limit, total)

    async def _get_visible(self, db: AsyncSession, actor: Actor, document_id: str) -> Document:
        document = await self._repo.get_by_id(db, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        authorize(actor, Capability.VIEW_DOCUMENT, owner_resident_id=document.resident_id)
        return document

    async def mark_read(self, db: AsyncSession, actor: Actor, document_id: str) -> Document:
        document = await self._get_visible(db, actor, document_id)
        await self._repo.mark_read(db, document_id)
        document.is_read = True
        return document

    async def fetch_for_download(
        self, db: AsyncSession, actor: Actor, document_id: str
    ) -> tuple[Document, Path]:
        document = await self._get_visible(db, actor, document_id)
        path = await self._files.locate(document.file_ref)
        if path is None:
            logger.warning("File for document %s missing: %r", document_id, document.file_ref)
            raise StoredFileNotFoundError()
        if not actor.is_admin and not document.is_read:
            await self._repo.mark_read(db, document_id)
            document.is_read = True
        return document, path
