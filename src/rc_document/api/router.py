"""Document endpoints: listing, recording, receipts and invoices, read flag and file download."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_common.database import get_db_session
from src.rc_common.enums import ChargeType, DocumentType
from src.rc_common.response import success_response
from src.rc_document.application.schemas import (
    DocumentOut,
    GenerateMaintenanceInvoiceRequest,
    GenerateReceiptRequest,
    GenerateWaterInvoiceRequest,
    RecordDocumentRequest,
)
from src.rc_document.application.service import DocumentService
from src.rc_gateway.auth.capabilities import Actor
from src.rc_gateway.auth.dependencies import get_current_actor, require_admin

router = APIRouter(prefix="/documents", tags=["documents"])
_service = DocumentService()


async def _list(
    db: AsyncSession,
    actor: Actor,
    resident_id: uuid.UUID | None,
    doc_type: DocumentType | None,
    page: int,
    limit: int,
) -> dict:
    documents, pagination = await _service.list_documents(
        db,
        actor,
        str(resident_id) if resident_id else None,
        doc_type.value if doc_type else None,
        page,
        limit,
    )
    return success_response(
        documents=[DocumentOut.from_domain(d).to_json() for d in documents],
        pagination=pagination,
    )


@router.get("/my-documents")
async def my_documents(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE),
    doc_type: DocumentType | None = Query(None, alias="type"),
) -> dict:
    return await _list(db, actor, None, doc_type, page, limit)


@router.get("")
async def list_documents(
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.MAX_PAGE_SIZE),
    doc_type: DocumentType | None = Query(None, alias="type"),
    resident_id: uuid.UUID | None = Query(None, alias="residentId"),
) -> dict:
    return await _list(db, actor, resident_id, doc_type, page, limit)


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_document(
    body: RecordDocumentRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        document = await _service.record_document(
            db, actor, str(body.resident_id), body.type.value,
            body.title, body.content, body.file_ref,
        )
    except Exception:
        await db.rollback()
        raise
    return success_response("Document recorded", document=DocumentOut.from_domain(document))


@router.post("/generate-receipt", status_code=status.HTTP_201_CREATED)
async def generate_receipt(
    body: GenerateReceiptRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        document = await _service.generate_receipt(db, actor, str(body.payment_id))
    except Exception:
        await db.rollback()
        raise
    return success_response("Receipt generated", document=DocumentOut.from_domain(document))


@router.post("/generate-water-invoice", status_code=status.HTTP_201_CREATED)
async def generate_water_invoice(
    body: GenerateWaterInvoiceRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        document = await _service.generate_invoice(
            db, actor, str(body.resident_id), ChargeType.WATER.value,
            body.amount_cents, body.due_date, body.period, consumption=body.consumption,
        )
    except Exception:
        await db.rollback()
        raise
    return success_response("Invoice generated", document=DocumentOut.from_domain(document))


@router.post("/generate-maintenance-invoice", status_code=status.HTTP_201_CREATED)
async def generate_maintenance_invoice(
    body: GenerateMaintenanceInvoiceRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        document = await _service.generate_invoice(
            db, actor, str(body.resident_id), ChargeType.MAINTENANCE.value,
            body.amount_cents, body.due_date, body.period, description=body.description,
        )
    except Exception:
        await db.rollback()
        raise
    return success_response("Invoice generated", document=DocumentOut.from_domain(document))


@router.put("/{document_id}/read")
async def mark_read(
    document_id: uuid.UUID,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        await _service.mark_read(db, actor, str(document_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return success_response("Document marked as read")


@router.get("/download/{document_id}", response_class=FileResponse)
async def download(
    document_id: uuid.UUID,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> FileResponse:
    try:
        _, path = await _service.fetch_for_download(db, actor, str(document_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return FileResponse(path, filename=path.name)
