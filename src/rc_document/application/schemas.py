"""Pydantic schemas for rc_document."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from config.settings import settings
from src.rc_common.cents import to_cents
from src.rc_common.enums import DocumentType
from src.rc_common.response import CamelModel
from src.rc_document.domain.models import Document


class RecordDocumentRequest(CamelModel):
    resident_id: uuid.UUID
    type: DocumentType
    title: str = Field(..., min_length=1, max_length=200)
    content: str | None = Field(None, max_length=5000)
    file_ref: str | None = Field(None, min_length=1, max_length=255)


class GenerateReceiptRequest(CamelModel):
    payment_id: uuid.UUID


class _InvoiceRequest(CamelModel):
    resident_id: uuid.UUID
    amount: Decimal = Field(..., ge=0, le=settings.MAX_CHARGE_AMOUNT, decimal_places=2)
    due_date: date
    period: str = Field(..., min_length=1, max_length=50)

    @property
    def amount_cents(self) -> int:
        return to_cents(self.amount)


class GenerateWaterInvoiceRequest(_InvoiceRequest):
    consumption: Decimal | None = Field(None, ge=0)


class GenerateMaintenanceInvoiceRequest(_InvoiceRequest):
    description: str | None = Field(None, max_length=500)


class DocumentOut(CamelModel):
    id: str
    resident_id: str
    type: str
    title: str
    content: str | None
    has_file: bool
    is_read: bool
    created_at: datetime
    house_number: str
    resident_name: str

    @classmethod
    def from_domain(cls, d: Document) -> "DocumentOut":
        return cls(
            id=d.id,
            resident_id=d.resident_id,
            type=d.type,
            title=d.title,
            content=d.content,
            has_file=d.file_ref is not None,
            is_read=d.is_read,
            created_at=d.created_at,
            house_number=d.house_number,
            resident_name=d.resident_name,
        )
