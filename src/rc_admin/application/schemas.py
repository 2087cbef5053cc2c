"""Pydantic schemas for the admin console."""

from datetime import datetime

from src.rc_charge.application.schemas import ChargeStatsOut
from src.rc_common.response import CamelModel
from src.rc_resident.domain.models import Resident


class SetResidentStatusRequest(CamelModel):
    is_active: bool


class ResidentOut(CamelModel):
    id: str
    account_id: str
    house_number: str
    phone: str | None
    is_active: bool
    name: str
    email: str
    created_at: datetime
    payment_count: int
    document_count: int

    @classmethod
    def from_domain(cls, r: Resident) -> "ResidentOut":
        return cls(
            id=r.id,
            account_id=r.account_id,
            house_number=r.house_number,
            phone=r.phone,
            is_active=r.is_active,
            name=r.name,
            email=r.email,
            created_at=r.created_at,
            payment_count=r.payment_count,
            document_count=r.document_count,
        )


class DashboardStatsOut(CamelModel):
    total_residents: int
    active_residents: int
    total_accounts: int
    total_documents: int
    unread_notifications: int
    payments: ChargeStatsOut
