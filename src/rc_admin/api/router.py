"""Admin console REST API.

Every route requires role=ADMIN; the services repeat the capability check
before they write anything.
"""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_admin.application.schemas import (
    DashboardStatsOut,
    ResidentOut,
    SetResidentStatusRequest,
)
from src.rc_admin.application.service import AdminService
from src.rc_charge.application.schemas import (
    ChargeOut,
    ChargeReportSummary,
    ChargeStatsOut,
    CreateChargeRequest,
    CreateMassChargesRequest,
    charges_json,
)
from src.rc_charge.application.service import ChargeLedgerService
from src.rc_charge.domain.models import ChargeFilter
from src.rc_common.database import SessionFactory, get_db_session, get_session_factory
from src.rc_common.enums import ChargeStatus, ChargeType
from src.rc_common.response import success_response
from src.rc_document.application.schemas import DocumentOut
from src.rc_gateway.account.schemas import AccountInfo, CreateAdminRequest, RegisterRequest
from src.rc_gateway.auth.capabilities import Actor
from src.rc_gateway.auth.dependencies import require_admin
from src.rc_notification.application.schemas import SendMassNotificationRequest
from src.rc_notification.application.service import NotificationService

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()
_ledger = ChargeLedgerService()
_notifications = NotificationService()


# ---------------------------------------------------------------------------
# Residents
# ---------------------------------------------------------------------------


@router.get("/residents")
async def list_residents(
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE),
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None, max_length=100),
) -> dict:
    residents, pagination = await _service.list_residents(
        db, actor, is_active, search, page, limit
    )
    return success_response(
        residents=[ResidentOut.from_domain(r).to_json() for r in residents],
        pagination=pagination,
    )


@router.get("/residents/{resident_id}")
async def get_resident(
    resident_id: uuid.UUID,
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    detail = await _service.get_resident(db, actor, str(resident_id))
    return success_response(
        resident=ResidentOut.from_domain(detail.resident),
        payments=charges_json(detail.recent_charges),
        documents=[DocumentOut.from_domain(d).to_json() for d in detail.recent_documents],
    )


@router.post("/residents", status_code=status.HTTP_201_CREATED)
async def provision_resident(
    body: RegisterRequest,
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        account = await _service.provision_resident(
            db, actor, body.email, body.password, body.name, body.house_number, body.phone
        )
        user = AccountInfo.from_model(account)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return success_response("Resident created", user=user)


@router.put("/residents/{resident_id}/status")
async def set_resident_status(
    resident_id: uuid.UUID,
    body: SetResidentStatusRequest,
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        resident = await _service.set_resident_active(db, actor, str(resident_id), body.is_active)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    state = "activated" if resident.is_active else "deactivated"
    return success_response(f"Resident {state}", resident=ResidentOut.from_domain(resident))


@router.post("/create-admin", status_code=status.HTTP_201_CREATED)
async def create_admin(
    body: CreateAdminRequest,
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        account = await _service.create_admin(db, actor, body.email, body.password, body.name)
        user = AccountInfo.from_model(account)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return success_response("Administrator created", user=user)


# ---------------------------------------------------------------------------
# Dashboard and reports
# ---------------------------------------------------------------------------


@router.get("/stats")
async def dashboard_stats(
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    stats = await _service.dashboard_stats(db, actor)
    out = DashboardStatsOut(
        total_residents=stats.counts["totalResidents"],
        active_residents=stats.counts["activeResidents"],
        total_accounts=stats.counts["totalAccounts"],
        total_documents=stats.counts["totalDocuments"],
        unread_notifications=stats.counts["unreadNotifications"],
        payments=ChargeStatsOut.from_domain(stats.charges),
    )
    return success_response(stats=out)


@router.get("/payments-report")
async def payments_report(
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    type_: ChargeType | None = Query(None, alias="type"),
    status_: ChargeStatus | None = Query(None, alias="status"),
) -> dict:
    flt = ChargeFilter(
        status=status_.value if status_ else None,
        type=type_.value if type_ else None,
        date_from=start_date,
        date_to=end_date,
    )
    charges = await _ledger.report(db, actor, flt)
    return success_response(
        payments=charges_json(charges), summary=ChargeReportSummary.from_charges(charges)
    )


# ---------------------------------------------------------------------------
# Charges and notifications
# ---------------------------------------------------------------------------


@router.post("/create-payment", status_code=status.HTTP_201_CREATED)
async def create_payment(
    body: CreateChargeRequest,
    actor: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        charge = await _ledger.create_charge(
            db, actor, str(body.resident_id), body.type.value,
            body.amount_cents, body.due_date, body.description,
        )
    except Exception:
        await db.rollback()
        raise
    return success_response("Payment created", payment=ChargeOut.from_domain(charge))


@router.post("/create-mass-payments", status_code=status.HTTP_201_CREATED)
async def create_mass_payments(
    body: CreateMassChargesRequest,
    actor: Annotated[Actor, Depends(require_admin)],
    session_factory: Annotated[SessionFactory, Depends(get_session_factory)],
) -> dict:
    result = await _ledger.create_charges_for_all_active(
        session_factory, actor, body.type.value, body.amount_cents, body.due_date, body.description
    )
    # Partial writes stay committed; the caller sees the first failure
    result.raise_first_failure()
    count = len(result.succeeded)
    return success_response(
        f"Payments created for {count} residents",
        paymentsCount=count,
        outcomes=result.to_json(),
        type=body.type.value,
        amount=str(body.amount),
        dueDate=body.due_date.isoformat(),
    )


@router.post("/send-mass-notification", status_code=status.HTTP_201_CREATED)
async def send_mass_notification(
    body: SendMassNotificationRequest,
    actor: Annotated[Actor, Depends(require_admin)],
    session_factory: Annotated[SessionFactory, Depends(get_session_factory)],
) -> dict:
    result = await _notifications.send_mass(
        session_factory,
        actor,
        body.title,
        body.message,
        body.type.value,
        [str(r) for r in body.resident_ids] if body.resident_ids else None,
    )
    result.raise_first_failure()
    count = len(result.succeeded)
    return success_response(f"Notification sent to {count} residents", sentCount=count)
