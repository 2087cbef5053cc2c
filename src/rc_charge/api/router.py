"""Charge ledger endpoints under /payments.

Admin: list, stats, create, mark-paid, overdue sweep.
Resident: my-payments, my-summary, pending-payments.
Gateway endpoints and the resident self-mark live in rc_payment and share the same prefix.
"""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_charge.application.schemas import (
    ChargeOut,
    ChargeStatsOut,
    ChargeSummaryOut,
    CreateChargeRequest,
    SweepRequest,
    charges_json,
)
from src.rc_charge.application.service import ChargeLedgerService
from src.rc_charge.application.sweeper import OverdueSweeper
from src.rc_charge.domain.models import ChargeFilter
from src.rc_common.database import SessionFactory, get_db_session, get_session_factory
from src.rc_common.enums import ChargeStatus, ChargeType
from src.rc_common.response import success_response
from src.rc_gateway.auth.capabilities import Actor
from src.rc_gateway.auth.dependencies import get_current_actor

router = APIRouter(prefix="/payments", tags=["payments"])
_service = ChargeLedgerService()
_sweeper = OverdueSweeper()


@router.get("")
async def list_payments(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE),
    status_: ChargeStatus | None = Query(None, alias="status"),
    type_: ChargeType | None = Query(None, alias="type"),
    resident_id: uuid.UUID | None = Query(None, alias="residentId"),
    date_from: date | None = Query(None, alias="from"),
    date_to: date | None = Query(None, alias="to"),
) -> dict:
    flt = ChargeFilter(
        resident_id=str(resident_id) if resident_id else None,
        status=status_.value if status_ else None,
        type=type_.value if type_ else None,
        date_from=date_from,
        date_to=date_to,
    )
    charges, pagination = await _service.list_charges(db, actor, flt, page, limit)
    return success_response(payments=charges_json(charges), pagination=pagination)


@router.get("/my-payments")
async def my_payments(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE),
    status_: ChargeStatus | None = Query(None, alias="status"),
    type_: ChargeType | None = Query(None, alias="type"),
) -> dict:
    flt = ChargeFilter(
        status=status_.value if status_ else None,
        type=type_.value if type_ else None,
    )
    charges, pagination = await _service.list_own_charges(db, actor, flt, page, limit)
    return success_response(payments=charges_json(charges), pagination=pagination)


@router.get("/my-summary")
async def my_summary(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    summary, recent = await _service.summarize(db, actor)
    return success_response(
        summary=ChargeSummaryOut.from_domain(summary), recentPayments=charges_json(recent)
    )


@router.get("/pending-payments")
async def pending_payments(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    charges = await _service.list_pending(db, actor)
    return success_response(payments=charges_json(charges))


@router.get("/stats")
async def payment_stats(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    stats = await _service.aggregate_stats(db, actor)
    return success_response(stats=ChargeStatsOut.from_domain(stats))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_payment(
    body: CreateChargeRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        charge = await _service.create_charge(
            db, actor, str(body.resident_id), body.type.value,
            body.amount_cents, body.due_date, body.description,
        )
    except Exception:
        await db.rollback()
        raise
    return success_response("Payment created", payment=ChargeOut.from_domain(charge))


@router.put("/{payment_id}/mark-paid")
async def mark_paid(
    payment_id: uuid.UUID,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        charge = await _service.mark_paid(db, actor, str(payment_id))
    except Exception:
        await db.rollback()
        raise
    return success_response("Payment marked as paid", payment=ChargeOut.from_domain(charge))


@router.post("/update-overdue")
async def update_overdue(
    actor: Annotated[Actor, Depends(get_current_actor)],
    session_factory: Annotated[SessionFactory, Depends(get_session_factory)],
    body: SweepRequest | None = None,
) -> dict:
    report = await _sweeper.sweep(session_factory, actor, body.as_of if body else None)
    report.result.raise_first_failure()
    return success_response(
        f"{report.count} payments marked as overdue",
        count=report.count,
        asOf=report.as_of.isoformat(),
    )
