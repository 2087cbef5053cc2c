"""Payment gateway endpoints under /payments.

The webhook is the only unauthenticated route here; the processor's
signature header stands in for the bearer token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_charge.application.schemas import ChargeOut
from src.rc_common.database import get_db_session
from src.rc_common.response import success_response
from src.rc_gateway.auth.capabilities import Actor
from src.rc_gateway.auth.dependencies import get_current_actor
from src.rc_payment.application.schemas import (
    ConfirmPaymentRequest,
    CreateIntentRequest,
    CreateIntentResponse,
    MarkAsPaidRequest,
)
from src.rc_payment.application.service import PaymentGatewayService

router = APIRouter(prefix="/payments", tags=["payments"])
_service = PaymentGatewayService()


@router.post("/create-payment-intent")
async def create_payment_intent(
    body: CreateIntentRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    intent = await _service.create_intent(
        db, actor, str(body.payment_id), body.payment_method_id
    )
    return CreateIntentResponse.from_domain(intent).to_json()


@router.post("/confirm-payment")
async def confirm_payment(
    body: ConfirmPaymentRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        charge = await _service.confirm_payment(
            db, actor, body.payment_intent_id, str(body.payment_id)
        )
    except Exception:
        await db.rollback()
        raise
    return success_response("Payment confirmed", payment=ChargeOut.from_domain(charge))


@router.post("/mark-as-paid")
async def mark_as_paid(
    body: MarkAsPaidRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        charge = await _service.mark_as_paid_direct(db, actor, str(body.payment_id))
    except Exception:
        await db.rollback()
        raise
    return success_response("Payment marked as paid", payment=ChargeOut.from_domain(charge))


@router.post("/webhook", include_in_schema=False)
async def webhook(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    stripe_signature: Annotated[str | None, Header(alias="Stripe-Signature")] = None,
) -> dict:
    payload = await request.body()
    try:
        outcome = await _service.handle_webhook(db, payload, stripe_signature)
    except Exception:
        await db.rollback()
        raise
    return {"received": True, "result": outcome.result}
