"""PaymentGatewayService: bridge a charge to the payment processor.

The processor never owns charge state. Creating an intent leaves the charge
untouched; only a confirmed succeeded intent (or a matching webhook event)
settles it through ChargeLedgerService.settle, which records the intent id as
the charge's gateway reference.

Webhook reconciliation:
    1. find the charge by intent metadata ``charge_id``, else by gateway ref
    2. PAID already          -> no-op (processors redeliver events)
    3. PENDING / OVERDUE     -> guarded UPDATE to PAID with the intent id
    4. unknown / other event -> logged and acknowledged
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_charge.application.service import ChargeLedgerService
from src.rc_charge.domain.models import Charge
from src.rc_charge.domain.repository import ChargeRepositoryProtocol
from src.rc_charge.domain.transitions import is_payable
from src.rc_charge.infrastructure.persistence import ChargeRepository
from src.rc_common.enums import ChargeStatus, GatewayEventType
from src.rc_common.errors import (
    ChargeNotPayableError,
    InvalidInputError,
    PaymentNotSucceededError,
    WebhookSignatureError,
)
from src.rc_gateway.auth.capabilities import Actor, Capability, authorize
from src.rc_payment.domain.gateway import PaymentProcessorProtocol
from src.rc_payment.domain.models import GatewayIntent, WebhookOutcome
from src.rc_payment.infrastructure.stripe_gateway import StripeGateway

logger = logging.getLogger("rc.gateway")
webhook_logger = logging.getLogger("rc.webhook")


def _as_uuid(value: str | None) -> str | None:
    if not value:
        return None
    try:
        return str(uuid.UUID(value))
    except ValueError:
        return None


class PaymentGatewayService:
    def __init__(
        self,
        processor: PaymentProcessorProtocol | None = None,
        ledger: ChargeLedgerService | None = None,
        charges: ChargeRepositoryProtocol | None = None,
    ) -> None:
        self._processor_override = processor
        self._ledger = ledger or ChargeLedgerService()
        self._charges: ChargeRepositoryProtocol = charges or ChargeRepository()

    def _processor(self) -> PaymentProcessorProtocol:
        # Built on first use so the app starts without Stripe keys
        if self._processor_override is None:
            self._processor_override = StripeGateway.from_settings(settings)
        return self._processor_override

    async def create_intent(
        self,
        db: AsyncSession,
        actor: Actor,
        charge_id: str,
        payment_method: str,
    ) -> GatewayIntent:
        charge = await self._ledger.get_payable_for_resident(db, actor, charge_id)
        intent = await self._processor().create_intent(
            amount_cents=charge.amount_cents,
            currency=settings.STRIPE_CURRENCY,
            payment_method=payment_method,
            return_url=f"{settings.FRONTEND_URL}/payments/success",
            metadata={
                "charge_id": charge.id,
                "resident_id": charge.resident_id,
                "type": charge.type,
            },
        )
        logger.info("Intent %s created for charge %s (%s)", intent.id, charge.id, intent.status)
        return intent

    async def confirm_payment(
        self,
        db: AsyncSession,
        actor: Actor,
        intent_id: str,
        charge_id: str,
    ) -> Charge:
        authorize(actor, Capability.PAY_CHARGE)
        intent = await self._processor().retrieve_intent(intent_id)
        if not intent.succeeded:
            raise PaymentNotSucceededError(intent_id, intent.status)

        meta_charge = intent.metadata.get("charge_id")
        if meta_charge and meta_charge != charge_id:
            raise InvalidInputError("Payment intent does not belong to this payment")

        try:
            return await self._ledger.settle(
                db, charge_id, resident_id=actor.resident_id, gateway_ref=intent.id
            )
        except ChargeNotPayableError:
            # a webhook may have settled it first with this same intent
            charge = await self._charges.get_by_id(db, charge_id, actor.resident_id)
            if (
                charge is not None
                and charge.status == ChargeStatus.PAID.value
                and charge.gateway_ref == intent.id
            ):
                logger.info("Charge %s already settled by intent %s", charge_id, intent.id)
                return charge
            raise

    async def mark_as_paid_direct(
        self, db: AsyncSession, actor: Actor, charge_id: str
    ) -> Charge:
        """Resident self-mark; no processor involved."""
        charge = await self._ledger.mark_paid_by_resident(db, actor, charge_id)
        logger.info("Charge %s self-marked PAID by resident %s", charge_id, actor.resident_id)
        return charge

    async def handle_webhook(
        self, db: AsyncSession, payload: bytes, signature: str | None
    ) -> WebhookOutcome:
        if not signature:
            raise WebhookSignatureError()
        event = self._processor().construct_event(payload, signature)
        webhook_logger.info("Webhook event %s (%s) received", event.id, event.type)

        if event.type != GatewayEventType.PAYMENT_SUCCEEDED.value or event.intent is None:
            if event.type == GatewayEventType.PAYMENT_FAILED.value and event.intent is not None:
                webhook_logger.warning(
                    "Intent %s failed for charge %s",
                    event.intent.id, event.intent.metadata.get("charge_id"),
                )
            return WebhookOutcome(event_type=event.type, result="ignored")

        intent = event.intent
        charge = None
        charge_id = _as_uuid(intent.metadata.get("charge_id"))
        if charge_id is not None:
            charge = await self._charges.get_by_id(db, charge_id)
        if charge is None:
            charge = await self._charges.get_by_gateway_ref(db, intent.id)
        if charge is None:
            webhook_logger.warning("Intent %s matches no charge", intent.id)
            return WebhookOutcome(event_type=event.type, result="unmatched")

        if charge.status == ChargeStatus.PAID.value:
            return WebhookOutcome(event.type, "already_paid", charge.id)
        if not is_payable(charge.status):
            webhook_logger.warning(
                "Intent %s succeeded for %s charge %s", intent.id, charge.status, charge.id
            )
            return WebhookOutcome(event.type, "ignored", charge.id)
        if intent.amount_cents != charge.amount_cents:
            webhook_logger.warning(
                "Intent %s amount %d does not match charge %s amount %d",
                intent.id, intent.amount_cents, charge.id, charge.amount_cents,
            )
            return WebhookOutcome(event.type, "ignored", charge.id)

        try:
            await self._ledger.settle(db, charge.id, gateway_ref=intent.id)
        except ChargeNotPayableError:
            return WebhookOutcome(event.type, "already_paid", charge.id)
        webhook_logger.info("Charge %s reconciled from intent %s", charge.id, intent.id)
        return WebhookOutcome(event.type, "reconciled", charge.id)
