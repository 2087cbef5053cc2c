"""Unit tests for PaymentGatewayService with an in-memory processor."""

from unittest.mock import AsyncMock

import pytest

from src.rc_charge.application.service import ChargeLedgerService
from src.rc_common.errors import (
    ChargeNotPayableError,
    GatewayError,
    InvalidInputError,
    PaymentNotSucceededError,
    WebhookSignatureError,
)
from src.rc_payment.application.service import PaymentGatewayService
from src.rc_payment.domain.models import GatewayEvent, GatewayIntent

SIGNATURE = "t=1,v1=good"


class FakeProcessor:
    """Records calls; intents and events are set by each test."""

    def __init__(self) -> None:
        self.created: list[dict] = []
        self.intents: dict[str, GatewayIntent] = {}
        self.event: GatewayEvent | None = None
        self.decline: str | None = None

    async def create_intent(self, amount_cents, currency, payment_method, return_url, metadata):
        if self.decline:
            raise GatewayError(self.decline)
        self.created.append(
            dict(amount_cents=amount_cents, currency=currency, payment_method=payment_method,
                 return_url=return_url, metadata=metadata)
        )
        return GatewayIntent(
            id="pi_123", status="succeeded", amount_cents=amount_cents,
            client_secret="pi_123_secret", metadata=metadata,
        )

    async def retrieve_intent(self, intent_id):
        if intent_id not in self.intents:
            raise GatewayError(f"invalid payment intent ({intent_id})")
        return self.intents[intent_id]

    def construct_event(self, payload, signature):
        if signature != SIGNATURE:
            raise WebhookSignatureError()
        return self.event


@pytest.fixture
def processor():
    return FakeProcessor()


@pytest.fixture
def charges():
    return AsyncMock()


@pytest.fixture
def notifications():
    return AsyncMock()


@pytest.fixture
def svc(processor, charges, notifications):
    ledger = ChargeLedgerService(repo=charges, residents=AsyncMock(), notifications=notifications)
    return PaymentGatewayService(processor=processor, ledger=ledger, charges=charges)


def _succeeded_event(charge_id: str | None, amount_cents: int = 80000, intent_id: str = "pi_123"):
    metadata = {"charge_id": charge_id} if charge_id else {}
    intent = GatewayIntent(id=intent_id, status="succeeded", amount_cents=amount_cents, metadata=metadata)
    return GatewayEvent(id="evt_1", type="payment_intent.succeeded", intent=intent)


class TestCreateIntent:
    async def test_uses_charge_amount_and_metadata(
        self, svc, processor, charges, resident_a101, db, make_charge
    ):
        charge = make_charge()
        charges.get_by_id.return_value = charge

        intent = await svc.create_intent(db, resident_a101, charge.id, "pm_card_visa")

        assert intent.client_secret == "pi_123_secret"
        sent = processor.created[0]
        assert sent["amount_cents"] == 80000
        assert sent["payment_method"] == "pm_card_visa"
        assert sent["return_url"].endswith("/payments/success")
        assert sent["metadata"] == {
            "charge_id": charge.id, "resident_id": charge.resident_id, "type": "MAINTENANCE",
        }
        # creating an intent leaves the charge untouched
        charges.mark_paid.assert_not_awaited()

    async def test_paid_charge_rejected(self, svc, processor, charges, resident_a101, db, make_charge):
        charges.get_by_id.return_value = make_charge(status="PAID")

        with pytest.raises(ChargeNotPayableError):
            await svc.create_intent(db, resident_a101, "c-1", "pm_card_visa")

        assert processor.created == []

    async def test_processor_error_propagates(
        self, svc, processor, charges, resident_a101, db, make_charge
    ):
        charges.get_by_id.return_value = make_charge()
        processor.decline = "Your card was declined."

        with pytest.raises(GatewayError) as exc:
            await svc.create_intent(db, resident_a101, "c-1", "pm_card_chargeDeclined")

        assert exc.value.message == "Payment processor error: Your card was declined."


class TestConfirmPayment:
    async def test_succeeded_intent_settles_charge(
        self, svc, processor, charges, notifications, resident_a101, db, ids, make_charge
    ):
        processor.intents["pi_123"] = GatewayIntent(
            id="pi_123", status="succeeded", amount_cents=80000, metadata={"charge_id": ids.charge}
        )
        charges.mark_paid.return_value = make_charge(status="PAID", gateway_ref="pi_123")

        charge = await svc.confirm_payment(db, resident_a101, "pi_123", ids.charge)

        assert charge.gateway_ref == "pi_123"
        assert charges.mark_paid.await_args.args == (db, ids.charge, ids.a101_resident, "pi_123")
        assert notifications.emit.await_args.args[1].type == "PAYMENT_RECEIVED"

    async def test_not_succeeded(self, svc, processor, charges, resident_a101, db, ids):
        processor.intents["pi_123"] = GatewayIntent(
            id="pi_123", status="requires_action", amount_cents=80000
        )

        with pytest.raises(PaymentNotSucceededError):
            await svc.confirm_payment(db, resident_a101, "pi_123", ids.charge)

        charges.mark_paid.assert_not_awaited()

    async def test_intent_for_other_charge(self, svc, processor, resident_a101, db, ids):
        processor.intents["pi_123"] = GatewayIntent(
            id="pi_123", status="succeeded", amount_cents=80000, metadata={"charge_id": "c-other"}
        )

        with pytest.raises(InvalidInputError):
            await svc.confirm_payment(db, resident_a101, "pi_123", ids.charge)

    async def test_reconfirm_after_webhook_is_idempotent(
        self, svc, processor, charges, notifications, resident_a101, db, ids, make_charge
    ):
        processor.intents["pi_123"] = GatewayIntent(
            id="pi_123", status="succeeded", amount_cents=80000, metadata={"charge_id": ids.charge}
        )
        charges.mark_paid.return_value = None
        charges.get_by_id.return_value = make_charge(status="PAID", gateway_ref="pi_123")

        charge = await svc.confirm_payment(db, resident_a101, "pi_123", ids.charge)

        assert charge.status == "PAID"
        notifications.emit.assert_not_awaited()

    async def test_paid_with_other_intent_is_rejected(
        self, svc, processor, charges, resident_a101, db, ids, make_charge
    ):
        processor.intents["pi_123"] = GatewayIntent(id="pi_123", status="succeeded", amount_cents=80000)
        charges.mark_paid.return_value = None
        charges.get_by_id.return_value = make_charge(status="PAID", gateway_ref="pi_999")

        with pytest.raises(ChargeNotPayableError):
            await svc.confirm_payment(db, resident_a101, "pi_123", ids.charge)


class TestWebhook:
    async def test_missing_signature(self, svc, db):
        with pytest.raises(WebhookSignatureError):
            await svc.handle_webhook(db, b"{}", None)

    async def test_bad_signature(self, svc, processor, charges, db, ids):
        processor.event = _succeeded_event(ids.charge)
        with pytest.raises(WebhookSignatureError):
            await svc.handle_webhook(db, b"{}", "t=1,v1=forged")
        charges.mark_paid.assert_not_awaited()

    async def test_reconciles_pending_charge(
        self, svc, processor, charges, notifications, db, ids, make_charge
    ):
        processor.event = _succeeded_event(ids.charge)
        charges.get_by_id.return_value = make_charge()
        charges.mark_paid.return_value = make_charge(status="PAID", gateway_ref="pi_123")

        outcome = await svc.handle_webhook(db, b"{}", SIGNATURE)

        assert outcome.result == "reconciled"
        assert outcome.charge_id == ids.charge
        assert charges.mark_paid.await_args.args == (db, ids.charge, None, "pi_123")
        notifications.emit.assert_awaited_once()

    async def test_redelivery_is_noop(self, svc, processor, charges, notifications, db, ids, make_charge):
        processor.event = _succeeded_event(ids.charge)
        charges.get_by_id.return_value = make_charge(status="PAID", gateway_ref="pi_123")

        outcome = await svc.handle_webhook(db, b"{}", SIGNATURE)

        assert outcome.result == "already_paid"
        charges.mark_paid.assert_not_awaited()
        notifications.emit.assert_not_awaited()

    async def test_falls_back_to_gateway_ref(self, svc, processor, charges, db, make_charge):
        processor.event = _succeeded_event(None)
        charges.get_by_gateway_ref.return_value = make_charge(status="OVERDUE")
        charges.mark_paid.return_value = make_charge(status="PAID")

        outcome = await svc.handle_webhook(db, b"{}", SIGNATURE)

        assert outcome.result == "reconciled"
        charges.get_by_id.assert_not_awaited()
        assert charges.get_by_gateway_ref.await_args.args == (db, "pi_123")

    async def test_unmatched_intent(self, svc, processor, charges, db):
        processor.event = _succeeded_event("not-a-uuid")
        charges.get_by_gateway_ref.return_value = None

        outcome = await svc.handle_webhook(db, b"{}", SIGNATURE)

        assert outcome.result == "unmatched"
        charges.get_by_id.assert_not_awaited()

    async def test_amount_mismatch_ignored(self, svc, processor, charges, db, ids, make_charge):
        processor.event = _succeeded_event(ids.charge, amount_cents=100)
        charges.get_by_id.return_value = make_charge()

        outcome = await svc.handle_webhook(db, b"{}", SIGNATURE)

        assert outcome.result == "ignored"
        charges.mark_paid.assert_not_awaited()

    async def test_other_events_ignored(self, svc, processor, charges, db):
        processor.event = GatewayEvent(id="evt_2", type="charge.refunded")

        outcome = await svc.handle_webhook(db, b"{}", SIGNATURE)

        assert outcome.result == "ignored"
        charges.get_by_id.assert_not_awaited()
