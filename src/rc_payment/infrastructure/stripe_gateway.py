"""StripeGateway: PaymentProcessorProtocol over the stripe SDK.

The SDK is synchronous; every network call runs in a worker thread so the
event loop keeps serving other requests. The API key is passed per call
instead of being set on the stripe module.
"""

import asyncio
import logging
from typing import Any

import stripe

from config.settings import Settings
from src.rc_common.errors import GatewayError, GatewayNotConfiguredError, WebhookSignatureError
from src.rc_payment.domain.models import GatewayEvent, GatewayIntent

logger = logging.getLogger("rc.gateway")


def _metadata(obj: Any) -> dict[str, str]:
    if obj is None:
        return {}
    return {str(k): str(obj[k]) for k in obj.keys()}


def _to_intent(obj: Any) -> GatewayIntent:
    return GatewayIntent(
        id=obj.id,
        status=obj.status,
        amount_cents=int(obj.amount),
        client_secret=getattr(obj, "client_secret", None),
        metadata=_metadata(getattr(obj, "metadata", None)),
    )


class StripeGateway:
    def __init__(self, secret_key: str, webhook_secret: str) -> None:
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeGateway":
        if not settings.STRIPE_SECRET_KEY:
            raise GatewayNotConfiguredError()
        return cls(settings.STRIPE_SECRET_KEY, settings.STRIPE_WEBHOOK_SECRET)

    async def create_intent(
        self,
        amount_cents: int,
        currency: str,
        payment_method: str,
        return_url: str,
        metadata: dict[str, str],
    ) -> GatewayIntent:
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                api_key=self._secret_key,
                amount=amount_cents,
                currency=currency,
                payment_method=payment_method,
                confirm=True,
                return_url=return_url,
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.warning("Stripe rejected intent for charge %s: %s", metadata.get("charge_id"), e)
            raise GatewayError(str(e.user_message or e)) from e
        return _to_intent(intent)

    async def retrieve_intent(self, intent_id: str) -> GatewayIntent:
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.retrieve, intent_id, api_key=self._secret_key
            )
        except stripe.StripeError as e:
            logger.warning("Stripe intent lookup %s failed: %s", intent_id, e)
            raise GatewayError(f"invalid payment intent ({e.user_message or e})") from e
        return _to_intent(intent)

    def construct_event(self, payload: bytes, signature: str) -> GatewayEvent:
        if not self._webhook_secret:
            raise GatewayNotConfiguredError()
        try:
            event = stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            raise WebhookSignatureError() from e

        intent = None
        if event.type.startswith("payment_intent."):
            intent = _to_intent(event.data.object)
        return GatewayEvent(id=event.id, type=event.type, intent=intent)
