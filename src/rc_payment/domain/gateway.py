"""Payment processor contract.

The service only ever talks to this Protocol; StripeGateway is the production
implementation and tests pass a fake.
"""

from typing import Protocol

from src.rc_payment.domain.models import GatewayEvent, GatewayIntent


class PaymentProcessorProtocol(Protocol):
    async def create_intent(
        self,
        amount_cents: int,
        currency: str,
        payment_method: str,
        return_url: str,
        metadata: dict[str, str],
    ) -> GatewayIntent: ...

    async def retrieve_intent(self, intent_id: str) -> GatewayIntent: ...

    def construct_event(self, payload: bytes, signature: str) -> GatewayEvent:
        """Verify the signature and parse the event. Raises WebhookSignatureError."""
        ...
