"""Pydantic schemas for the payment gateway endpoints."""

import uuid

from pydantic import Field

from src.rc_common.response import CamelModel
from src.rc_payment.domain.models import GatewayIntent


class CreateIntentRequest(CamelModel):
    payment_id: uuid.UUID
    payment_method_id: str = Field(..., min_length=1, max_length=255)


class CreateIntentResponse(CamelModel):
    client_secret: str | None
    payment_intent_id: str
    status: str

    @classmethod
    def from_domain(cls, intent: GatewayIntent) -> "CreateIntentResponse":
        return cls(
            client_secret=intent.client_secret,
            payment_intent_id=intent.id,
            status=intent.status,
        )


class ConfirmPaymentRequest(CamelModel):
    payment_intent_id: str = Field(..., min_length=1, max_length=255)
    payment_id: uuid.UUID


class MarkAsPaidRequest(CamelModel):
    payment_id: uuid.UUID
