"""Processor-neutral views of payment intents and webhook events."""

from dataclasses import dataclass, field

INTENT_SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class GatewayIntent:
    id: str
    status: str
    amount_cents: int
    client_secret: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == INTENT_SUCCEEDED


@dataclass(frozen=True)
class GatewayEvent:
    id: str
    type: str
    intent: GatewayIntent | None = None


@dataclass(frozen=True)
class WebhookOutcome:
    event_type: str
    result: str                     # reconciled | already_paid | unmatched | ignored
    charge_id: str | None = None
