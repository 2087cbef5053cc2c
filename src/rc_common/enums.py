"""Global enums: must match DB CHECK constraints exactly.

Ref: alembic/versions/001_create_accounts_and_residents.py onwards.
"""

from enum import Enum


class AccountRole(str, Enum):
    ADMIN = "ADMIN"
    RESIDENT = "RESIDENT"


class ChargeType(str, Enum):
    MAINTENANCE = "MAINTENANCE"
    WATER = "WATER"
    GATE = "GATE"


class ChargeStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


# Statuses from which a charge may still be settled
PAYABLE_STATUSES: tuple[str, ...] = (ChargeStatus.PENDING.value, ChargeStatus.OVERDUE.value)


class DocumentType(str, Enum):
    INVOICE = "INVOICE"
    RECEIPT = "RECEIPT"
    NOTICE = "NOTICE"
    STATEMENT = "STATEMENT"


class NotificationType(str, Enum):
    PAYMENT_DUE = "PAYMENT_DUE"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    DOCUMENT_SENT = "DOCUMENT_SENT"
    GENERAL = "GENERAL"


class GatewayEventType(str, Enum):
    PAYMENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_FAILED = "payment_intent.payment_failed"
