"""Notification texts emitted as side effects of charge and document events."""

from src.rc_charge.domain.models import Charge
from src.rc_common.cents import cents_to_display
from src.rc_common.datetime_utils import format_day
from src.rc_common.enums import NotificationType
from src.rc_notification.domain.models import NotificationDraft


def _label(charge: Charge) -> str:
    return charge.type.lower()


def charge_issued(charge: Charge) -> NotificationDraft:
    return NotificationDraft(
        account_id=charge.account_id,
        title="New charge assigned",
        message=(
            f"A new {_label(charge)} charge of {cents_to_display(charge.amount_cents)} "
            f"is due on {format_day(charge.due_date)}"
        ),
        type=NotificationType.PAYMENT_DUE.value,
    )


def charge_paid(charge: Charge) -> NotificationDraft:
    return NotificationDraft(
        account_id=charge.account_id,
        title="Payment confirmed",
        message=(
            f"Your {_label(charge)} payment of {cents_to_display(charge.amount_cents)} "
            "has been confirmed"
        ),
        type=NotificationType.PAYMENT_RECEIVED.value,
    )


def charge_overdue(charge: Charge) -> NotificationDraft:
    return NotificationDraft(
        account_id=charge.account_id,
        title="Payment overdue",
        message=(
            f"Your {_label(charge)} payment of {cents_to_display(charge.amount_cents)} "
            f"was due on {format_day(charge.due_date)} and is now overdue"
        ),
        type=NotificationType.PAYMENT_DUE.value,
    )


def document_sent(account_id: str, title: str) -> NotificationDraft:
    return NotificationDraft(
        account_id=account_id,
        title="New document available",
        message=f"{title} is now available in your documents",
        type=NotificationType.DOCUMENT_SENT.value,
    )
