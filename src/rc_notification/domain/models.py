"""Domain models for rc_notification."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notification:
    id: str
    account_id: str
    title: str
    message: str
    type: str                       # NotificationType value
    is_read: bool
    created_at: datetime


@dataclass(frozen=True)
class NotificationDraft:
    """A notification that has not been written yet."""

    account_id: str
    title: str
    message: str
    type: str
