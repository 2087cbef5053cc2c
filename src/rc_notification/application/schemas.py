"""Pydantic schemas for rc_notification."""

import uuid
from datetime import datetime

from pydantic import Field

from src.rc_common.enums import NotificationType
from src.rc_common.response import CamelModel
from src.rc_notification.domain.models import Notification


class NotificationOut(CamelModel):
    id: str
    title: str
    message: str
    type: str
    is_read: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, n: Notification) -> "NotificationOut":
        return cls(
            id=n.id,
            title=n.title,
            message=n.message,
            type=n.type,
            is_read=n.is_read,
            created_at=n.created_at,
        )


class SendMassNotificationRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)
    type: NotificationType = NotificationType.GENERAL
    resident_ids: list[uuid.UUID] | None = None
