"""Single authorization check used by every ledger, gateway, document and
notification operation before it mutates anything.

Handlers resolve the caller into an ``Actor`` once (see dependencies.py);
services call ``authorize(actor, capability, ...)`` with whatever owner ids
the target entity carries.
"""

from dataclasses import dataclass
from enum import Enum

from src.rc_common.enums import AccountRole
from src.rc_common.errors import (
    AdminRequiredError,
    ForbiddenError,
    ResidentProfileRequiredError,
)


@dataclass(frozen=True)
class Actor:
    account_id: str
    role: str
    resident_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN.value


class Capability(str, Enum):
    MANAGE_LEDGER = "MANAGE_LEDGER"
    RUN_SWEEP = "RUN_SWEEP"
    MANAGE_RESIDENTS = "MANAGE_RESIDENTS"
    MANAGE_DOCUMENTS = "MANAGE_DOCUMENTS"
    SEND_NOTIFICATIONS = "SEND_NOTIFICATIONS"
    VIEW_OWN_CHARGES = "VIEW_OWN_CHARGES"
    PAY_CHARGE = "PAY_CHARGE"
    VIEW_DOCUMENT = "VIEW_DOCUMENT"
    MANAGE_OWN_NOTIFICATION = "MANAGE_OWN_NOTIFICATION"


_ADMIN_ONLY = frozenset({
    Capability.MANAGE_LEDGER,
    Capability.RUN_SWEEP,
    Capability.MANAGE_RESIDENTS,
    Capability.MANAGE_DOCUMENTS,
    Capability.SEND_NOTIFICATIONS,
})

_RESIDENT_SCOPED = frozenset({
    Capability.VIEW_OWN_CHARGES,
    Capability.PAY_CHARGE,
})


def authorize(
    actor: Actor,
    capability: Capability,
    owner_resident_id: str | None = None,
    owner_account_id: str | None = None,
) -> None:
    """Raise unless ``actor`` holds ``capability`` over the given owner.

    Admin-only capabilities ignore the owner ids. Resident-scoped ones require
    a resident profile and, when an owner is given, that it is the actor's.
    Documents are visible to admins and their owning resident. Notifications
    belong to exactly one account, admins included.
    """
    if capability in _ADMIN_ONLY:
        if not actor.is_admin:
            raise AdminRequiredError()
        return

    if capability in _RESIDENT_SCOPED:
        if actor.resident_id is None:
            raise ResidentProfileRequiredError()
        if owner_resident_id is not None and owner_resident_id != actor.resident_id:
            raise ForbiddenError()
        return

    if capability is Capability.VIEW_DOCUMENT:
        if actor.is_admin:
            return
        if owner_resident_id is None or owner_resident_id != actor.resident_id:
            raise ForbiddenError()
        return

    if capability is Capability.MANAGE_OWN_NOTIFICATION:
        if owner_account_id != actor.account_id:
            raise ForbiddenError()
        return

    raise ForbiddenError(f"Unknown capability: {capability}")
