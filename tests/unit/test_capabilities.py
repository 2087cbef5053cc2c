"""Unit tests for the single authorization check."""

import pytest

from src.rc_common.errors import (
    AdminRequiredError,
    ForbiddenError,
    ResidentProfileRequiredError,
)
from src.rc_gateway.auth.capabilities import Capability, authorize

ADMIN_ONLY = [
    Capability.MANAGE_LEDGER,
    Capability.RUN_SWEEP,
    Capability.MANAGE_RESIDENTS,
    Capability.MANAGE_DOCUMENTS,
    Capability.SEND_NOTIFICATIONS,
]


class TestAdminOnly:
    @pytest.mark.parametrize("capability", ADMIN_ONLY)
    def test_admin_allowed(self, admin, capability) -> None:
        authorize(admin, capability)

    @pytest.mark.parametrize("capability", ADMIN_ONLY)
    def test_resident_rejected(self, resident_a101, capability) -> None:
        with pytest.raises(AdminRequiredError):
            authorize(resident_a101, capability)


class TestResidentScoped:
    def test_own_charge_allowed(self, resident_a101, ids) -> None:
        authorize(resident_a101, Capability.PAY_CHARGE, owner_resident_id=ids.a101_resident)

    def test_foreign_charge_forbidden(self, resident_a101, ids) -> None:
        with pytest.raises(ForbiddenError):
            authorize(resident_a101, Capability.PAY_CHARGE, owner_resident_id=ids.b202_resident)

    def test_admin_without_profile_cannot_pay(self, admin) -> None:
        with pytest.raises(ResidentProfileRequiredError):
            authorize(admin, Capability.PAY_CHARGE)

    def test_scope_without_owner_only_needs_profile(self, resident_a101) -> None:
        authorize(resident_a101, Capability.VIEW_OWN_CHARGES)


class TestDocumentVisibility:
    def test_admin_sees_any_document(self, admin, ids) -> None:
        authorize(admin, Capability.VIEW_DOCUMENT, owner_resident_id=ids.b202_resident)

    def test_owner_sees_document(self, resident_a101, ids) -> None:
        authorize(resident_a101, Capability.VIEW_DOCUMENT, owner_resident_id=ids.a101_resident)

    def test_other_resident_forbidden(self, resident_b202, ids) -> None:
        with pytest.raises(ForbiddenError):
            authorize(resident_b202, Capability.VIEW_DOCUMENT, owner_resident_id=ids.a101_resident)


class TestNotificationOwnership:
    def test_owner_account(self, resident_a101, ids) -> None:
        authorize(resident_a101, Capability.MANAGE_OWN_NOTIFICATION, owner_account_id=ids.a101_account)

    def test_admin_cannot_touch_resident_notification(self, admin, ids) -> None:
        with pytest.raises(ForbiddenError):
            authorize(admin, Capability.MANAGE_OWN_NOTIFICATION, owner_account_id=ids.a101_account)

    def test_admin_owns_own_notification(self, admin, ids) -> None:
        authorize(admin, Capability.MANAGE_OWN_NOTIFICATION, owner_account_id=ids.admin_account)
