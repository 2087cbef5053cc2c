"""Unit-test fixtures: actors, domain object builders, fake session factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from src.rc_charge.domain.models import Charge
from src.rc_common.enums import AccountRole
from src.rc_document.domain.models import Document
from src.rc_gateway.auth.capabilities import Actor
from src.rc_notification.domain.models import Notification
from src.rc_resident.domain.models import Resident

ADMIN_ACCOUNT = "00000000-0000-4000-a000-000000000001"
A101_ACCOUNT = "11111111-1111-4111-a111-111111111111"
A101_RESIDENT = "22222222-2222-4222-a222-222222222222"
B202_ACCOUNT = "33333333-3333-4333-a333-333333333333"
B202_RESIDENT = "44444444-4444-4444-a444-444444444444"
CHARGE_ID = "55555555-5555-4555-a555-555555555555"
DOCUMENT_ID = "66666666-6666-4666-a666-666666666666"
NOTIFICATION_ID = "77777777-7777-4777-a777-777777777777"


@pytest.fixture
def ids() -> SimpleNamespace:
    """Well-known ids, so test modules need not import this conftest."""
    return SimpleNamespace(
        admin_account=ADMIN_ACCOUNT, a101_account=A101_ACCOUNT, a101_resident=A101_RESIDENT,
        b202_account=B202_ACCOUNT, b202_resident=B202_RESIDENT, charge=CHARGE_ID,
        document=DOCUMENT_ID, notification=NOTIFICATION_ID,
    )


class FakeSessionFactory:
    """Stands in for async_sessionmaker; every call yields a fresh AsyncMock session."""

    def __init__(self) -> None:
        self.sessions: list[AsyncMock] = []

    def __call__(self):  # type: ignore[no-untyped-def]
        session = AsyncMock()
        self.sessions.append(session)

        @asynccontextmanager
        async def _ctx() -> AsyncIterator[AsyncMock]:
            yield session

        return _ctx()


@pytest.fixture
def admin() -> Actor:
    return Actor(account_id=ADMIN_ACCOUNT, role=AccountRole.ADMIN.value)


@pytest.fixture
def resident_a101() -> Actor:
    return Actor(account_id=A101_ACCOUNT, role=AccountRole.RESIDENT.value, resident_id=A101_RESIDENT)


@pytest.fixture
def resident_b202() -> Actor:
    return Actor(account_id=B202_ACCOUNT, role=AccountRole.RESIDENT.value, resident_id=B202_RESIDENT)


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def make_resident():
    def _make(**kwargs) -> Resident:
        defaults = dict(
            id=A101_RESIDENT, account_id=A101_ACCOUNT, house_number="A-101",
            phone="555-0101", is_active=True, name="Ana Torres",
            email="ana@example.com", created_at=datetime(2024, 12, 1, tzinfo=UTC),
        )
        defaults.update(kwargs)
        return Resident(**defaults)
    return _make


@pytest.fixture
def make_charge():
    def _make(**kwargs) -> Charge:
        defaults = dict(
            id=CHARGE_ID, resident_id=A101_RESIDENT, issued_by=ADMIN_ACCOUNT,
            type="MAINTENANCE", amount_cents=80000, due_date=date(2025, 1, 15),
            status="PENDING", paid_date=None, description="Maintenance charge - January 2025",
            gateway_ref=None, created_at=datetime(2025, 1, 1, tzinfo=UTC),
            updated_at=datetime(2025, 1, 1, tzinfo=UTC), account_id=A101_ACCOUNT,
            house_number="A-101", resident_name="Ana Torres", resident_email="ana@example.com",
        )
        defaults.update(kwargs)
        return Charge(**defaults)
    return _make


@pytest.fixture
def make_document():
    def _make(**kwargs) -> Document:
        defaults = dict(
            id=DOCUMENT_ID, resident_id=A101_RESIDENT, issued_by=ADMIN_ACCOUNT,
            type="INVOICE", title="Water invoice - January 2025", content="Water usage",
            file_ref="invoice-a101.pdf", is_read=False,
            created_at=datetime(2025, 1, 2, tzinfo=UTC), account_id=A101_ACCOUNT,
            house_number="A-101", resident_name="Ana Torres",
        )
        defaults.update(kwargs)
        return Document(**defaults)
    return _make


@pytest.fixture
def make_notification():
    def _make(**kwargs) -> Notification:
        defaults = dict(
            id=NOTIFICATION_ID, account_id=A101_ACCOUNT, title="New charge assigned",
            message="A new maintenance charge of $800.00 is due on 15/01/2025",
            type="PAYMENT_DUE", is_read=False, created_at=datetime(2025, 1, 1, tzinfo=UTC),
        )
        defaults.update(kwargs)
        return Notification(**defaults)
    return _make
