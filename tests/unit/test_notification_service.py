"""Unit tests for NotificationService."""

from unittest.mock import AsyncMock

import pytest

from src.rc_common.errors import (
    AdminRequiredError,
    ForbiddenError,
    NoActiveResidentsError,
    NotificationNotFoundError,
)
from src.rc_notification.application.service import NotificationService


@pytest.fixture
def repo():
    return AsyncMock()


@pytest.fixture
def residents():
    return AsyncMock()


@pytest.fixture
def svc(repo, residents):
    return NotificationService(repo=repo, residents=residents)


class TestOwnership:
    async def test_mark_read_own(self, svc, repo, resident_a101, db, make_notification):
        repo.get_by_id.return_value = make_notification()
        repo.mark_read.return_value = make_notification(is_read=True)

        notification = await svc.mark_read(db, resident_a101, "n-1")

        assert notification.is_read is True

    async def test_foreign_notification_forbidden(
        self, svc, repo, resident_b202, db, make_notification
    ):
        repo.get_by_id.return_value = make_notification()

        with pytest.raises(ForbiddenError):
            await svc.mark_read(db, resident_b202, "n-1")

        repo.mark_read.assert_not_awaited()

    async def test_missing_is_not_found(self, svc, repo, resident_a101, db):
        repo.get_by_id.return_value = None
        with pytest.raises(NotificationNotFoundError):
            await svc.delete(db, resident_a101, "n-404")

    async def test_delete_own(self, svc, repo, resident_a101, db, make_notification):
        repo.get_by_id.return_value = make_notification()
        repo.delete.return_value = True

        await svc.delete(db, resident_a101, "n-1")

        repo.delete.assert_awaited_once_with(db, "n-1")


class TestQueries:
    async def test_listing_is_account_scoped(self, svc, repo, resident_a101, db, ids):
        repo.list_for_account.return_value = []
        repo.count_for_account.return_value = 12

        _, pagination = await svc.list_notifications(db, resident_a101, False, 2, 10)

        assert repo.list_for_account.await_args.args == (db, ids.a101_account, False, 10, 10)
        assert pagination.pages == 2

    async def test_unread_count(self, svc, repo, resident_a101, db, ids):
        repo.count_for_account.return_value = 3
        assert await svc.unread_count(db, resident_a101) == 3
        assert repo.count_for_account.await_args.args == (db, ids.a101_account, False)

    async def test_mark_all_read(self, svc, repo, resident_a101, db):
        repo.mark_all_read.return_value = 4
        assert await svc.mark_all_read(db, resident_a101) == 4


class TestSendMass:
    async def test_no_recipients(self, svc, residents, admin, session_factory):
        residents.list_active.return_value = []
        with pytest.raises(NoActiveResidentsError):
            await svc.send_mass(session_factory, admin, "Water cut", "Tomorrow 9-12", "GENERAL")

    async def test_one_notification_per_resident(
        self, svc, repo, residents, admin, session_factory, make_resident, make_notification
    ):
        residents.list_active.return_value = [
            make_resident(),
            make_resident(id="r-b202", account_id="acct-b202", house_number="B-202"),
        ]
        repo.insert.return_value = make_notification(type="GENERAL")

        result = await svc.send_mass(
            session_factory, admin, "Water cut", "Tomorrow 9-12", "GENERAL"
        )

        assert len(result.succeeded) == 2
        recipients = [call.args[1].account_id for call in repo.insert.await_args_list]
        assert sorted(recipients) == sorted([make_resident().account_id, "acct-b202"])

    async def test_subset_passed_to_repository(self, svc, residents, admin, session_factory):
        residents.list_active.return_value = []
        with pytest.raises(NoActiveResidentsError):
            await svc.send_mass(session_factory, admin, "t", "m", "GENERAL", ["r-1"])
        assert residents.list_active.await_args.args[1] == ["r-1"]

    async def test_resident_cannot_broadcast(self, svc, resident_a101, session_factory):
        with pytest.raises(AdminRequiredError):
            await svc.send_mass(session_factory, resident_a101, "t", "m", "GENERAL")
