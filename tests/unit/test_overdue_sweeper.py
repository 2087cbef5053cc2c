"""Unit tests for the overdue sweep."""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from src.rc_charge.application.sweeper import OverdueSweeper
from src.rc_common.errors import AdminRequiredError


@pytest.fixture
def repo():
    return AsyncMock()


@pytest.fixture
def notifications():
    return AsyncMock()


@pytest.fixture
def sweeper(repo, notifications):
    return OverdueSweeper(repo=repo, notifications=notifications)


class TestSweep:
    async def test_flips_charge_past_due(
        self, sweeper, repo, notifications, admin, session_factory, make_charge
    ):
        pending = make_charge(due_date=date(2025, 1, 15))
        repo.list_overdue_candidates.return_value = [pending]
        repo.mark_overdue.return_value = make_charge(status="OVERDUE")

        report = await sweeper.sweep(session_factory, admin, as_of=date(2025, 1, 16))

        assert report.count == 1
        assert report.candidates == 1
        assert repo.list_overdue_candidates.await_args.args[1] == date(2025, 1, 16)
        draft = notifications.emit.await_args.args[1]
        assert draft.type == "PAYMENT_DUE"
        assert draft.title == "Payment overdue"
        assert draft.account_id == pending.account_id

    async def test_second_run_finds_nothing(self, sweeper, repo, notifications, admin, session_factory):
        repo.list_overdue_candidates.return_value = []

        report = await sweeper.sweep(session_factory, admin, as_of=date(2025, 1, 20))

        assert report.count == 0
        repo.mark_overdue.assert_not_awaited()
        notifications.emit.assert_not_awaited()

    async def test_charge_paid_meanwhile_is_skipped(
        self, sweeper, repo, notifications, admin, session_factory, make_charge
    ):
        repo.list_overdue_candidates.return_value = [make_charge()]
        repo.mark_overdue.return_value = None

        report = await sweeper.sweep(session_factory, admin, as_of=date(2025, 1, 16))

        assert report.count == 0
        assert report.result.failed == []
        notifications.emit.assert_not_awaited()

    async def test_failed_item_does_not_stop_others(
        self, sweeper, repo, admin, session_factory, make_charge
    ):
        repo.list_overdue_candidates.return_value = [make_charge(id="c-1"), make_charge(id="c-2")]

        async def _flip(db, charge_id):
            if charge_id == "c-1":
                raise RuntimeError("deadlock detected")
            return make_charge(id=charge_id, status="OVERDUE")

        repo.mark_overdue.side_effect = _flip

        report = await sweeper.sweep(session_factory, admin, as_of=date(2025, 1, 16))

        assert report.count == 1
        assert [o.key for o in report.result.failed] == ["c-1"]

    async def test_defaults_to_today(self, sweeper, repo, admin, session_factory):
        repo.list_overdue_candidates.return_value = []
        with patch(
            "src.rc_charge.application.sweeper.utc_today", return_value=date(2025, 2, 1)
        ):
            report = await sweeper.sweep(session_factory, admin)
        assert report.as_of == date(2025, 2, 1)

    async def test_resident_cannot_sweep(self, sweeper, repo, resident_a101, session_factory):
        with pytest.raises(AdminRequiredError):
            await sweeper.sweep(session_factory, resident_a101)
        repo.list_overdue_candidates.assert_not_awaited()
