"""Unit tests for charge request/response schemas."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.rc_charge.application.schemas import (
    ChargeOut,
    ChargeReportSummary,
    ChargeStatsOut,
    CreateChargeRequest,
    CreateMassChargesRequest,
)
from src.rc_charge.domain.models import ChargeStats, StatusBucket


def _body(**overrides) -> dict:
    body = {
        "residentId": "22222222-2222-4222-a222-222222222222",
        "type": "MAINTENANCE",
        "amount": "800.00",
        "dueDate": "2025-01-15",
    }
    body.update(overrides)
    return body


class TestCreateChargeRequest:
    def test_camel_case_input_and_cents(self) -> None:
        req = CreateChargeRequest.model_validate(_body())
        assert req.amount_cents == 80000
        assert req.type.value == "MAINTENANCE"
        assert req.description is None

    def test_numeric_amount(self) -> None:
        assert CreateChargeRequest.model_validate(_body(amount=150.5)).amount_cents == 15050

    @pytest.mark.parametrize("amount", ["-1.00", "800.005", "abc"])
    def test_rejects_bad_amounts(self, amount) -> None:
        with pytest.raises(ValidationError):
            CreateChargeRequest.model_validate(_body(amount=amount))

    def test_amount_at_cap_is_accepted(self) -> None:
        req = CreateChargeRequest.model_validate(_body(amount="999999.99"))
        assert req.amount_cents == 99999999

    @pytest.mark.parametrize("amount", ["1000000.00", "100000000000000000"])
    def test_rejects_amount_above_cap(self, amount) -> None:
        with pytest.raises(ValidationError) as exc:
            CreateChargeRequest.model_validate(_body(amount=amount))
        assert exc.value.errors()[0]["loc"] == ("amount",)

    def test_mass_request_rejects_amount_above_cap(self) -> None:
        with pytest.raises(ValidationError):
            CreateMassChargesRequest.model_validate(
                {"type": "WATER", "amount": "1000000.00", "dueDate": "2025-01-31"}
            )

    def test_rejects_unknown_type(self) -> None:
        with pytest.raises(ValidationError):
            CreateChargeRequest.model_validate(_body(type="PARKING"))

    def test_rejects_malformed_resident_id(self) -> None:
        with pytest.raises(ValidationError):
            CreateChargeRequest.model_validate(_body(residentId="A-101"))

    def test_mass_request_has_no_resident(self) -> None:
        req = CreateMassChargesRequest.model_validate(
            {"type": "WATER", "amount": "120.00", "dueDate": "2025-01-31"}
        )
        assert req.amount_cents == 12000


class TestChargeOut:
    def test_json_shape(self, make_charge) -> None:
        body = ChargeOut.from_domain(make_charge()).to_json()

        assert body["amount"] == "800.00"
        assert body["amountCents"] == 80000
        assert body["amountDisplay"] == "$800.00"
        assert body["dueDate"] == "2025-01-15"
        assert body["status"] == "PENDING"
        assert body["paidDate"] is None
        assert body["resident"] == {
            "id": body["residentId"],
            "houseNumber": "A-101",
            "name": "Ana Torres",
            "email": "ana@example.com",
        }


class TestAggregates:
    def test_stats_list_every_type(self) -> None:
        stats = ChargeStats(
            total=StatusBucket(3, 200000),
            pending=StatusBucket(1, 80000),
            overdue=StatusBucket(1, 40000),
            paid=StatusBucket(1, 80000),
            by_type={"MAINTENANCE": StatusBucket(2, 160000)},
        )
        body = ChargeStatsOut.from_domain(stats).to_json()

        assert body["outstandingAmount"] == "1200.00"
        assert set(body["byType"]) == {"MAINTENANCE", "WATER", "GATE"}
        assert body["byType"]["WATER"] == {"count": 0, "amount": "0.00", "amountCents": 0}

    def test_report_summary(self, make_charge) -> None:
        charges = [
            make_charge(status="PAID"),
            make_charge(status="PENDING", amount_cents=12000),
            make_charge(status="OVERDUE", amount_cents=3000),
            make_charge(status="CANCELLED", amount_cents=500),
        ]
        summary = ChargeReportSummary.from_charges(charges)

        assert summary.total_payments == 4
        assert summary.total_amount == Decimal("955.00")
        assert summary.paid_amount == Decimal("800.00")
        assert summary.pending_amount == Decimal("150.00")
