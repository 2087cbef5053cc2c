"""Unit tests for the error taxonomy."""

import pytest

from src.rc_common.errors import (
    AdminRequiredError,
    AppError,
    ChargeNotFoundError,
    ChargeNotPayableError,
    ForbiddenError,
    GatewayError,
    GatewayNotConfiguredError,
    InternalError,
    InvalidCredentialsError,
    NoActiveResidentsError,
    ResidentInactiveError,
    StoredFileNotFoundError,
    WebhookSignatureError,
)


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (ChargeNotFoundError("c-1"), 404),
        (StoredFileNotFoundError(), 404),
        (InvalidCredentialsError(), 401),
        (ForbiddenError(), 403),
        (AdminRequiredError(), 403),
        (ResidentInactiveError("r-1"), 400),
        (NoActiveResidentsError(), 400),
        (ChargeNotPayableError("c-1", "PAID"), 400),
        (WebhookSignatureError(), 400),
        (GatewayError("card declined"), 400),
        (GatewayNotConfiguredError(), 500),
        (InternalError(), 500),
    ],
)
def test_http_status_per_taxonomy_bucket(error: AppError, status: int) -> None:
    assert error.http_status == status


def test_codes_are_unique() -> None:
    errors = [
        ChargeNotFoundError("x"), ChargeNotPayableError("x", "PAID"), ForbiddenError(),
        AdminRequiredError(), InvalidCredentialsError(), ResidentInactiveError("x"),
        NoActiveResidentsError(), WebhookSignatureError(), GatewayError("x"),
        GatewayNotConfiguredError(), StoredFileNotFoundError(), InternalError(),
    ]
    codes = [e.code for e in errors]
    assert len(codes) == len(set(codes))


def test_message_is_exception_text() -> None:
    err = ChargeNotPayableError("c-1", "PAID")
    assert str(err) == err.message
    assert "PAID" in err.message


def test_gateway_error_prefixes_detail() -> None:
    assert GatewayError("card declined").message == "Payment processor error: card declined"
