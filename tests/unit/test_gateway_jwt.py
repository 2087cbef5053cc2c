"""Unit tests for JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from config.settings import settings
from src.rc_common.errors import InvalidCredentialsError, InvalidRefreshTokenError
from src.rc_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)


def test_access_token_carries_role() -> None:
    token = create_access_token("acct-1", "RESIDENT")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "acct-1"
    assert payload["role"] == "RESIDENT"
    assert payload["type"] == "access"


def test_decode_valid_refresh_token() -> None:
    token = create_refresh_token("acct-1", "ADMIN")
    claims = decode_token(token, expected_type="refresh")
    assert claims.account_id == "acct-1"
    assert claims.role == "ADMIN"
    assert claims.token_type == "refresh"


def test_access_token_used_as_refresh_raises_error() -> None:
    token = create_access_token("acct-1", "ADMIN")
    with pytest.raises(InvalidRefreshTokenError):
        decode_token(token, expected_type="refresh")


def test_refresh_token_used_as_access_raises_error() -> None:
    token = create_refresh_token("acct-1", "ADMIN")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_expired_access_token_raises_credentials_error() -> None:
    with patch("src.rc_gateway.auth.jwt_handler._ACCESS_EXPIRE", timedelta(seconds=-1)):
        token = create_access_token("acct-1", "RESIDENT")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")


def test_tampered_token_raises_error() -> None:
    token = create_access_token("acct-1", "RESIDENT")
    tampered = token[:-4] + ("aaaa" if not token.endswith("aaaa") else "bbbb")
    with pytest.raises(InvalidCredentialsError):
        decode_token(tampered, expected_type="access")


def test_token_without_subject_is_rejected() -> None:
    token = jwt.encode({"type": "access", "role": "ADMIN"}, settings.JWT_SECRET)
    with pytest.raises(InvalidCredentialsError):
        decode_token(token, expected_type="access")
