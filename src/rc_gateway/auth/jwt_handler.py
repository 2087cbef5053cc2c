"""Access and refresh tokens.

Both are HS256 JWTs signed with JWT_SECRET and carry the account id (``sub``),
the role and the token type. The role lets handlers build an Actor without a
second query; the account row is still loaded per request so deactivation
takes effect immediately.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.rc_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

ACCESS = "access"
REFRESH = "refresh"

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


@dataclass(frozen=True)
class TokenClaims:
    account_id: str
    role: str
    token_type: str


def _issue(account_id: str, role: str, token_type: str, ttl: timedelta) -> str:
    now = datetime.now(UTC)
    claims = {"sub": account_id, "role": role, "type": token_type, "iat": now, "exp": now + ttl}
    return str(jwt.encode(claims, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(account_id: str, role: str) -> str:
    return _issue(account_id, role, ACCESS, _ACCESS_EXPIRE)


def create_refresh_token(account_id: str, role: str) -> str:
    return _issue(account_id, role, REFRESH, _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> TokenClaims:
    """Verify signature, expiry and type.

    A refresh token is never accepted where an access token is expected and
    vice versa. Failures raise InvalidCredentialsError for access tokens and
    InvalidRefreshTokenError for refresh tokens.
    """
    error = InvalidCredentialsError if expected_type == ACCESS else InvalidRefreshTokenError
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[_ALGORITHM])
    except JWTError:
        raise error() from None

    if claims.get("type") != expected_type or not claims.get("sub"):
        raise error()
    return TokenClaims(
        account_id=str(claims["sub"]),
        role=str(claims.get("role", "")),
        token_type=expected_type,
    )
