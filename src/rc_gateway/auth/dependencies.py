"""FastAPI dependencies: get_current_account, get_current_actor, require_admin.

Usage in any protected router:
    from src.rc_gateway.auth.dependencies import get_current_actor

    @router.get("/protected")
    async def protected(actor: Actor = Depends(get_current_actor)):
        ...
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_common.database import get_db_session
from src.rc_common.errors import AccountDisabledError, AdminRequiredError, InvalidCredentialsError
from src.rc_gateway.account.db_models import AccountModel
from src.rc_gateway.auth.capabilities import Actor
from src.rc_gateway.auth.jwt_handler import ACCESS, decode_token

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_account(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> AccountModel:
    """Extract and validate the JWT Bearer token, return the AccountModel.

    Raises HTTP 401 if the token is missing, invalid, or expired, or the
    account no longer exists. Raises 403 if the account is disabled.
    """
    try:
        claims = decode_token(token, expected_type=ACCESS)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    try:
        account_uuid = uuid.UUID(claims.account_id)
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(AccountModel).where(AccountModel.id == account_uuid))
    account = result.scalar_one_or_none()
    if account is None:
        raise _CREDENTIALS_EXCEPTION

    if not account.is_active:
        raise AccountDisabledError()

    return account


async def get_current_actor(
    account: AccountModel = Depends(get_current_account),
) -> Actor:
    resident = account.resident
    return Actor(
        account_id=str(account.id),
        role=account.role,
        resident_id=str(resident.id) if resident is not None else None,
    )


async def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Verify the caller holds the ADMIN role (403 otherwise)."""
    if not actor.is_admin:
        raise AdminRequiredError()
    return actor
