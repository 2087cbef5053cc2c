"""Account domain service: register, login, refresh, profile.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import logging
import uuid

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.enums import AccountRole
from src.rc_common.errors import (
    AccountDisabledError,
    AccountNotFoundError,
    EmailExistsError,
    HouseNumberExistsError,
    InvalidCredentialsError,
    WrongPasswordError,
)
from src.rc_gateway.account.db_models import AccountModel, ResidentModel
from src.rc_gateway.auth.jwt_handler import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.rc_gateway.auth.password import hash_password, verify_password

logger = logging.getLogger("rc.account")

_INSERT_RESIDENT_SQL = text("""
    INSERT INTO residents (account_id, house_number, phone, is_active)
    VALUES (:account_id, :house_number, :phone, TRUE)
""")

_UPDATE_RESIDENT_PHONE_SQL = text("""
    UPDATE residents SET phone = :phone WHERE account_id = :account_id
""")

_UNREAD_COUNT_SQL = text("""
    SELECT COUNT(*) FROM notifications WHERE account_id = :account_id AND is_read = FALSE
""")


class AccountService:
    """Stateless service: instantiate once, reuse across requests."""

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        house_number: str,
        phone: str | None,
        db: AsyncSession,
    ) -> AccountModel:
        """Register a RESIDENT account together with its resident profile.

        Inserts into `accounts` and `residents` in a single transaction.
        The caller must wrap this in `async with db.begin()`.
        """
        account = await self._create_account(
            email, password, name, AccountRole.RESIDENT.value, db
        )

        result = await db.execute(
            select(ResidentModel).where(ResidentModel.house_number == house_number)
        )
        if result.scalar_one_or_none() is not None:
            raise HouseNumberExistsError(house_number)

        await db.execute(
            _INSERT_RESIDENT_SQL,
            {"account_id": account.id, "house_number": house_number, "phone": phone},
        )
        await db.refresh(account, attribute_names=["resident"])
        logger.info("Registered resident account %s for house %s", account.id, house_number)
        return account

    async def create_admin(
        self, email: str, password: str, name: str, db: AsyncSession
    ) -> AccountModel:
        account = await self._create_account(email, password, name, AccountRole.ADMIN.value, db)
        logger.info("Created admin account %s", account.id)
        return account

    async def _create_account(
        self, email: str, password: str, name: str, role: str, db: AsyncSession
    ) -> AccountModel:
        # Check email uniqueness (DB UNIQUE constraint is the final guard)
        email = email.lower()
        result = await db.execute(select(AccountModel).where(AccountModel.email == email))
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        account = AccountModel(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
            is_active=True,
        )
        db.add(account)
        await db.flush()  # Get account.id without committing
        return account

    async def login(
        self,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[AccountModel, str, str]:
        """Authenticate and return (account, access_token, refresh_token).

        "Unknown email" and "wrong password" both raise InvalidCredentialsError
        so the endpoint does not reveal which emails are registered.
        """
        result = await db.execute(
            select(AccountModel).where(AccountModel.email == email.lower())
        )
        account = result.scalar_one_or_none()

        stored_hash = account.password_hash if account is not None else None
        if not verify_password(password, stored_hash) or account is None:
            raise InvalidCredentialsError()

        if not account.is_active:
            raise AccountDisabledError()

        return (
            account,
            create_access_token(str(account.id), account.role),
            create_refresh_token(str(account.id), account.role),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate refresh token and return a new access token."""
        claims = decode_token(refresh_token, expected_type=REFRESH)
        return create_access_token(claims.account_id, claims.role)

    async def get_account(self, account_id: str, db: AsyncSession) -> AccountModel:
        result = await db.execute(
            select(AccountModel).where(AccountModel.id == uuid.UUID(account_id))
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def unread_count(self, account_id: str, db: AsyncSession) -> int:
        result = await db.execute(_UNREAD_COUNT_SQL, {"account_id": account_id})
        return int(result.scalar_one())

    async def update_profile(
        self,
        account: AccountModel,
        name: str | None,
        phone: str | None,
        db: AsyncSession,
    ) -> AccountModel:
        """Update display name and, for residents, the contact phone."""
        if name:
            account.name = name.strip()
        if phone is not None and account.resident is not None:
            await db.execute(
                _UPDATE_RESIDENT_PHONE_SQL, {"account_id": account.id, "phone": phone}
            )
        await db.flush()
        await db.refresh(account, attribute_names=["resident"])
        return account

    async def change_password(
        self,
        account: AccountModel,
        current_password: str,
        new_password: str,
        db: AsyncSession,
    ) -> None:
        if not verify_password(current_password, account.password_hash):
            raise WrongPasswordError()
        account.password_hash = hash_password(new_password)
        await db.flush()
