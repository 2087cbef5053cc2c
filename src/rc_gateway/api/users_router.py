"""Profile endpoints for the signed-in account."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.database import get_db_session
from src.rc_common.response import success_response
from src.rc_gateway.account.db_models import AccountModel
from src.rc_gateway.account.schemas import (
    AccountInfo,
    ChangePasswordRequest,
    UpdateProfileRequest,
)
from src.rc_gateway.account.service import AccountService
from src.rc_gateway.auth.dependencies import get_current_account

router = APIRouter(prefix="/users", tags=["users"])
_service = AccountService()


@router.get("/profile")
async def get_profile(
    account: Annotated[AccountModel, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    unread = await _service.unread_count(str(account.id), db)
    return success_response(user=AccountInfo.from_model(account, unread_notifications=unread))


@router.put("/profile")
async def update_profile(
    body: UpdateProfileRequest,
    account: Annotated[AccountModel, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        account = await _service.update_profile(account, body.name, body.phone, db)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return success_response("Profile updated", user=AccountInfo.from_model(account))


@router.put("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    account: Annotated[AccountModel, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict:
    try:
        await _service.change_password(account, body.current_password, body.new_password, db)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return success_response("Password updated")
