"""Auth API router: register, login, refresh.

request_id is read from request.state (injected by RequestLogMiddleware)
and echoed only on errors; success bodies follow the resource-keyed shape.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_common.database import get_db_session
from src.rc_common.response import success_response
from src.rc_gateway.account.schemas import (
    AccountInfo,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
)
from src.rc_gateway.account.service import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = AccountService()


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Resident registration")
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    async with db.begin():
        account = await _service.register(
            body.email, body.password, body.name, body.house_number, body.phone, db
        )
        user = AccountInfo.from_model(account)
    return success_response("User registered successfully", user=user)


@router.post("/login", summary="Login")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    account, access_token, refresh_token = await _service.login(body.email, body.password, db)

    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=AccountInfo.from_model(account),
    )
    return success_response("Login successful", **data.to_json())


@router.post("/refresh", summary="Refresh access token")
async def refresh_token(body: RefreshRequest) -> dict:
    new_access_token = await _service.refresh(body.refresh_token)
    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    return success_response("Token refreshed", **data.to_json())
