"""Pydantic request/response schemas for rc_gateway (auth + profile)."""

from pydantic import EmailStr, Field, field_validator

from src.rc_common.response import CamelModel
from src.rc_gateway.account.db_models import AccountModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=2, max_length=120)
    house_number: str = Field(..., min_length=1, max_length=32)
    phone: str | None = Field(None, max_length=32)

    @field_validator("name", "house_number")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CreateAdminRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=2, max_length=120)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


class UpdateProfileRequest(CamelModel):
    name: str | None = Field(None, min_length=2, max_length=120)
    phone: str | None = Field(None, max_length=32)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class ResidentInfo(CamelModel):
    id: str
    house_number: str
    phone: str | None
    is_active: bool


class AccountInfo(CamelModel):
    """Account summary embedded in auth and profile responses."""

    id: str
    email: str
    name: str
    role: str
    resident: ResidentInfo | None = None
    unread_notifications: int | None = None

    @classmethod
    def from_model(
        cls, account: AccountModel, unread_notifications: int | None = None
    ) -> "AccountInfo":
        resident = account.resident
        return cls(
            id=str(account.id),
            email=account.email,
            name=account.name,
            role=account.role,
            resident=ResidentInfo(
                id=str(resident.id),
                house_number=resident.house_number,
                phone=resident.phone,
                is_active=resident.is_active,
            ) if resident is not None else None,
            unread_notifications=unread_notifications,
        )


class LoginResponse(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: AccountInfo


class RefreshResponse(CamelModel):
    access_token: str
    expires_in: int
