"""User & authentication schemas."""

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from webculus.config import settings
from webculus.schemas.common import CamelModel


def _non_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def _long_enough(value: str) -> str:
    if len(value) < settings.MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"must be at least {settings.MIN_PASSWORD_LENGTH} characters"
        )
    return value


def _lower(value: str) -> str:
    return value.lower()


Name = Annotated[str, AfterValidator(_non_blank)]
NewPassword = Annotated[str, AfterValidator(_long_enough)]
Email = Annotated[EmailStr, AfterValidator(_lower)]


class SignUp(BaseModel):
    """POST /api/auth/signup"""

    email: Email
    password: NewPassword
    name: Name


class SignIn(BaseModel):
    """POST /api/auth/signin"""

    email: Email
    password: str = Field(min_length=1)


class GoogleAuth(CamelModel):
    """POST /api/auth/google; identity already verified by the frontend."""

    email: Email
    name: Name
    google_id: str | None = None


class ProfileUpdate(BaseModel):
    """PUT /api/user/profile"""

    name: Name | None = None
    email: Email | None = None


class PasswordChange(CamelModel):
    """POST /api/user/change-password"""

    current_password: str = Field(min_length=1)
    new_password: NewPassword


class AccountDelete(BaseModel):
    """DELETE /api/user/account"""

    password: str = Field(min_length=1)


class UserRead(BaseModel):
    """User returned from API; never exposes password."""

    id: uuid.UUID
    name: str
    email: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Combined auth response: token + user profile."""

    access_token: str
    token_type: str = "bearer"
    user: UserRead
