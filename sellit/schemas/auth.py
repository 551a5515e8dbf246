"""Pydantic schemas for authentication."""

from typing import Annotated, Any

from pydantic import EmailStr, Field, StringConstraints, field_validator

from sellit.schemas.base import ApiModel
from sellit.schemas.user import PublicUser


def _strip(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


class RegisterRequest(ApiModel):
    """Schema for user registration."""

    email: EmailStr
    password: Annotated[str, Field(min_length=8, max_length=128)]
    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=32)] | None = None
    profile_image_url: Annotated[str, StringConstraints(strip_whitespace=True, max_length=2048)] | None = None

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("profile_image_url")
    @classmethod
    def empty_url_to_none(cls, v: str | None) -> str | None:
        return v or None


class LoginRequest(ApiModel):
    """Schema for user login."""

    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: Any) -> Any:
        return _strip(v)


class AuthResponse(ApiModel):
    """Bearer token plus the public view of the authenticated user."""

    token: str
    user: PublicUser


class VerifyEmailResponse(ApiModel):
    message: str
    user: PublicUser
