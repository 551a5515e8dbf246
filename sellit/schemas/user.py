"""Pydantic schemas for users."""

from uuid import UUID

from sellit.models import User
from sellit.schemas.base import ApiModel


class PublicUser(ApiModel):
    """The subset of a user record that is safe to expose."""

    id: UUID
    email: str
    username: str | None = None
    profile_image_url: str | None = None
    is_email_verified: bool


def to_public_user(user: User) -> PublicUser:
    """Project a persisted user onto its public view.

    Every outward serialization of a user goes through here so the password
    hash and verification token fields can never leak.
    """
    return PublicUser(
        id=user.id,
        email=user.email,
        username=user.username,
        profile_image_url=user.profile_image_url,
        is_email_verified=bool(user.is_email_verified),
    )


class UserEnvelope(ApiModel):
    user: PublicUser
