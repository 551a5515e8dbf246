"""Authentication helpers for request-scoped user context."""

from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sellit.database import get_db
from sellit.models import User
from sellit.security import decode_access_token
from sellit.utils import raise_forbidden, raise_unauthorized

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_subject(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> UUID:
    """Validate the bearer token and return its subject as a user id."""
    if credentials is None:
        raise_unauthorized("Missing or invalid Authorization header")

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise_unauthorized("Invalid or expired token")

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise_unauthorized("Invalid token payload")

    try:
        return UUID(subject)
    except ValueError as exc:
        raise_unauthorized("Invalid token payload", cause=exc)


async def get_current_user(
    user_id: UUID = Depends(get_token_subject),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the authenticated user; 401 when the subject no longer exists."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise_unauthorized("Unauthorized")
    return user


async def get_verified_user(user: User = Depends(get_current_user)) -> User:
    """Gate for actions that need a confirmed email address."""
    if not user.is_email_verified:
        raise_forbidden("Email verification required")
    return user
