"""Common FastAPI dependencies for consistent type annotations.

Usage:
    from sellit.deps import CurrentUser, DbSession

    async def my_endpoint(db: DbSession, user: CurrentUser):
        ...
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sellit.auth import get_current_user, get_verified_user
from sellit.database import get_db
from sellit.models import User
from sellit.services.email import Mailer


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
VerifiedUser = Annotated[User, Depends(get_verified_user)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]

__all__ = ["CurrentUser", "DbSession", "MailerDep", "VerifiedUser"]
