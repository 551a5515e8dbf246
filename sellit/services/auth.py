"""Registration, login and session resolution."""

import asyncio
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sellit.logger import get_logger, log_exception
from sellit.models import User
from sellit.schemas.auth import RegisterRequest
from sellit.security import create_access_token, hash_password, verify_password
from sellit.services.email import EmailDeliveryError, Mailer
from sellit.services.verification import apply_token, issue_verification_token, reissue_verification_token

logger = get_logger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 32


class AuthServiceError(Exception):
    """Base exception for auth service errors."""


class EmailAlreadyRegisteredError(AuthServiceError):
    """A user with this normalized email already exists."""


class InvalidCredentialsError(AuthServiceError):
    """Unknown email or wrong password; deliberately indistinguishable."""


class UserNotFoundError(AuthServiceError):
    """The session subject no longer resolves to a user."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def default_username(email: str) -> str:
    """Derive a username from the email local part."""
    local = email.split("@", 1)[0]
    if len(local) < USERNAME_MIN_LENGTH:
        local = f"user_{local}"
    return local[:USERNAME_MAX_LENGTH]


def issue_session_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id)})


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFoundError(f"User {user_id} not found")
    return user


async def register(db: AsyncSession, mailer: Mailer, data: RegisterRequest) -> tuple[User, str]:
    """Create an unverified user and try to email them a verification link.

    Email delivery is best effort here: a failure is logged and the account
    still exists, unverified.
    """
    email = normalize_email(data.email)
    if await get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegisteredError("Email is already registered")

    password_hash = await asyncio.to_thread(hash_password, data.password)
    issued = issue_verification_token()

    user = User(
        email=email,
        username=data.username or default_username(email),
        profile_image_url=data.profile_image_url,
        password_hash=password_hash,
        is_email_verified=False,
    )
    apply_token(user, issued)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        # Another request created the same email between the check and the insert
        await db.rollback()
        raise EmailAlreadyRegisteredError("Email is already registered") from exc
    await db.refresh(user)

    logger.info("User registered", user_id=str(user.id))

    try:
        await mailer.send_verification_email(user.email, issued.token)
    except EmailDeliveryError as exc:
        log_exception(logger, exc, "Failed to send verification email", level="warning", user_id=str(user.id))

    return user, issue_session_token(user)


async def login(db: AsyncSession, email: str, password: str) -> tuple[User, str]:
    user = await get_user_by_email(db, email)
    if user is None:
        raise InvalidCredentialsError("Invalid email or password")

    if not await asyncio.to_thread(verify_password, password, user.password_hash):
        raise InvalidCredentialsError("Invalid email or password")

    logger.info("Successful login", user_id=str(user.id))
    return user, issue_session_token(user)


async def resend_verification(db: AsyncSession, mailer: Mailer, user_id: UUID) -> User:
    """Issue a new verification token and email it.

    Raises AlreadyVerifiedError for verified users and lets EmailDeliveryError
    propagate, since sending is the whole point of this call.
    """
    user = await get_user(db, user_id)
    issued = await reissue_verification_token(db, user)
    await mailer.send_verification_email(user.email, issued.token)
    return user
