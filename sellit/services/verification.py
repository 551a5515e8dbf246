"""Email verification token lifecycle.

A user moves from unverified to verified exactly once. Raw tokens are only
ever returned to the caller (to be emailed); the database keeps a SHA256 hash
and an expiry. After a successful redemption the hash is retained, so the same
link keeps answering "already verified" instead of "invalid token".
"""

import enum
import hashlib
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sellit.config import settings
from sellit.logger import get_logger
from sellit.models import User

logger = get_logger(__name__)

TOKEN_BYTES = 32


class VerificationError(Exception):
    """Base exception for verification token errors."""


class InvalidTokenError(VerificationError):
    """No user holds a token with this hash."""


class ExpiredTokenError(VerificationError):
    """The token matched an unverified user but its expiry has passed."""


class AlreadyVerifiedError(VerificationError):
    """A new token was requested for a user who is already verified."""


class RedemptionStatus(str, enum.Enum):
    VERIFIED = "verified"
    ALREADY_VERIFIED = "already_verified"


@dataclass(frozen=True)
class IssuedToken:
    token: str
    token_hash: str
    expires_at: datetime


def hash_verification_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def issue_verification_token(ttl_minutes: int | None = None, now: datetime | None = None) -> IssuedToken:
    """Generate a random token, its hash and its expiry."""
    if ttl_minutes is None or ttl_minutes <= 0:
        ttl_minutes = settings.verify_token_ttl_minutes
    token = secrets.token_hex(TOKEN_BYTES)
    issued_at = now or datetime.now(UTC)
    return IssuedToken(
        token=token,
        token_hash=hash_verification_token(token),
        expires_at=issued_at + timedelta(minutes=ttl_minutes),
    )


def apply_token(user: User, issued: IssuedToken) -> None:
    """Store a freshly issued token on the user, replacing any previous one."""
    user.email_verification_token_hash = issued.token_hash
    user.email_verification_token_expires_at = issued.expires_at


def evaluate_redemption(user: User, now: datetime) -> RedemptionStatus:
    """Decide what redeeming a matching token means for this user.

    Already-verified users succeed regardless of expiry.
    """
    if user.is_email_verified:
        return RedemptionStatus.ALREADY_VERIFIED
    expires_at = user.email_verification_token_expires_at
    if expires_at is None:
        raise ExpiredTokenError("Verification token has no expiry")
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    if expires_at <= now:
        raise ExpiredTokenError("Verification token expired")
    return RedemptionStatus.VERIFIED


async def redeem_verification_token(
    db: AsyncSession, raw_token: str, now: datetime | None = None
) -> tuple[User, RedemptionStatus]:
    """Mark the token's owner verified, or confirm they already are."""
    token_hash = hash_verification_token(raw_token)
    result = await db.execute(select(User).where(User.email_verification_token_hash == token_hash))
    user = result.scalars().first()
    if user is None:
        raise InvalidTokenError("Verification token not recognised")

    outcome = evaluate_redemption(user, now or datetime.now(UTC))
    if outcome is RedemptionStatus.VERIFIED:
        user.is_email_verified = True
        await db.commit()
        await db.refresh(user)
        logger.info("Email verified", user_id=str(user.id))
    else:
        logger.debug("Verification link reused by verified user", user_id=str(user.id))

    return user, outcome


async def reissue_verification_token(db: AsyncSession, user: User) -> IssuedToken:
    """Replace the user's token; the previous raw token stops matching."""
    if user.is_email_verified:
        raise AlreadyVerifiedError("Email already verified")

    issued = issue_verification_token()
    apply_token(user, issued)
    await db.commit()
    await db.refresh(user)
    logger.info("Verification token reissued", user_id=str(user.id))
    return issued

