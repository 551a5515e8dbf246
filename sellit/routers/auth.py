"""Authentication API router."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from sellit.deps import CurrentUser, DbSession, MailerDep
from sellit.logger import get_logger
from sellit.schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserEnvelope,
    VerifyEmailResponse,
    to_public_user,
)
from sellit.services import auth as auth_service
from sellit.services import verification
from sellit.services.auth import EmailAlreadyRegisteredError, InvalidCredentialsError, UserNotFoundError
from sellit.services.email import EmailDeliveryError
from sellit.services.verification import AlreadyVerifiedError, RedemptionStatus, VerificationError
from sellit.utils import raise_bad_request, raise_conflict, raise_internal_error, raise_unauthorized

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = get_logger(__name__)

INVALID_VERIFICATION_TOKEN = "Invalid or expired verification token"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: DbSession, mailer: MailerDep) -> AuthResponse:
    """Register a new user with email and password."""
    try:
        user, token = await auth_service.register(db, mailer, data)
    except EmailAlreadyRegisteredError as e:
        raise_conflict(str(e), cause=e)

    return AuthResponse(token=token, user=to_public_user(user))


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: DbSession) -> AuthResponse:
    """Login with email and password."""
    try:
        user, token = await auth_service.login(db, data.email, data.password)
    except InvalidCredentialsError as e:
        logger.warning("Failed login attempt")
        raise_unauthorized(str(e), cause=e)

    return AuthResponse(token=token, user=to_public_user(user))


@router.get("/me", response_model=UserEnvelope)
async def get_me(user: CurrentUser) -> UserEnvelope:
    """Get current authenticated user."""
    return UserEnvelope(user=to_public_user(user))


@router.get("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(
    db: DbSession,
    token: Annotated[str, Query(min_length=10, description="Raw token from the verification link")],
) -> VerifyEmailResponse:
    """Redeem an email verification token.

    Re-opening a link that already verified the account answers success.
    """
    try:
        user, outcome = await verification.redeem_verification_token(db, token)
    except VerificationError as e:
        logger.info("Verification token rejected", reason=type(e).__name__)
        raise_bad_request(INVALID_VERIFICATION_TOKEN, cause=e)

    message = "Email already verified" if outcome is RedemptionStatus.ALREADY_VERIFIED else "Email verified"
    return VerifyEmailResponse(message=message, user=to_public_user(user))


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(user: CurrentUser, db: DbSession, mailer: MailerDep) -> MessageResponse:
    """Send a fresh verification link, invalidating the previous one."""
    try:
        await auth_service.resend_verification(db, mailer, user.id)
    except AlreadyVerifiedError:
        return MessageResponse(message="Email already verified")
    except UserNotFoundError as e:
        raise_unauthorized(cause=e)
    except EmailDeliveryError as e:
        logger.error("Failed to send verification email", user_id=str(user.id), error=str(e))
        raise_internal_error("Failed to send verification email", cause=e)

    return MessageResponse(message="Verification email sent")
