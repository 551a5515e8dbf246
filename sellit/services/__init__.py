"""Services package."""

from sellit.services.auth import (
    AuthServiceError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from sellit.services.categories import (
    DEFAULT_CATEGORY_NAMES,
    CategoryNotFoundError,
    CategorySelectorError,
    CategoryServiceError,
)
from sellit.services.email import EmailDeliveryError, Mailer, SmtpMailer
from sellit.services.products import (
    ProductForbiddenError,
    ProductNotFoundError,
    ProductServiceError,
)
from sellit.services.verification import (
    AlreadyVerifiedError,
    ExpiredTokenError,
    InvalidTokenError,
    VerificationError,
)

__all__ = [
    "DEFAULT_CATEGORY_NAMES",
    "AlreadyVerifiedError",
    "AuthServiceError",
    "CategoryNotFoundError",
    "CategorySelectorError",
    "CategoryServiceError",
    "EmailAlreadyRegisteredError",
    "EmailDeliveryError",
    "ExpiredTokenError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "Mailer",
    "ProductForbiddenError",
    "ProductNotFoundError",
    "ProductServiceError",
    "SmtpMailer",
    "UserNotFoundError",
    "VerificationError",
]
