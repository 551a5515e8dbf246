"""Outbound email delivery over SMTP."""

from typing import Protocol
from urllib.parse import quote

import aiosmtplib
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors
from pydantic import ValidationError

from sellit.config import Settings
from sellit.logger import async_log_timing, get_logger

logger = get_logger(__name__)

VERIFICATION_SUBJECT = "Verify your SellIt email"


class EmailDeliveryError(Exception):
    """The verification email could not be handed to the mail transport."""


class Mailer(Protocol):
    async def send_verification_email(self, to_email: str, token: str) -> None: ...


def build_verification_url(frontend_origin: str, token: str) -> str:
    return f"{frontend_origin.rstrip('/')}/verify-email?token={quote(token, safe='')}"


def render_verification_email(verify_url: str) -> str:
    return f"""
      <div style="font-family:Arial,Helvetica,sans-serif;line-height:1.5">
        <h2>Welcome to SellIt</h2>
        <p>Verify your email by clicking the button below:</p>
        <p>
          <a href="{verify_url}" style="display:inline-block;padding:12px 18px;background:#ff7a00;color:#111;text-decoration:none;border-radius:8px;font-weight:700">
            Verify email
          </a>
        </p>
        <p>Or paste this link into your browser: {verify_url}</p>
        <p style="color:#666;font-size:12px">If you didn't create an account, you can ignore this email.</p>
      </div>
    """


class SmtpMailer:
    """Sends verification emails through fastapi-mail."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _connection_config(self) -> ConnectionConfig:
        s = self._settings
        if not s.smtp_user or not s.smtp_pass:
            raise EmailDeliveryError("SMTP_USER and SMTP_PASS are required for email sending")
        try:
            return ConnectionConfig(
                MAIL_USERNAME=s.smtp_user,
                MAIL_PASSWORD=s.smtp_pass,
                MAIL_FROM=s.mail_from,
                MAIL_PORT=s.smtp_port,
                MAIL_SERVER=s.smtp_host,
                MAIL_STARTTLS=True,
                MAIL_SSL_TLS=False,
                USE_CREDENTIALS=True,
                VALIDATE_CERTS=True,
            )
        except ValidationError as exc:
            raise EmailDeliveryError("Invalid SMTP configuration") from exc

    async def send_verification_email(self, to_email: str, token: str) -> None:
        config = self._connection_config()
        verify_url = build_verification_url(self._settings.frontend_origin, token)
        message = MessageSchema(
            subject=VERIFICATION_SUBJECT,
            recipients=[to_email],
            body=render_verification_email(verify_url),
            subtype=MessageType.html,
        )

        async with async_log_timing("send_verification_email", logger=logger, smtp_host=config.MAIL_SERVER):
            try:
                await FastMail(config).send_message(message)
            except (ConnectionErrors, aiosmtplib.SMTPException, OSError) as exc:
                raise EmailDeliveryError("Failed to send verification email") from exc
