"""Shared test helpers."""

from sellit.models import User
from sellit.security import create_access_token
from sellit.services.email import EmailDeliveryError


class FakeMailer:
    """Records verification emails instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    async def send_verification_email(self, to_email: str, token: str) -> None:
        if self.fail:
            raise EmailDeliveryError("SMTP unavailable")
        self.sent.append((to_email, token))

    def last_token_for(self, email: str) -> str:
        tokens = [token for to, token in self.sent if to == email]
        assert tokens, f"no verification email sent to {email}"
        return tokens[-1]


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}
