import asyncio
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from ...config import Settings
from ...logging_config import get_logger
from ...metrics import EMAILS_SENT

logger = get_logger(__name__)


def verification_link(app_url: str, token: str) -> str:
    return f"{app_url}/auth/new-verification?token={token}"


def reset_password_link(app_url: str, token: str) -> str:
    return f"{app_url}/auth/new-password?token={token}"


class SendGridEmailSender:
    def __init__(
        self,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        app_url: Optional[str] = None,
    ):
        if not (api_key and from_email and app_url):
            s = Settings()
            api_key = api_key or s.sendgrid_api_key
            from_email = from_email or s.email_from
            app_url = app_url or s.app_url
        self.api_key = api_key
        self.from_email = from_email
        self.app_url = app_url

    def _build(self, to_email: str, subject: str, text: str, html: str) -> Mail:
        return Mail(
            from_email=self.from_email,
            to_emails=to_email,
            subject=subject,
            plain_text_content=text,
            html_content=html,
        )

    async def _send(self, message: Mail, kind: str, to_email: str) -> None:
        # SendGrid client is synchronous; run it in the default executor
        client = SendGridAPIClient(self.api_key)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, client.send, message)
        EMAILS_SENT.labels(kind=kind).inc()
        logger.info("email_sent", kind=kind, to=to_email)

    async def send_verification_email(self, to_email: str, token: str) -> None:
        """Send the account confirmation email containing a token link."""
        link = verification_link(self.app_url, token)
        message = self._build(
            to_email,
            "Confirm your email",
            f"Click {link} to confirm email.",
            f'<p>Click <a href="{link}">here</a> to confirm email.</p>',
        )
        await self._send(message, "verification", to_email)

    async def send_reset_password_email(self, to_email: str, token: str) -> None:
        """Send the password reset email containing a token link."""
        link = reset_password_link(self.app_url, token)
        message = self._build(
            to_email,
            "Reset your password",
            f"Click {link} to reset your password.",
            f'<p>Click <a href="{link}">here</a> to reset your password.</p>',
        )
        await self._send(message, "password_reset", to_email)
