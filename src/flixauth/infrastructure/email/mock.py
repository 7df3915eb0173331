import asyncio

from ...logging_config import get_logger

logger = get_logger(__name__)


class MockEmailSender:
    """Keeps outgoing mail in memory; used when no mail provider is configured."""

    def __init__(self):
        self.sent = []

    async def send_verification_email(self, to_email: str, token: str) -> None:
        # simulate async send
        await asyncio.sleep(0)
        self.sent.append({"type": "verification", "to": to_email, "token": token})
        logger.info("mock_email_sent", kind="verification", to=to_email)

    async def send_reset_password_email(self, to_email: str, token: str) -> None:
        await asyncio.sleep(0)
        self.sent.append({"type": "password_reset", "to": to_email, "token": token})
        logger.info("mock_email_sent", kind="password_reset", to=to_email)
