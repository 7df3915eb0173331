import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..domain.tokens import PasswordResetToken, VerificationToken
from ..logging_config import get_logger
from ..ports.repositories import PasswordResetTokenRepository, VerificationTokenRepository

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Issues single-use verification and password reset tokens.

    Issuing replaces any live token of the same kind for that email, so an
    address never holds more than one valid link at a time.
    """

    def __init__(
        self,
        verification_tokens: VerificationTokenRepository,
        reset_tokens: PasswordResetTokenRepository,
        ttl: int = 3600,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.verification_tokens = verification_tokens
        self.reset_tokens = reset_tokens
        self.ttl = ttl
        self.clock = clock

    def generate_token(self) -> str:
        return secrets.token_urlsafe(32)

    def _expires(self) -> datetime:
        return self.clock() + timedelta(seconds=self.ttl)

    async def issue_verification_token(
        self, email: str, account_id: Optional[str] = None
    ) -> VerificationToken:
        """Issue a token confirming ``email``.

        Pass ``account_id`` when ``email`` is a new address for an existing
        account; verification then moves that account to ``email``.
        """
        existing = await self.verification_tokens.get_by_email(email)
        if existing is not None and existing.id is not None:
            await self.verification_tokens.delete(existing.id)
        fields = {"account_id": account_id} if account_id is not None else {}
        issued = await self.verification_tokens.create(
            email, self.generate_token(), self._expires(), **fields
        )
        logger.debug(
            "verification_token_issued",
            email=email,
            account_id=account_id,
            replaced=existing is not None,
        )
        return issued

    async def issue_password_reset_token(self, email: str) -> PasswordResetToken:
        existing = await self.reset_tokens.get_by_email(email)
        if existing is not None and existing.id is not None:
            await self.reset_tokens.delete(existing.id)
        issued = await self.reset_tokens.create(email, self.generate_token(), self._expires())
        logger.debug("password_reset_token_issued", email=email, replaced=existing is not None)
        return issued
