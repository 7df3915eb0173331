from datetime import datetime
from typing import Callable

from ..domain.events import EventSeverity, FlowEvent
from ..domain.result import Err, FlowErrorKind, FlowResult, Ok
from ..ports.events import EventRecorder
from ..ports.repositories import UserRepository, VerificationTokenRepository
from .token_service import utcnow

TOKEN_NOT_FOUND_MESSAGE = "Token does not exist!"
TOKEN_EXPIRED_MESSAGE = "Token has expired!"
# the misspelling is what existing callers match on
ACCOUNT_NOT_FOUND_MESSAGE = "Email dows not exist!"
EMAIL_IN_USE_MESSAGE = "Email already in use!"
SUCCESS_MESSAGE = "Email verified!"


class VerificationService:
    """Consumes a verification token and marks the owning account as verified."""

    def __init__(
        self,
        tokens: VerificationTokenRepository,
        users: UserRepository,
        events: EventRecorder,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.tokens = tokens
        self.users = users
        self.events = events
        self.clock = clock

    async def verify_email(self, token: str) -> FlowResult:
        """Verify ownership of an email address, exactly once.

        Each guard short-circuits with an ``Err``; the account update and the
        token deletion only happen once the token and the account were both
        found. The account's email is overwritten with the token's email so a
        pending email change is applied by the same link.

        Email-change tokens carry the account id, since the account is still
        registered under its old address; if another account claimed the new
        address in the meantime the change is refused.
        """
        existing_token = await self.tokens.get_by_token(token)
        if existing_token is None:
            await self.events.record(
                FlowEvent.NEW_VERIFICATION_TOKEN_NOT_EXIST, {"token": token}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.TOKEN_NOT_FOUND, TOKEN_NOT_FOUND_MESSAGE, {"token": token})

        now = self.clock()
        if existing_token.has_expired(now):
            await self.events.record(
                FlowEvent.NEW_VERIFICATION_TOKEN_EXPIRED, {"token": token}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.TOKEN_EXPIRED, TOKEN_EXPIRED_MESSAGE, {"token": token})

        email = existing_token.email
        if existing_token.account_id:
            account = await self.users.get_by_id(existing_token.account_id)
        else:
            account = await self.users.get_by_email(email)
        if account is None or account.id is None:
            await self.events.record(
                FlowEvent.NEW_VERIFICATION_EMAIL_NOT_EXIST, {"email": email}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.ACCOUNT_NOT_FOUND, ACCOUNT_NOT_FOUND_MESSAGE, {"email": email})

        if account.email != email:
            holder = await self.users.get_by_email(email)
            if holder is not None and holder.id != account.id:
                await self.events.record(
                    FlowEvent.NEW_VERIFICATION_EMAIL_IN_USE, {"email": email}, EventSeverity.ERROR
                )
                return Err(FlowErrorKind.EMAIL_IN_USE, EMAIL_IN_USE_MESSAGE, {"email": email})

        await self.users.update(account.id, email_verified=now, email=email)
        await self.tokens.delete(existing_token.id)

        await self.events.record(
            FlowEvent.NEW_VERIFICATION_SUCCESS, {"email": email}, EventSeverity.INFO
        )
        return Ok(SUCCESS_MESSAGE, {"email": email})
