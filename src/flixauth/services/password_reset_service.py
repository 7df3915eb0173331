"""Password reset: requesting a reset link and consuming it to set a new password."""

from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from pydantic import ValidationError

from ..domain.events import EventSeverity, FlowEvent
from ..domain.result import Err, FlowErrorKind, FlowResult, Ok
from ..logging_config import get_logger
from ..ports.email import EmailSender
from ..ports.events import EventRecorder
from ..ports.repositories import PasswordResetTokenRepository, UserRepository
from ..schemas.auth import NewPasswordRequest, ResetPasswordRequest
from ..utils.password import DEFAULT_SCHEMES, hash_password
from .token_service import TokenIssuer, utcnow

logger = get_logger(__name__)


class PasswordResetService:
    def __init__(
        self,
        users: UserRepository,
        issuer: TokenIssuer,
        mailer: EmailSender,
        events: EventRecorder,
        reset_tokens: Optional[PasswordResetTokenRepository] = None,
        clock: Callable[[], datetime] = utcnow,
        hash_schemes: Sequence[str] = DEFAULT_SCHEMES,
    ):
        self.users = users
        self.issuer = issuer
        self.mailer = mailer
        self.events = events
        self.reset_tokens = reset_tokens if reset_tokens is not None else issuer.reset_tokens
        self.clock = clock
        self.hash_schemes = tuple(hash_schemes)

    async def request_password_reset(self, values: Any) -> FlowResult:
        """Validate ``{email}``, issue a reset token and mail the reset link.

        No token is issued and no mail is sent unless the input is a valid
        email that belongs to an existing account.
        """
        try:
            validated = ResetPasswordRequest.model_validate(values)
        except ValidationError as e:
            logger.debug("reset_password_validation_failed", errors=e.error_count())
            await self.events.record(
                FlowEvent.RESET_PASSWORD_INVALID_INPUT, {"input": values}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.INVALID_INPUT, "Invalid email!", {"input": values})

        email = validated.email
        account = await self.users.get_by_email(email)
        if account is None:
            await self.events.record(
                FlowEvent.RESET_PASSWORD_EMAIL_NOT_EXIST, {"email": email}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.ACCOUNT_NOT_FOUND, "Email does not exist!", {"email": email})

        issued = await self.issuer.issue_password_reset_token(email)
        # address the mail from the issued token so any normalization applied
        # at issuance is honored
        await self.mailer.send_reset_password_email(issued.email, issued.token)

        await self.events.record(
            FlowEvent.RESET_PASSWORD_SUCCESS, {"email": issued.email}, EventSeverity.INFO
        )
        return Ok("Reset email sent!", {"email": issued.email})

    async def set_new_password(self, values: Any, token: Optional[str]) -> FlowResult:
        """Consume a reset token and store a new password hash for its account."""
        if not token:
            await self.events.record(FlowEvent.NEW_PASSWORD_MISSING_TOKEN, {}, EventSeverity.ERROR)
            return Err(FlowErrorKind.MISSING_TOKEN, "Missing token!")

        try:
            validated = NewPasswordRequest.model_validate(values)
        except ValidationError:
            await self.events.record(
                FlowEvent.NEW_PASSWORD_INVALID_INPUT, {"token": token}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.INVALID_INPUT, "Invalid password!", {"token": token})

        existing_token = await self.reset_tokens.get_by_token(token)
        if existing_token is None:
            await self.events.record(
                FlowEvent.NEW_PASSWORD_TOKEN_NOT_EXIST, {"token": token}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.TOKEN_NOT_FOUND, "Token does not exist!", {"token": token})

        if existing_token.has_expired(self.clock()):
            await self.events.record(
                FlowEvent.NEW_PASSWORD_TOKEN_EXPIRED, {"token": token}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.TOKEN_EXPIRED, "Token has expired!", {"token": token})

        email = existing_token.email
        account = await self.users.get_by_email(email)
        if account is None or account.id is None:
            await self.events.record(
                FlowEvent.NEW_PASSWORD_EMAIL_NOT_EXIST, {"email": email}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.ACCOUNT_NOT_FOUND, "Email does not exist!", {"email": email})

        hashed = hash_password(validated.password, self.hash_schemes)
        await self.users.set_password(account.id, hashed)
        await self.reset_tokens.delete(existing_token.id)

        await self.events.record(FlowEvent.NEW_PASSWORD_SUCCESS, {"email": email}, EventSeverity.INFO)
        return Ok("New password set!", {"email": email})
