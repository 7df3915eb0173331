"""Flows that send a fresh verification link for an existing account."""

from typing import Any, Mapping, Sequence

from pydantic import EmailStr, TypeAdapter, ValidationError

from ..domain.events import EventSeverity, FlowEvent
from ..domain.result import Err, FlowErrorKind, FlowResult, Ok
from ..logging_config import get_logger
from ..ports.email import EmailSender
from ..ports.events import EventRecorder
from ..ports.repositories import UserRepository
from ..schemas.auth import ChangeEmailRequest, ResendVerificationRequest
from ..utils.password import DEFAULT_SCHEMES, verify_password
from .token_service import TokenIssuer

logger = get_logger(__name__)

CONFIRMATION_SENT_MESSAGE = "Confirmation email sent!"

_email_adapter = TypeAdapter(EmailStr)


def _without_password(values: Any) -> Any:
    if isinstance(values, Mapping):
        return {k: ("***" if k == "password" else v) for k, v in values.items()}
    return values


class AccountEmailService:
    def __init__(
        self,
        users: UserRepository,
        issuer: TokenIssuer,
        mailer: EmailSender,
        events: EventRecorder,
        hash_schemes: Sequence[str] = DEFAULT_SCHEMES,
    ):
        self.users = users
        self.issuer = issuer
        self.mailer = mailer
        self.events = events
        self.hash_schemes = tuple(hash_schemes)

    async def resend_verification(self, values: Any) -> FlowResult:
        """Send a new verification link to an account that has not confirmed its email.

        Only password accounts qualify; an account without a stored password
        is treated as unknown.
        """
        try:
            email = ResendVerificationRequest.model_validate(values).email
        except ValidationError:
            await self.events.record(
                FlowEvent.RESEND_VERIFICATION_INVALID_INPUT, {"input": values}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.INVALID_INPUT, "Invalid email!", {"input": values})

        account = await self.users.get_by_email(email)
        if account is None or not account.hashed_password:
            await self.events.record(
                FlowEvent.RESEND_VERIFICATION_EMAIL_NOT_EXIST, {"email": email}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.ACCOUNT_NOT_FOUND, "Email does not exist!", {"email": email})

        if account.is_verified:
            await self.events.record(
                FlowEvent.RESEND_VERIFICATION_ALREADY_VERIFIED, {"email": email}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.ALREADY_VERIFIED, "Email already verified!", {"email": email})

        issued = await self.issuer.issue_verification_token(email)
        await self.mailer.send_verification_email(issued.email, issued.token)

        await self.events.record(
            FlowEvent.RESEND_VERIFICATION_SUCCESS, {"email": issued.email}, EventSeverity.INFO
        )
        return Ok(CONFIRMATION_SENT_MESSAGE, {"email": issued.email})

    async def request_email_change(self, account_id: str, new_email: Any) -> FlowResult:
        """Mail a verification link for ``new_email`` bound to ``account_id``.

        The account keeps its current address until the link is consumed by
        ``VerificationService.verify_email``.
        """
        try:
            new_email = _email_adapter.validate_python(new_email)
        except ValidationError:
            context = {"account_id": account_id, "input": new_email}
            await self.events.record(FlowEvent.EMAIL_CHANGE_INVALID_INPUT, context, EventSeverity.ERROR)
            return Err(FlowErrorKind.INVALID_INPUT, "Invalid email!", context)

        account = await self.users.get_by_id(account_id)
        if account is None or account.id is None:
            context = {"account_id": account_id}
            await self.events.record(
                FlowEvent.EMAIL_CHANGE_ACCOUNT_NOT_FOUND, context, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.ACCOUNT_NOT_FOUND, "Unauthorized!", context)

        context = {"account_id": account.id, "email": new_email}
        if new_email == account.email:
            await self.events.record(FlowEvent.EMAIL_CHANGE_UNCHANGED, context, EventSeverity.ERROR)
            return Err(FlowErrorKind.EMAIL_UNCHANGED, "Email unchanged!", context)

        holder = await self.users.get_by_email(new_email)
        if holder is not None and holder.id != account.id:
            await self.events.record(FlowEvent.EMAIL_CHANGE_EMAIL_IN_USE, context, EventSeverity.ERROR)
            return Err(FlowErrorKind.EMAIL_IN_USE, "Email already in use!", context)

        issued = await self.issuer.issue_verification_token(new_email, account_id=account.id)
        await self.mailer.send_verification_email(issued.email, issued.token)
        logger.debug("email_change_requested", account_id=account.id, new_email=issued.email)

        await self.events.record(FlowEvent.EMAIL_CHANGE_SUCCESS, context, EventSeverity.INFO)
        return Ok(CONFIRMATION_SENT_MESSAGE, {"email": issued.email})

    async def change_email(self, values: Any) -> FlowResult:
        """Authenticate with ``{email, password}`` then request a move to ``new_email``."""
        try:
            validated = ChangeEmailRequest.model_validate(values)
        except ValidationError:
            context = {"input": _without_password(values)}
            await self.events.record(FlowEvent.EMAIL_CHANGE_INVALID_INPUT, context, EventSeverity.ERROR)
            return Err(FlowErrorKind.INVALID_INPUT, "Invalid fields!", context)

        account = await self.users.get_by_email(validated.email)
        if (
            account is None
            or account.id is None
            or not account.hashed_password
            or not verify_password(validated.password, account.hashed_password, self.hash_schemes)
        ):
            context = {"email": validated.email}
            await self.events.record(
                FlowEvent.EMAIL_CHANGE_INVALID_CREDENTIALS, context, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.INVALID_CREDENTIALS, "Invalid credentials!", context)

        return await self.request_email_change(account.id, validated.new_email)
