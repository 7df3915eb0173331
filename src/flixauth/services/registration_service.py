from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from ..domain.account import Account
from ..domain.events import EventSeverity, FlowEvent
from ..domain.result import Err, FlowErrorKind, FlowResult, Ok
from ..logging_config import get_logger
from ..ports.email import EmailSender
from ..ports.events import EventRecorder
from ..ports.repositories import UserRepository
from ..schemas.auth import RegisterRequest
from ..utils.password import DEFAULT_SCHEMES, hash_password
from .token_service import TokenIssuer

logger = get_logger(__name__)

_SECRET_FIELDS = ("password", "confirm")


def _redacted(values: Any) -> Any:
    if isinstance(values, Mapping):
        return {k: ("***" if k in _SECRET_FIELDS else v) for k, v in values.items()}
    return values


class RegistrationService:
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

    async def register(self, values: Any) -> FlowResult:
        try:
            validated = RegisterRequest.model_validate(values)
        except ValidationError:
            context = {"input": _redacted(values)}
            await self.events.record(FlowEvent.REGISTER_INVALID_INPUT, context, EventSeverity.ERROR)
            return Err(FlowErrorKind.INVALID_INPUT, "Invalid fields!", context)

        email = validated.email
        if await self.users.get_by_email(email) is not None:
            await self.events.record(
                FlowEvent.REGISTER_EMAIL_IN_USE, {"email": email}, EventSeverity.ERROR
            )
            return Err(FlowErrorKind.EMAIL_IN_USE, "Email already in use!", {"email": email})

        created = await self.users.create(
            Account(
                id=None,
                email=email,
                name=validated.name,
                hashed_password=hash_password(validated.password, self.hash_schemes),
            )
        )
        logger.debug("account_registered", user_id=created.id, email=email)

        issued = await self.issuer.issue_verification_token(email)
        await self.mailer.send_verification_email(issued.email, issued.token)

        await self.events.record(FlowEvent.REGISTER_SUCCESS, {"email": email}, EventSeverity.INFO)
        return Ok("Confirmation email sent!", {"email": email})
