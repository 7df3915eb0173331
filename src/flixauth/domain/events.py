"""Event log domain models and value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Dict, Optional, Union


class EventSeverity(StrEnum):
    INFO = "info"
    ERROR = "error"


class FlowEvent(StrEnum):
    """Canonical event names, one per branch of each credential flow."""

    NEW_VERIFICATION_TOKEN_NOT_EXIST = "new_verification_token_not_exist"
    NEW_VERIFICATION_TOKEN_EXPIRED = "new_verification_token_expired"
    NEW_VERIFICATION_EMAIL_NOT_EXIST = "new_verification_email_not_exist"
    NEW_VERIFICATION_EMAIL_IN_USE = "new_verification_email_in_use"
    NEW_VERIFICATION_SUCCESS = "new_verification_success"

    RESET_PASSWORD_INVALID_INPUT = "reset_password_invalid_input"
    RESET_PASSWORD_EMAIL_NOT_EXIST = "reset_password_email_not_exist"
    RESET_PASSWORD_SUCCESS = "reset_password_success"

    NEW_PASSWORD_MISSING_TOKEN = "new_password_missing_token"
    NEW_PASSWORD_INVALID_INPUT = "new_password_invalid_input"
    NEW_PASSWORD_TOKEN_NOT_EXIST = "new_password_token_not_exist"
    NEW_PASSWORD_TOKEN_EXPIRED = "new_password_token_expired"
    NEW_PASSWORD_EMAIL_NOT_EXIST = "new_password_email_not_exist"
    NEW_PASSWORD_SUCCESS = "new_password_success"

    REGISTER_INVALID_INPUT = "register_invalid_input"
    REGISTER_EMAIL_IN_USE = "register_email_in_use"
    REGISTER_SUCCESS = "register_success"

    RESEND_VERIFICATION_INVALID_INPUT = "resend_verification_invalid_input"
    RESEND_VERIFICATION_EMAIL_NOT_EXIST = "resend_verification_email_not_exist"
    RESEND_VERIFICATION_ALREADY_VERIFIED = "resend_verification_already_verified"
    RESEND_VERIFICATION_SUCCESS = "resend_verification_success"

    EMAIL_CHANGE_INVALID_INPUT = "email_change_invalid_input"
    EMAIL_CHANGE_INVALID_CREDENTIALS = "email_change_invalid_credentials"
    EMAIL_CHANGE_ACCOUNT_NOT_FOUND = "email_change_account_not_found"
    EMAIL_CHANGE_UNCHANGED = "email_change_unchanged"
    EMAIL_CHANGE_EMAIL_IN_USE = "email_change_email_in_use"
    EMAIL_CHANGE_SUCCESS = "email_change_success"


EventNameLike = Union[FlowEvent, str]
EventSeverityLike = Union[EventSeverity, str]


@dataclass(slots=True)
class EventRecord:
    """Representation of a flow event prior to persistence."""

    event_name: EventNameLike
    context: Dict[str, Any] = field(default_factory=dict)
    severity: EventSeverityLike = EventSeverity.INFO
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    def to_record(self) -> Dict[str, Any]:
        """Materialize the event into a JSON-serializable dictionary."""

        return {
            "event_name": str(self.event_name),
            "severity": str(self.severity),
            "context": _jsonable(self.context),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


__all__ = [
    "EventSeverity",
    "FlowEvent",
    "EventRecord",
    "EventNameLike",
    "EventSeverityLike",
]
