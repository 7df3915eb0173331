"""Tagged results returned by the credential flows.

Recognized failures are values, not exceptions: a flow returns ``Err`` for
every guard it checks and only lets unexpected collaborator faults raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Union


class FlowErrorKind(StrEnum):
    """Recognized failure conditions across the credential flows."""

    TOKEN_NOT_FOUND = "token_not_found"
    TOKEN_EXPIRED = "token_expired"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INVALID_INPUT = "invalid_input"
    MISSING_TOKEN = "missing_token"
    EMAIL_IN_USE = "email_in_use"
    ALREADY_VERIFIED = "already_verified"
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_UNCHANGED = "email_unchanged"


@dataclass(slots=True, frozen=True)
class Ok:
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True

    def to_response(self) -> Dict[str, str]:
        return {"success": self.message}


@dataclass(slots=True, frozen=True)
class Err:
    kind: FlowErrorKind
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    def to_response(self) -> Dict[str, str]:
        return {"error": self.message}


FlowResult = Union[Ok, Err]


__all__ = ["FlowErrorKind", "Ok", "Err", "FlowResult"]
