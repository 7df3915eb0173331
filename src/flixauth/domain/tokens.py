"""Single-use email tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by sqlite) as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@dataclass(slots=True)
class EmailToken:
    id: Optional[str]
    email: str
    token: str
    expires: datetime

    def has_expired(self, now: datetime) -> bool:
        # a token expiring exactly at `now` is still accepted
        return as_utc(self.expires) < as_utc(now)


@dataclass(slots=True)
class VerificationToken(EmailToken):
    """Proves ownership of ``email``; consumed by the verification flow.

    ``account_id`` is set when the token confirms an email change: the
    account still holds its old address, so it is resolved by id instead.
    """

    account_id: Optional[str] = None


@dataclass(slots=True)
class PasswordResetToken(EmailToken):
    """Authorizes a password change for the account owning ``email``."""


__all__ = ["EmailToken", "VerificationToken", "PasswordResetToken", "as_utc"]
