"""Ports package - defines interfaces for external dependencies.

Exports repository protocols and service interfaces for dependency inversion.
"""

from .email import EmailSender
from .events import EventRecorder
from .repositories import (
    PasswordResetTokenRepository,
    UserRepository,
    VerificationTokenRepository,
)

__all__ = [
    # Repository protocols
    "UserRepository",
    "VerificationTokenRepository",
    "PasswordResetTokenRepository",
    # Service interfaces
    "EmailSender",
    "EventRecorder",
]
