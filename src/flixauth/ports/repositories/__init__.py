"""Repository protocols for data access layer abstraction."""

from .token import PasswordResetTokenRepository, VerificationTokenRepository
from .user import UserRepository

__all__ = [
    "UserRepository",
    "VerificationTokenRepository",
    "PasswordResetTokenRepository",
]
