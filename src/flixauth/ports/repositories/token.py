from datetime import datetime
from typing import Optional, Protocol

from ...domain.tokens import PasswordResetToken, VerificationToken


class VerificationTokenRepository(Protocol):
    """Protocol for verification token persistence."""

    async def get_by_token(self, token: str) -> Optional[VerificationToken]: ...

    async def get_by_email(self, email: str) -> Optional[VerificationToken]: ...

    async def create(
        self, email: str, token: str, expires: datetime, account_id: Optional[str] = None
    ) -> VerificationToken: ...

    async def delete(self, id: str) -> None: ...


class PasswordResetTokenRepository(Protocol):
    """Protocol for password reset token persistence."""

    async def get_by_token(self, token: str) -> Optional[PasswordResetToken]: ...

    async def get_by_email(self, email: str) -> Optional[PasswordResetToken]: ...

    async def create(self, email: str, token: str, expires: datetime) -> PasswordResetToken: ...

    async def delete(self, id: str) -> None: ...
