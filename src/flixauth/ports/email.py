from typing import Protocol


class EmailSender(Protocol):
    """Protocol for email sending operations."""

    async def send_verification_email(self, to_email: str, token: str) -> None: ...
    async def send_reset_password_email(self, to_email: str, token: str) -> None: ...
