from datetime import datetime
from typing import Optional, Protocol

from ...domain.account import Account


class UserRepository(Protocol):
    """Protocol for account persistence."""

    async def create(self, account: Account) -> Account: ...

    async def get_by_id(self, id: str) -> Optional[Account]: ...

    async def get_by_email(self, email: str) -> Optional[Account]: ...

    async def update(
        self,
        id: str,
        *,
        email_verified: Optional[datetime] = None,
        email: Optional[str] = None,
    ) -> Optional[Account]: ...

    async def set_password(self, id: str, hashed_password: str) -> None: ...
