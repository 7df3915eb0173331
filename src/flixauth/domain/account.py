import datetime
from dataclasses import dataclass
from typing import Optional


@dataclass
class Account:
    id: Optional[str]
    email: str
    name: Optional[str] = None
    hashed_password: Optional[str] = None
    email_verified: Optional[datetime.datetime] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.datetime.now(datetime.timezone.utc)
        if self.updated_at is None:
            self.updated_at = datetime.datetime.now(datetime.timezone.utc)

    @property
    def is_verified(self) -> bool:
        return self.email_verified is not None
