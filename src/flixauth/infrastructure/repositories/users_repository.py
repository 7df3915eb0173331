from datetime import datetime, timezone
from typing import Any, Optional, cast

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from flixauth.domain.account import Account
from flixauth.logging_config import get_logger

from ..db import models

logger = get_logger(__name__)


def _to_domain(row: models.UserModel) -> Account:
    return Account(
        id=str(row.id),
        email=cast(Any, row.email),
        name=cast(Any, row.name),
        hashed_password=cast(Any, row.hashed_password),
        email_verified=cast(Any, row.email_verified),
        created_at=cast(Any, row.created_at),
        updated_at=cast(Any, row.updated_at),
    )


class SqlAlchemyUserRepository:
    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def _commit(self, event: str, **context) -> None:
        await self.db_session.flush()
        try:
            await self.db_session.commit()
        except Exception as e:
            logger.exception(event, error=str(e), **context)
            raise

    async def create(self, account: Account) -> Account:
        logger.debug("creating_user", email=account.email)
        m = models.UserModel(
            name=account.name,
            email=account.email,
            hashed_password=account.hashed_password,
            email_verified=account.email_verified,
        )
        self.db_session.add(m)
        await self._commit("user_create_commit_failed", email=account.email)
        logger.info("user_created", user_id=m.id, email=account.email)
        return _to_domain(m)

    async def get_by_id(self, id: str) -> Optional[Account]:
        q = await self.db_session.execute(select(models.UserModel).where(models.UserModel.id == id))
        row = q.scalars().first()
        if not row:
            return None
        return _to_domain(row)

    async def get_by_email(self, email: str) -> Optional[Account]:
        q = await self.db_session.execute(
            select(models.UserModel).where(models.UserModel.email == email)
        )
        row = q.scalars().first()
        if not row:
            return None
        return _to_domain(row)

    async def update(
        self,
        id: str,
        *,
        email_verified: Optional[datetime] = None,
        email: Optional[str] = None,
    ) -> Optional[Account]:
        """Update the verification timestamp and/or email of an account.

        Only explicitly passed values are written. Returns the updated account
        or None if not found.
        """
        values: dict[str, Any] = {}
        if email_verified is not None:
            values["email_verified"] = email_verified
        if email is not None:
            values["email"] = email
        if not values:
            return await self.get_by_id(id)
        values["updated_at"] = datetime.now(timezone.utc)
        await self.db_session.execute(
            update(models.UserModel).where(models.UserModel.id == id).values(**values)
        )
        await self._commit("user_update_commit_failed", user_id=id)
        return await self.get_by_id(id)

    async def set_password(self, id: str, hashed_password: str) -> None:
        """Explicit API to set an account's password (for password reset)."""
        await self.db_session.execute(
            update(models.UserModel)
            .where(models.UserModel.id == id)
            .values(hashed_password=hashed_password, updated_at=datetime.now(timezone.utc))
        )
        await self._commit("user_set_password_commit_failed", user_id=id)
