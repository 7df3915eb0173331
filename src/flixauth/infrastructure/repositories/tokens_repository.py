from datetime import datetime
from typing import Any, Generic, Optional, Tuple, Type, TypeVar, cast

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from flixauth.domain.tokens import EmailToken, PasswordResetToken, VerificationToken
from flixauth.logging_config import get_logger

from ..db import models

logger = get_logger(__name__)

T = TypeVar("T", bound=EmailToken)


class _SqlAlchemyEmailTokenRepository(Generic[T]):
    """Shared persistence for single-use email tokens.

    Subclasses bind the table model and the domain type returned to callers.
    """

    model: Any
    domain_type: Type[T]
    # columns beyond (email, token, expires) carried by this token kind
    extra_fields: Tuple[str, ...] = ()

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    def _to_domain(self, row: Any) -> T:
        return self.domain_type(
            id=str(row.id),
            email=cast(Any, row.email),
            token=cast(Any, row.token),
            expires=cast(Any, row.expires),
            **{name: getattr(row, name) for name in self.extra_fields},
        )

    async def _commit(self, event: str, **context) -> None:
        await self.db_session.flush()
        try:
            await self.db_session.commit()
        except Exception as e:
            logger.exception(event, table=self.model.__tablename__, error=str(e), **context)
            raise

    async def get_by_token(self, token: str) -> Optional[T]:
        q = await self.db_session.execute(select(self.model).where(self.model.token == token))
        row = q.scalars().first()
        if not row:
            return None
        return self._to_domain(row)

    async def get_by_email(self, email: str) -> Optional[T]:
        q = await self.db_session.execute(select(self.model).where(self.model.email == email))
        row = q.scalars().first()
        if not row:
            return None
        return self._to_domain(row)

    async def create(self, email: str, token: str, expires: datetime, **fields: Any) -> T:
        unknown = set(fields) - set(self.extra_fields)
        if unknown:
            raise TypeError(f"unexpected token fields: {sorted(unknown)}")
        m = self.model(email=email, token=token, expires=expires, **fields)
        self.db_session.add(m)
        await self._commit("email_token_create_commit_failed", email=email)
        return self._to_domain(m)

    async def delete(self, id: str) -> None:
        await self.db_session.execute(delete(self.model).where(self.model.id == id))
        await self._commit("email_token_delete_commit_failed", token_id=id)


class SqlAlchemyVerificationTokenRepository(_SqlAlchemyEmailTokenRepository[VerificationToken]):
    model = models.VerificationTokenModel
    domain_type = VerificationToken
    extra_fields = ("account_id",)


class SqlAlchemyPasswordResetTokenRepository(_SqlAlchemyEmailTokenRepository[PasswordResetToken]):
    model = models.PasswordResetTokenModel
    domain_type = PasswordResetToken
