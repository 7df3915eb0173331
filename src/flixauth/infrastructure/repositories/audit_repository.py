from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.events import EventRecord
from ...logging_config import get_logger
from ..db import models

logger = get_logger(__name__)


class SqlAlchemyAuditRepository:
    def __init__(self, db_session: AsyncSession):
        """Initialize audit repository with a database session.

        Args:
            db_session: SQLAlchemy async session instance
        """
        self.db_session = db_session

    async def log_event(self, event: EventRecord) -> None:
        record = event.to_record()
        audit = models.AuditModel(
            event_name=record["event_name"],
            severity=record["severity"],
            context=record["context"],
            timestamp=event.timestamp or datetime.now(timezone.utc),
        )
        self.db_session.add(audit)
        await self.db_session.flush()
        await self.db_session.commit()

    async def list_events(self, event_name: str | None = None, limit: int = 100) -> List[EventRecord]:
        stmt = select(models.AuditModel).order_by(models.AuditModel.id.desc()).limit(limit)
        if event_name is not None:
            stmt = stmt.where(models.AuditModel.event_name == event_name)
        q = await self.db_session.execute(stmt)
        return [
            EventRecord(
                event_name=r.event_name,
                context=dict(r.context or {}),
                severity=r.severity,
                timestamp=r.timestamp,
            )
            for r in q.scalars().all()
        ]
