"""Event recorder adapters: structured log lines and persisted audit rows."""

from typing import Any, Mapping, Sequence

from ..domain.events import EventNameLike, EventRecord, EventSeverity, EventSeverityLike
from ..logging_config import get_logger

logger = get_logger(__name__)


class LoggingEventRecorder:
    """Writes each event as one structlog line at the event's severity."""

    def __init__(self, log: Any = None):
        self.log = log or get_logger("flixauth.events")

    async def record(
        self,
        event_name: EventNameLike,
        context: Mapping[str, Any],
        severity: EventSeverityLike = EventSeverity.INFO,
    ) -> None:
        record = EventRecord(event_name=event_name, context=dict(context), severity=severity)
        payload = record.to_record()
        if str(severity) == EventSeverity.ERROR:
            self.log.error(payload["event_name"], **payload["context"])
        else:
            self.log.info(payload["event_name"], **payload["context"])


class AuditEventRecorder:
    """Persists events through the audit repository.

    Persistence failures are logged and swallowed so a broken event log never
    changes the outcome of the flow that emitted the event.
    """

    def __init__(self, audit_repo: Any):
        self.audit_repo = audit_repo

    async def record(
        self,
        event_name: EventNameLike,
        context: Mapping[str, Any],
        severity: EventSeverityLike = EventSeverity.INFO,
    ) -> None:
        if self.audit_repo is None:
            return
        event = EventRecord(event_name=event_name, context=dict(context), severity=severity)
        try:
            await self.audit_repo.log_event(event)
        except Exception as e:
            logger.debug("audit_log_failed", event_name=str(event_name), error=str(e))
            session = getattr(self.audit_repo, "db_session", None)
            if session is not None:
                await session.rollback()


class CompositeEventRecorder:
    """Fans a single event out to several recorders, in order."""

    def __init__(self, recorders: Sequence[Any]):
        self.recorders = list(recorders)

    async def record(
        self,
        event_name: EventNameLike,
        context: Mapping[str, Any],
        severity: EventSeverityLike = EventSeverity.INFO,
    ) -> None:
        for recorder in self.recorders:
            await recorder.record(event_name, context, severity)


__all__ = ["LoggingEventRecorder", "AuditEventRecorder", "CompositeEventRecorder"]
