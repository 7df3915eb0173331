from typing import Any, Mapping, Protocol

from ..domain.events import EventNameLike, EventSeverityLike


class EventRecorder(Protocol):
    """Sink for one structured event per flow branch."""

    async def record(
        self,
        event_name: EventNameLike,
        context: Mapping[str, Any],
        severity: EventSeverityLike = "info",
    ) -> None: ...
