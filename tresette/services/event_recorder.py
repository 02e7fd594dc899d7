"""Event recorder capturing the outbound events of a session.

Used for the event history endpoint and by clients resynchronising.
"""

from datetime import UTC, datetime
from typing import Any

from tresette.models.events import ModelEvent


class EventRecorder:
    """Records events in emission order as serialisable dicts."""

    def __init__(self) -> None:
        """Initialize an empty log."""
        self._events: list[dict[str, Any]] = []

    def record(self, event: ModelEvent) -> None:
        """Append one event to the log."""
        self._events.append(
            {
                "sequence": len(self._events),
                "recorded_at": datetime.now(UTC).isoformat(),
                **event.to_dict(),
            }
        )

    @property
    def events(self) -> list[dict[str, Any]]:
        """Copy of the recorded events, oldest first."""
        return list(self._events)

    def events_of_type(self, event_type: str) -> list[dict[str, Any]]:
        """Recorded events with the given ``event_type`` value."""
        return [event for event in self._events if event["event_type"] == event_type]

    def clear(self) -> None:
        """Forget every recorded event."""
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
