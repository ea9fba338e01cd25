"""
Run Log for weather resolution tracing.

Captures the deterministic decisions behind a weather result (seeded draws,
season table rolls, transition paths, special-event overrides) so a report
can be explained and compared across runs. The log is an explicit object
handed to the resolver; nothing is recorded unless one is supplied.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional
import json
import logging

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can be logged."""

    ROLL = "roll"  # Seeded draw
    TABLE_LOOKUP = "table_lookup"  # Weighted season table roll
    TRANSITION = "transition"  # Weather change between epochs
    OVERRIDE = "override"  # Special event replaced the weather
    CUSTOM = "custom"  # Custom event


@dataclass
class LogEvent:
    """Base class for all logged events."""

    # Subclasses set the correct value in __post_init__
    event_type: EventType = EventType.CUSTOM
    timestamp: datetime = field(default_factory=datetime.now)
    sequence_number: int = 0
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "sequence_number": self.sequence_number,
            "context": self.context,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogEvent":
        """Create from dictionary."""
        return cls(
            event_type=EventType(data["event_type"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
        )


@dataclass
class RollEvent(LogEvent):
    """A seeded draw."""

    seed: int = 0
    purpose: str = ""  # e.g., "epoch length", "transition path"
    value: float = 0.0  # First value drawn from the seed

    def __post_init__(self):
        self.event_type = EventType.ROLL

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update({"seed": self.seed, "purpose": self.purpose, "value": self.value})
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RollEvent":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
            seed=data.get("seed", 0),
            purpose=data.get("purpose", ""),
            value=data.get("value", 0.0),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] ROLL seed={self.seed}: {self.value:.6f} ({self.purpose})"


@dataclass
class TableLookupEvent(LogEvent):
    """A weighted season table roll."""

    table_id: str = ""  # Season name
    region_id: str = ""
    epoch_number: int = 0
    result_text: str = ""

    def __post_init__(self):
        self.event_type = EventType.TABLE_LOOKUP

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "table_id": self.table_id,
                "region_id": self.region_id,
                "epoch_number": self.epoch_number,
                "result_text": self.result_text,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TableLookupEvent":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
            table_id=data.get("table_id", ""),
            region_id=data.get("region_id", ""),
            epoch_number=data.get("epoch_number", 0),
            result_text=data.get("result_text", ""),
        )

    def __str__(self) -> str:
        return (
            f"[{self.sequence_number}] TABLE {self.table_id} "
            f"(epoch {self.epoch_number}, {self.region_id}): {self.result_text}"
        )


@dataclass
class TransitionEvent(LogEvent):
    """A weather change from the previous epoch into the current one."""

    from_weather: str = ""
    to_weather: str = ""
    path: list[str] = field(default_factory=list)  # Empty for a direct change
    day_in_epoch: int = 0
    condition: str = ""  # What is shown on the resolved day

    def __post_init__(self):
        self.event_type = EventType.TRANSITION

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "from_weather": self.from_weather,
                "to_weather": self.to_weather,
                "path": self.path,
                "day_in_epoch": self.day_in_epoch,
                "condition": self.condition,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransitionEvent":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
            from_weather=data.get("from_weather", ""),
            to_weather=data.get("to_weather", ""),
            path=data.get("path", []),
            day_in_epoch=data.get("day_in_epoch", 0),
            condition=data.get("condition", ""),
        )

    def __str__(self) -> str:
        via = f" via {' -> '.join(self.path)}" if self.path else ""
        return (
            f"[{self.sequence_number}] TRANSITION {self.from_weather} -> {self.to_weather}{via} "
            f"(day {self.day_in_epoch}: {self.condition})"
        )


@dataclass
class OverrideEvent(LogEvent):
    """A special event replaced the computed weather."""

    event_name: str = ""
    date: str = ""  # ISO date

    def __post_init__(self):
        self.event_type = EventType.OVERRIDE

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update({"event_name": self.event_name, "date": self.date})
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OverrideEvent":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
            event_name=data.get("event_name", ""),
            date=data.get("date", ""),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] OVERRIDE {self.event_name} on {self.date}"


_EVENT_CLASSES: dict[EventType, type[LogEvent]] = {
    EventType.ROLL: RollEvent,
    EventType.TABLE_LOOKUP: TableLookupEvent,
    EventType.TRANSITION: TransitionEvent,
    EventType.OVERRIDE: OverrideEvent,
}


class RunLog:
    """
    Ordered record of weather resolution events.

    Create one per report (or per batch of reports) and pass it to
    get_weather_for_date(run_log=...).
    """

    def __init__(self):
        self._events: list[LogEvent] = []
        self._sequence: int = 0
        self._session_start: datetime = datetime.now()
        self._subscribers: list[Callable[[LogEvent], None]] = []
        self._paused: bool = False

    def reset(self) -> None:
        """Clear all events."""
        self._events = []
        self._sequence = 0
        self._session_start = datetime.now()
        logger.info("RunLog reset")

    def pause(self) -> None:
        """Pause logging."""
        self._paused = True

    def resume(self) -> None:
        """Resume logging."""
        self._paused = False

    def is_paused(self) -> bool:
        """Check if logging is paused."""
        return self._paused

    def subscribe(self, callback: Callable[[LogEvent], None]) -> None:
        """Subscribe to receive events as they are logged."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[LogEvent], None]) -> None:
        """Unsubscribe from events."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _log_event(self, event: LogEvent) -> None:
        """Internal method to log an event."""
        if self._paused:
            return

        self._sequence += 1
        event.sequence_number = self._sequence
        self._events.append(event)

        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception as e:
                logger.warning(f"Subscriber error: {e}")

    def log_roll(
        self,
        seed: int,
        purpose: str,
        value: float,
        context: Optional[dict[str, Any]] = None,
    ) -> RollEvent:
        """Log a seeded draw."""
        event = RollEvent(seed=seed, purpose=purpose, value=value, context=context or {})
        self._log_event(event)
        return event

    def log_table_lookup(
        self,
        table_id: str,
        region_id: str,
        epoch_number: int,
        result_text: str,
        context: Optional[dict[str, Any]] = None,
    ) -> TableLookupEvent:
        """Log a season table roll."""
        event = TableLookupEvent(
            table_id=table_id,
            region_id=region_id,
            epoch_number=epoch_number,
            result_text=result_text,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_transition(
        self,
        from_weather: str,
        to_weather: str,
        path: list[str],
        day_in_epoch: int,
        condition: str,
        context: Optional[dict[str, Any]] = None,
    ) -> TransitionEvent:
        """Log a weather transition."""
        event = TransitionEvent(
            from_weather=from_weather,
            to_weather=to_weather,
            path=list(path),
            day_in_epoch=day_in_epoch,
            condition=condition,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_override(
        self,
        event_name: str,
        date: str,
        context: Optional[dict[str, Any]] = None,
    ) -> OverrideEvent:
        """Log a special event override."""
        event = OverrideEvent(event_name=event_name, date=date, context=context or {})
        self._log_event(event)
        return event

    def log_custom(self, event_name: str, details: dict[str, Any]) -> LogEvent:
        """Log a custom event."""
        event = LogEvent(
            event_type=EventType.CUSTOM,
            context={"event_name": event_name, **details},
        )
        self._log_event(event)
        return event

    def get_events(
        self,
        event_type: Optional[EventType] = None,
        since_sequence: int = 0,
    ) -> list[LogEvent]:
        """
        Get logged events.

        Args:
            event_type: Filter by event type (None = all)
            since_sequence: Only events after this sequence number

        Returns:
            List of events
        """
        events = [e for e in self._events if e.sequence_number > since_sequence]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events

    def get_rolls(self) -> list[RollEvent]:
        """Get all roll events."""
        return [e for e in self._events if isinstance(e, RollEvent)]

    def get_table_lookups(self) -> list[TableLookupEvent]:
        """Get all table lookup events."""
        return [e for e in self._events if isinstance(e, TableLookupEvent)]

    def get_transitions(self) -> list[TransitionEvent]:
        """Get all transition events."""
        return [e for e in self._events if isinstance(e, TransitionEvent)]

    def get_overrides(self) -> list[OverrideEvent]:
        """Get all override events."""
        return [e for e in self._events if isinstance(e, OverrideEvent)]

    def get_event_count(self) -> int:
        """Get total number of logged events."""
        return len(self._events)

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the run log."""
        return {
            "session_start": self._session_start.isoformat(),
            "total_events": len(self._events),
            "rolls": len(self.get_rolls()),
            "table_lookups": len(self.get_table_lookups()),
            "transitions": len(self.get_transitions()),
            "overrides": len(self.get_overrides()),
            "last_sequence": self._sequence,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the entire log to a dictionary."""
        return {
            "session_start": self._session_start.isoformat(),
            "sequence": self._sequence,
            "events": [e.to_dict() for e in self._events],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize the log to JSON."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunLog":
        """Rebuild a log from to_dict() output."""
        log = cls()
        log._session_start = datetime.fromisoformat(data["session_start"])
        log._sequence = data.get("sequence", 0)
        for event_data in data.get("events", []):
            event_class = _EVENT_CLASSES.get(EventType(event_data["event_type"]), LogEvent)
            log._events.append(event_class.from_dict(event_data))
        return log

    def format_log(
        self,
        event_types: Optional[list[EventType]] = None,
        max_events: Optional[int] = None,
    ) -> str:
        """
        Format the log as a human-readable string.

        Args:
            event_types: Filter by event types (None = all)
            max_events: Maximum number of events to include

        Returns:
            Formatted log string
        """
        lines = [
            "=== Weather Run Log ===",
            f"Session: {self._session_start.isoformat()}",
            f"Total Events: {len(self._events)}",
            "",
        ]

        events = self._events
        if event_types:
            events = [e for e in events if e.event_type in event_types]
        if max_events:
            events = events[-max_events:]

        for event in events:
            lines.append(str(event))

        return "\n".join(lines)
