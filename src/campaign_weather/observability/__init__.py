"""
Observability for the campaign weather engine.

Provides an explicit run log of the seeded decisions behind each weather
result.
"""

from campaign_weather.observability.run_log import (
    RunLog,
    LogEvent,
    EventType,
    RollEvent,
    TableLookupEvent,
    TransitionEvent,
    OverrideEvent,
)

__all__ = [
    "RunLog",
    "LogEvent",
    "EventType",
    "RollEvent",
    "TableLookupEvent",
    "TransitionEvent",
    "OverrideEvent",
]
