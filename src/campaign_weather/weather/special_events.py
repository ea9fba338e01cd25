"""
One-off Special Weather Events.

A special event pins a single calendar date, in every region, to clear
skies and attaches an event payload. The only event so far is the comet
Gunhilde.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from campaign_weather.weather.calendar import DateLike, to_utc_date


@dataclass(frozen=True)
class CometEvent:
    """
    A rare celestial event visible across all regions.

    Attributes:
        name: Name of the comet
        description: Narrative description for the weather report
        impact: Mechanical effect on the party
    """

    name: str
    description: str
    impact: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "impact": self.impact,
        }


COMET_DATE = date(2026, 6, 15)

GUNHILDE = CometEvent(
    name="Gunhilde",
    description=(
        "The comet Gunhilde traces a bright green line across the sky. "
        "Everyone who sees it feels uplifted."
    ),
    impact="Recover 1 Morale",
)


def is_comet_date(value: DateLike, comet_date: date = COMET_DATE) -> bool:
    """Check if the UTC calendar date of value is the comet date."""
    return to_utc_date(value) == comet_date


def get_comet_event(
    value: DateLike,
    comet_date: date = COMET_DATE,
    event: CometEvent = GUNHILDE,
) -> Optional[CometEvent]:
    """
    Get the comet event for a date, if any.

    Returns:
        The CometEvent on the comet date, None on every other date
    """
    if is_comet_date(value, comet_date):
        return event
    return None
