"""
Campaign Weather Types and Mechanical Impacts.

Defines the nine weather conditions, their gameplay impact profiles
(travel speed, marching, visibility, river fording, battle and scouting
penalties) and the formatter that turns a profile into report lines.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from campaign_weather.weather.calendar import Season
from campaign_weather.weather.special_events import CometEvent


class WeatherCondition(str, Enum):
    """Weather conditions a region can experience."""

    CLEAR_SKIES = "Clear Skies"
    LIGHT_RAIN = "Light Rain"
    HEAVY_RAIN = "Heavy Rain"
    STORM = "Storm"
    HOT = "Hot"
    HEATWAVE = "Heatwave"
    SNOW = "Snow"
    BLIZZARD = "Blizzard"
    FOG = "Fog"

    @classmethod
    def from_name(cls, name: str) -> "WeatherCondition":
        """
        Look up a condition by its display value ("Light Rain") or member
        name ("LIGHT_RAIN").

        Raises:
            ValueError: If the name matches no condition
        """
        try:
            return cls(name)
        except ValueError:
            pass
        member = cls.__members__.get(name.strip().upper().replace(" ", "_"))
        if member is None:
            raise ValueError(f"Unknown weather condition: {name!r}")
        return member


ALL_WEATHER_TYPES: tuple[WeatherCondition, ...] = tuple(WeatherCondition)


class Severity(str, Enum):
    """Battle and scouting severity class of a condition."""

    NONE = "None"
    BAD = "Bad"  # -1 battle rolls, scouting -1 hex
    VERY_BAD = "Very Bad"  # -1 battle rolls, scouting -2 hexes

    @property
    def battle_roll_modifier(self) -> int:
        """Modifier applied to battle rolls."""
        return 0 if self is Severity.NONE else -1

    @property
    def scouting_range_reduction(self) -> int:
        """Hexes removed from scouting range."""
        if self is Severity.BAD:
            return 1
        if self is Severity.VERY_BAD:
            return 2
        return 0


@dataclass(frozen=True)
class ImpactProfile:
    """
    Mechanical impact of a weather condition.

    Attributes:
        road_mult: Road travel speed multiplier (0-1)
        off_road_mult: Off-road travel speed multiplier (0 = impossible)
        can_forced_march: Whether forced marching is allowed
        can_night_march: Whether night marching is allowed
        zero_visibility: Whether visibility drops to nothing
        can_ford_rivers: Whether rivers can be forded
        severity: Battle/scouting severity class
        special: Free-text special rule, empty if none
    """

    road_mult: float = 1.0
    off_road_mult: float = 1.0
    can_forced_march: bool = True
    can_night_march: bool = True
    zero_visibility: bool = False
    can_ford_rivers: bool = True
    severity: Severity = Severity.NONE
    special: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the report field names."""
        return {
            "roadMult": self.road_mult,
            "offRoadMult": self.off_road_mult,
            "canForcedMarch": self.can_forced_march,
            "canNightMarch": self.can_night_march,
            "zeroVisibility": self.zero_visibility,
            "canFordRivers": self.can_ford_rivers,
            "type": self.severity.value,
            "special": self.special,
        }


# =============================================================================
# MECHANICAL IMPACT CATALOG
# =============================================================================

WEATHER_IMPACTS: Mapping[WeatherCondition, ImpactProfile] = MappingProxyType(
    {
        WeatherCondition.CLEAR_SKIES: ImpactProfile(),
        WeatherCondition.LIGHT_RAIN: ImpactProfile(),
        WeatherCondition.HEAVY_RAIN: ImpactProfile(
            road_mult=0.75,
            off_road_mult=0.5,
            can_night_march=False,
            can_ford_rivers=False,
            severity=Severity.BAD,
        ),
        WeatherCondition.STORM: ImpactProfile(
            road_mult=0.5,
            off_road_mult=0.25,
            can_forced_march=False,
            can_night_march=False,
            can_ford_rivers=False,
            severity=Severity.VERY_BAD,
        ),
        WeatherCondition.HOT: ImpactProfile(
            special=(
                "Day Marching more than 6 miles requires morale check. "
                "Force marching requires morale check."
            ),
        ),
        # Night marching stays allowed; heat only punishes day marches
        WeatherCondition.HEATWAVE: ImpactProfile(
            road_mult=0.75,
            off_road_mult=0.5,
            can_forced_march=False,
            can_night_march=True,
            special="Day Marching gives -1 Morale. Night Marching is fine.",
        ),
        WeatherCondition.SNOW: ImpactProfile(
            road_mult=0.75,
            off_road_mult=0.5,
            severity=Severity.BAD,
        ),
        WeatherCondition.BLIZZARD: ImpactProfile(
            road_mult=0.25,
            off_road_mult=0.0,
            can_forced_march=False,
            can_night_march=False,
            zero_visibility=True,
            can_ford_rivers=False,
            severity=Severity.VERY_BAD,
            special="Marching gives -1 Morale.",
        ),
        WeatherCondition.FOG: ImpactProfile(
            can_forced_march=False,
            can_night_march=False,
            zero_visibility=True,
            can_ford_rivers=False,
            severity=Severity.VERY_BAD,
            special=(
                "1-in-6 wrong turn at forked roads. "
                "Off-road: 2-in-6 chance of becoming lost."
            ),
        ),
    }
)


def get_impact_profile(condition: WeatherCondition) -> ImpactProfile:
    """Get the impact profile for a condition."""
    return WEATHER_IMPACTS[condition]


def _percent(multiplier: float) -> int:
    """Multiplier as a whole percentage, rounding halves up."""
    return math.floor(multiplier * 100 + 0.5)


def format_impacts(profile: Optional[ImpactProfile]) -> list[str]:
    """
    Render an impact profile as ordered report lines.

    Order is fixed: road speed, off-road speed, forced march, night march,
    visibility, river fording, battle/scouting penalties, special rule.
    Fields without an effect produce no line.

    Args:
        profile: Impact profile, or None

    Returns:
        List of human-readable impact strings
    """
    if profile is None:
        return []

    impacts = []

    if profile.road_mult < 1:
        impacts.append(f"Road travel at {_percent(profile.road_mult)}% speed")
    if profile.off_road_mult < 1:
        if profile.off_road_mult == 0:
            impacts.append("Off-road travel impossible")
        else:
            impacts.append(f"Off-road travel at {_percent(profile.off_road_mult)}% speed")

    if not profile.can_forced_march:
        impacts.append("Forced marching not possible")
    if not profile.can_night_march:
        impacts.append("Night marching not possible")

    if profile.zero_visibility:
        impacts.append("Zero visibility")

    if not profile.can_ford_rivers:
        impacts.append("Cannot ford rivers")

    if profile.severity is Severity.BAD:
        impacts.append("-1 to battle rolls")
        impacts.append("Scouting range reduced by 1 hex")
    elif profile.severity is Severity.VERY_BAD:
        impacts.append("-1 to battle rolls")
        impacts.append("Scouting range reduced by 2 hexes")

    if profile.special:
        impacts.append(profile.special)

    return impacts


@dataclass
class WeatherResult:
    """
    The weather for one region on one day.

    Contains the display labels, the resolved condition and its
    mechanical impacts.
    """

    date: str  # e.g., "June 15"
    day_of_week: str  # e.g., "Monday"
    season: Season
    condition: WeatherCondition
    impacts: list[str] = field(default_factory=list)
    impact_data: ImpactProfile = field(default_factory=ImpactProfile)
    has_comet: bool = False
    comet_event: Optional[CometEvent] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for presentation collaborators."""
        return {
            "date": self.date,
            "dayOfWeek": self.day_of_week,
            "season": self.season.value,
            "condition": self.condition.value,
            "impacts": list(self.impacts),
            "impactData": self.impact_data.to_dict(),
            "hasComet": self.has_comet,
            "cometEvent": self.comet_event.to_dict() if self.comet_event else None,
        }

    def __str__(self) -> str:
        return f"{self.day_of_week}, {self.date} ({self.season.value}): {self.condition.value}"
