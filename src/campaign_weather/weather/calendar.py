"""
Campaign Calendar Helpers.

Maps real-world UTC dates to seasons (Northern Hemisphere convention),
day numbers on the epoch timeline and the display labels used in
weather reports.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Union

DateLike = Union[date, datetime]

# Day 0 of the epoch timeline
TIMELINE_ORIGIN = date(1970, 1, 1)


class Season(str, Enum):
    """The four seasons used to pick a region's weather table."""

    SPRING = "spring"  # Mar 20 - Jun 20
    SUMMER = "summer"  # Jun 21 - Sep 21
    AUTUMN = "autumn"  # Sep 22 - Dec 20
    WINTER = "winter"  # Dec 21 - Mar 19


@dataclass(frozen=True)
class SeasonStart:
    """First month/day of a season."""

    season: Season
    month: int
    day: int


# Ordered by position in the year; winter wraps around New Year
SEASON_STARTS: tuple[SeasonStart, ...] = (
    SeasonStart(Season.SPRING, 3, 20),
    SeasonStart(Season.SUMMER, 6, 21),
    SeasonStart(Season.AUTUMN, 9, 22),
    SeasonStart(Season.WINTER, 12, 21),
)

# English labels, independent of the process locale
MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

WEEKDAY_NAMES: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def get_season(month: int, day: int) -> Season:
    """
    Get the season for a month/day pair.

    Args:
        month: 1-12
        day: Day of the month

    Returns:
        The Season containing that date (year independent)
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month number: {month}")

    current = Season.WINTER
    for start in SEASON_STARTS:
        if (month, day) >= (start.month, start.day):
            current = start.season
    return current


def to_utc_date(value: DateLike) -> date:
    """
    Reduce a date or datetime to its UTC calendar date.

    Aware datetimes are converted to UTC first; naive datetimes are read
    as already being in UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def get_season_for_date(value: DateLike) -> Season:
    """Get the season for a calendar date."""
    day = to_utc_date(value)
    return get_season(day.month, day.day)


def day_number(value: DateLike) -> int:
    """Days since 1970-01-01 (negative for earlier dates)."""
    return (to_utc_date(value) - TIMELINE_ORIGIN).days


def format_date_label(value: DateLike) -> str:
    """Format as e.g. "June 15"."""
    day = to_utc_date(value)
    return f"{MONTH_NAMES[day.month - 1]} {day.day}"


def get_weekday_name(value: DateLike) -> str:
    """Get the English weekday name, e.g. "Monday"."""
    return WEEKDAY_NAMES[to_utc_date(value).weekday()]
