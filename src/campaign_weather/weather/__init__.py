"""
Campaign Weather System.

Deterministic daily weather for campaign regions: seasonal weighted tables,
multi-day weather spells (epochs), transition smoothing between distant
conditions, and the travel/battle/scouting effects of each condition.
"""

from campaign_weather.weather.calendar import (
    Season,
    SEASON_STARTS,
    get_season,
    get_season_for_date,
    day_number,
    format_date_label,
    get_weekday_name,
)
from campaign_weather.weather.seeded_rng import (
    SeededRandom,
    hash_region,
    region_offset,
    direct_seed,
    epoch_length_seed,
    epoch_base_weather_seed,
    transition_path_seed,
)
from campaign_weather.weather.special_events import (
    CometEvent,
    COMET_DATE,
    GUNHILDE,
    is_comet_date,
    get_comet_event,
)
from campaign_weather.weather.weather_types import (
    WeatherCondition,
    Severity,
    ImpactProfile,
    WeatherResult,
    ALL_WEATHER_TYPES,
    WEATHER_IMPACTS,
    get_impact_profile,
    format_impacts,
)
from campaign_weather.weather.weighted_table import (
    WeightedEntry,
    normalize_entry,
    normalize_table,
    roll_from_table,
)
from campaign_weather.weather.transitions import (
    TransitionGraph,
    TransitionPath,
    DEFAULT_TRANSITION_GRAPH,
)
from campaign_weather.weather.epochs import (
    Epoch,
    EpochPosition,
    EpochBoundaryIndex,
    InvariantViolation,
    epoch_length,
    locate_epoch,
    iter_epochs,
)
from campaign_weather.weather.pattern_resolver import (
    ANCHOR_EPOCH,
    ANCHOR_WEATHER,
    EpochResolution,
    WeatherCache,
    epoch_base_weather,
    effective_epoch_end_weather,
    condition_for_epoch_day,
    resolve_pattern,
)
from campaign_weather.weather.weather_service import (
    WeatherSettings,
    DEFAULT_SETTINGS,
    get_weather_for_date,
    get_weather_update,
    get_weekly_forecast,
    get_regional_weather_update,
    get_regional_weekly_forecast,
)

__all__ = [
    # Calendar
    "Season",
    "SEASON_STARTS",
    "get_season",
    "get_season_for_date",
    "day_number",
    "format_date_label",
    "get_weekday_name",
    # Seeded randomness
    "SeededRandom",
    "hash_region",
    "region_offset",
    "direct_seed",
    "epoch_length_seed",
    "epoch_base_weather_seed",
    "transition_path_seed",
    # Special events
    "CometEvent",
    "COMET_DATE",
    "GUNHILDE",
    "is_comet_date",
    "get_comet_event",
    # Weather types and impacts
    "WeatherCondition",
    "Severity",
    "ImpactProfile",
    "WeatherResult",
    "ALL_WEATHER_TYPES",
    "WEATHER_IMPACTS",
    "get_impact_profile",
    "format_impacts",
    # Weighted tables
    "WeightedEntry",
    "normalize_entry",
    "normalize_table",
    "roll_from_table",
    # Transitions
    "TransitionGraph",
    "TransitionPath",
    "DEFAULT_TRANSITION_GRAPH",
    # Epochs
    "Epoch",
    "EpochPosition",
    "EpochBoundaryIndex",
    "InvariantViolation",
    "epoch_length",
    "locate_epoch",
    "iter_epochs",
    # Pattern resolution
    "ANCHOR_EPOCH",
    "ANCHOR_WEATHER",
    "EpochResolution",
    "WeatherCache",
    "epoch_base_weather",
    "effective_epoch_end_weather",
    "condition_for_epoch_day",
    "resolve_pattern",
    # Service
    "WeatherSettings",
    "DEFAULT_SETTINGS",
    "get_weather_for_date",
    "get_weather_update",
    "get_weekly_forecast",
    "get_regional_weather_update",
    "get_regional_weekly_forecast",
]
