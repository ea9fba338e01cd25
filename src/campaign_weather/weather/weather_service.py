"""
Campaign Weather Service.

Entry points for daily weather reports. get_weather_for_date() runs the full
pipeline for one region and day:

    special event check -> season -> epoch -> pattern resolver -> condition
    -> impact profile -> formatted impacts -> WeatherResult

The pipeline is a pure function of its inputs. Optional collaborators
(WeatherCache, RunLog, WeatherSettings) are passed explicitly and never
change the result.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Union

from campaign_weather.observability.run_log import RunLog
from campaign_weather.regions.region_config import (
    ConfigurationError,
    RegionDefinition,
    SeasonalWeatherConfig,
)
from campaign_weather.weather.calendar import (
    DateLike,
    day_number,
    format_date_label,
    get_season_for_date,
    get_weekday_name,
    to_utc_date,
)
from campaign_weather.weather.pattern_resolver import (
    ANCHOR_EPOCH,
    ANCHOR_WEATHER,
    WeatherCache,
    resolve_pattern,
)
from campaign_weather.weather.seeded_rng import SeededRandom, direct_seed
from campaign_weather.weather.special_events import COMET_DATE, GUNHILDE, CometEvent
from campaign_weather.weather.transitions import DEFAULT_TRANSITION_GRAPH, TransitionGraph
from campaign_weather.weather.weather_types import (
    WeatherCondition,
    WeatherResult,
    format_impacts,
    get_impact_profile,
)
from campaign_weather.weather.weighted_table import roll_from_table

logger = logging.getLogger(__name__)

FORECAST_DAYS = 7

SeasonalConfigLike = Union[SeasonalWeatherConfig, Mapping[str, Any]]


@dataclass(frozen=True)
class WeatherSettings:
    """
    Tunable constants of the weather engine.

    Attributes:
        anchor_epoch: First epoch of the continuity walk
        anchor_weather: Weather in force before the anchor epoch
        comet_date: Date on which the comet overrides all weather
        comet_event: Payload reported on the comet date
        smooth_transitions: Use epochs and transition paths; when False,
            every day is an independent roll on the season table
    """

    anchor_epoch: int = ANCHOR_EPOCH
    anchor_weather: WeatherCondition = ANCHOR_WEATHER
    comet_date: date = COMET_DATE
    comet_event: CometEvent = field(default=GUNHILDE)
    smooth_transitions: bool = True


DEFAULT_SETTINGS = WeatherSettings()


def _as_seasonal_config(
    seasonal_config: SeasonalConfigLike, region_id: str
) -> SeasonalWeatherConfig:
    if isinstance(seasonal_config, SeasonalWeatherConfig):
        return seasonal_config
    if seasonal_config is None:
        raise ConfigurationError("No seasonal weather configuration", region_id=region_id)
    return SeasonalWeatherConfig.from_dict(seasonal_config, region_id=region_id)


def get_weather_for_date(
    value: DateLike,
    seasonal_config: SeasonalConfigLike,
    region_id: str = "default",
    *,
    graph: TransitionGraph = DEFAULT_TRANSITION_GRAPH,
    settings: WeatherSettings = DEFAULT_SETTINGS,
    cache: Optional[WeatherCache] = None,
    run_log: Optional[RunLog] = None,
) -> WeatherResult:
    """
    Get the weather for a region on a date.

    Args:
        value: Calendar date (datetimes are reduced to their UTC date)
        seasonal_config: SeasonalWeatherConfig or a raw
            {season: {"conditions": [...]}} mapping
        region_id: Region identifier
        graph: Transition graph
        settings: Engine constants
        cache: Optional memoization shared between calls
        run_log: Optional run log receiving the decisions

    Returns:
        WeatherResult for the day

    Raises:
        ConfigurationError: If the day's season has no usable table
    """
    day = to_utc_date(value)
    season = get_season_for_date(day)
    label = format_date_label(day)
    weekday = get_weekday_name(day)

    # The comet needs no configuration and draws no random values
    if day == settings.comet_date:
        logger.info(f"Comet {settings.comet_event.name} over {region_id!r} on {day.isoformat()}")
        if run_log is not None:
            run_log.log_override(
                settings.comet_event.name,
                day.isoformat(),
                {"region_id": region_id},
            )
        clear = WeatherCondition.CLEAR_SKIES
        return WeatherResult(
            date=label,
            day_of_week=weekday,
            season=season,
            condition=clear,
            impacts=[],
            impact_data=get_impact_profile(clear),
            has_comet=True,
            comet_event=settings.comet_event,
        )

    config = _as_seasonal_config(seasonal_config, region_id)
    try:
        table = config.conditions_for(season)
    except ConfigurationError as e:
        raise ConfigurationError(str(e), region_id=region_id, season=season) from None

    if settings.smooth_transitions:
        resolution = resolve_pattern(
            day_number(day),
            table,
            region_id,
            graph=graph,
            anchor_epoch=settings.anchor_epoch,
            anchor_weather=settings.anchor_weather,
            cache=cache,
            run_log=run_log,
            table_name=season.value,
        )
        condition = resolution.condition
    else:
        seed = direct_seed(day, region_id)
        condition = roll_from_table(SeededRandom(seed), table)
        if run_log is not None:
            context = {"region_id": region_id, "day": day_number(day)}
            run_log.log_roll(seed, "daily weather", SeededRandom(seed).next(), context)
            run_log.log_table_lookup(season.value, region_id, 0, condition.value, context)

    profile = get_impact_profile(condition)
    return WeatherResult(
        date=label,
        day_of_week=weekday,
        season=season,
        condition=condition,
        impacts=format_impacts(profile),
        impact_data=profile,
        has_comet=False,
        comet_event=None,
    )


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def get_weather_update(
    seasonal_config: SeasonalConfigLike,
    region_id: str = "default",
    today: Optional[DateLike] = None,
    **options: Any,
) -> WeatherResult:
    """Get today's weather (today defaults to the current UTC date)."""
    return get_weather_for_date(
        today if today is not None else _utc_today(),
        seasonal_config,
        region_id,
        **options,
    )


def get_weekly_forecast(
    seasonal_config: SeasonalConfigLike,
    region_id: str = "default",
    start_date: Optional[DateLike] = None,
    **options: Any,
) -> list[WeatherResult]:
    """
    Get seven consecutive days of weather.

    Args:
        seasonal_config: Seasonal weather configuration
        region_id: Region identifier
        start_date: First day (defaults to the current UTC date)
        **options: Passed through to get_weather_for_date

    Returns:
        Results for start_date and the six following days
    """
    start = to_utc_date(start_date) if start_date is not None else _utc_today()
    # One cache for the week so the continuity walk is shared
    if options.get("cache") is None:
        options["cache"] = WeatherCache()
    if isinstance(seasonal_config, Mapping):
        seasonal_config = SeasonalWeatherConfig.from_dict(seasonal_config, region_id=region_id)

    return [
        get_weather_for_date(start + timedelta(days=offset), seasonal_config, region_id, **options)
        for offset in range(FORECAST_DAYS)
    ]


def get_regional_weather_update(
    region: RegionDefinition, today: Optional[DateLike] = None, **options: Any
) -> WeatherResult:
    """Get today's weather for a configured region."""
    return get_weather_update(region.seasonal_weather, region.id, today, **options)


def get_regional_weekly_forecast(
    region: RegionDefinition, start_date: Optional[DateLike] = None, **options: Any
) -> list[WeatherResult]:
    """Get the weekly forecast for a configured region."""
    return get_weekly_forecast(region.seasonal_weather, region.id, start_date, **options)
