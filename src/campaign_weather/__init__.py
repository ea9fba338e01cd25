"""
Campaign Weather Engine.

Deterministic, reproducible daily weather for the regions of a persistent
tabletop campaign.
"""

from campaign_weather.weather import (
    WeatherCondition,
    WeatherResult,
    WeatherSettings,
    WeatherCache,
    get_weather_for_date,
    get_weather_update,
    get_weekly_forecast,
    get_regional_weather_update,
    get_regional_weekly_forecast,
)
from campaign_weather.regions import (
    ConfigurationError,
    RegionDefinition,
    SeasonalWeatherConfig,
)
from campaign_weather.observability import RunLog

__version__ = "1.0.0"

__all__ = [
    "WeatherCondition",
    "WeatherResult",
    "WeatherSettings",
    "WeatherCache",
    "get_weather_for_date",
    "get_weather_update",
    "get_weekly_forecast",
    "get_regional_weather_update",
    "get_regional_weekly_forecast",
    "ConfigurationError",
    "RegionDefinition",
    "SeasonalWeatherConfig",
    "RunLog",
]
