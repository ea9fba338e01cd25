"""
Region configuration for the campaign weather engine.
"""

from campaign_weather.regions.region_config import (
    ConfigurationError,
    SeasonalWeatherConfig,
    RegionDefinition,
    REQUIRED_SEASONS,
    parse_conditions,
    regions_from_dict,
    validate_region_definition,
    validate_all_regions,
    create_region_template,
    known_condition_names,
)

__all__ = [
    "ConfigurationError",
    "SeasonalWeatherConfig",
    "RegionDefinition",
    "REQUIRED_SEASONS",
    "parse_conditions",
    "regions_from_dict",
    "validate_region_definition",
    "validate_all_regions",
    "create_region_template",
    "known_condition_names",
]
