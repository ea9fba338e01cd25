"""
Region Weather Configuration.

In-memory model of the per-region seasonal weather tables: parsing from the
JSON-shaped mappings used in region files, validation with readable error
lists, and a starter template for new regions. Reading the files themselves
is left to the caller.

Region data shape:

    {
        "name": "Patlania Southern Point",
        "seasonalWeather": {
            "spring": {"conditions": [{"result": "Clear Skies", "weight": 4}, "Storm"]},
            "summer": {...},
            "autumn": {...},
            "winter": {...},
        },
    }
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from campaign_weather.weather.calendar import Season
from campaign_weather.weather.weather_types import ALL_WEATHER_TYPES, WeatherCondition
from campaign_weather.weather.weighted_table import WeightedEntry, normalize_entry

logger = logging.getLogger(__name__)

REQUIRED_SEASONS: tuple[Season, ...] = tuple(Season)

SeasonTable = tuple[WeightedEntry, ...]


class ConfigurationError(Exception):
    """Raised when a region's weather configuration cannot be used."""

    def __init__(
        self,
        message: str,
        region_id: Optional[str] = None,
        season: Optional[Season] = None,
    ):
        self.region_id = region_id
        self.season = season
        super().__init__(message)


def _describe(region_id: Optional[str], season: Optional[Season]) -> str:
    where = f"Region '{region_id}'" if region_id is not None else "Weather config"
    if season is not None:
        where += f" season '{season.value}'"
    return where


def _season_conditions(season_data: Any) -> Any:
    """Raw condition list of a season: {"conditions": [...]} or a bare list."""
    if isinstance(season_data, Mapping):
        return season_data.get("conditions")
    return season_data


def parse_conditions(
    raw: Any,
    region_id: Optional[str] = None,
    season: Optional[Season] = None,
) -> SeasonTable:
    """
    Parse one season's condition list into weighted entries.

    Entries may be condition names ("Fog"), mappings with "result" (or
    "condition") and an optional "weight", or (condition, weight) pairs.
    Order is preserved.

    Raises:
        ConfigurationError: If the list is missing or empty, names an
            unknown condition, or has a non-positive weight
    """
    where = _describe(region_id, season)
    if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
        raise ConfigurationError(
            f"{where} must define a 'conditions' array", region_id, season
        )
    if not raw:
        raise ConfigurationError(
            f"{where} conditions cannot be empty", region_id, season
        )

    table = []
    for position, item in enumerate(raw):
        try:
            entry = normalize_entry(item)
        except KeyError:
            raise ConfigurationError(
                f"{where} entry {position} has no 'result'", region_id, season
            ) from None

        condition = entry.result
        if not isinstance(condition, WeatherCondition):
            try:
                condition = WeatherCondition.from_name(str(condition))
            except ValueError:
                raise ConfigurationError(
                    f"{where} references unknown condition: '{entry.result}'",
                    region_id,
                    season,
                ) from None

        weight = entry.weight
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight <= 0:
            raise ConfigurationError(
                f"{where} condition '{condition.value}' has invalid weight: {weight!r}",
                region_id,
                season,
            )
        table.append(WeightedEntry(condition, weight))

    return tuple(table)


@dataclass
class SeasonalWeatherConfig:
    """
    A region's weighted condition tables, one per season.

    Seasons may be missing; asking for a missing season raises
    ConfigurationError at lookup time.
    """

    seasons: dict[Season, SeasonTable] = field(default_factory=dict)
    region_id: Optional[str] = None

    def has_season(self, season: Season) -> bool:
        return season in self.seasons

    def conditions_for(self, season: Season) -> SeasonTable:
        """
        Get the condition table for a season.

        Raises:
            ConfigurationError: If the season has no table
        """
        table = self.seasons.get(season)
        if not table:
            raise ConfigurationError(
                f"No weather data for season '{season.value}'",
                region_id=self.region_id,
                season=season,
            )
        return table

    def to_dict(self) -> dict[str, Any]:
        return {
            season.value: {
                "conditions": [
                    {"result": entry.result.value, "weight": entry.weight}
                    for entry in table
                ]
            }
            for season, table in self.seasons.items()
        }

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], region_id: Optional[str] = None
    ) -> "SeasonalWeatherConfig":
        """
        Parse {season: {"conditions": [...]}} (a bare list per season is
        also accepted). Unknown season keys are skipped with a warning.
        """
        seasons: dict[Season, SeasonTable] = {}
        for key, season_data in data.items():
            try:
                season = Season(key)
            except ValueError:
                logger.warning(f"{_describe(region_id, None)} has unknown season key {key!r}, skipped")
                continue

            seasons[season] = parse_conditions(_season_conditions(season_data), region_id, season)

        return cls(seasons=seasons, region_id=region_id)


@dataclass
class RegionDefinition:
    """A named region with its seasonal weather."""

    id: str
    name: str
    seasonal_weather: SeasonalWeatherConfig

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "seasonalWeather": self.seasonal_weather.to_dict(),
        }

    @classmethod
    def from_dict(cls, region_id: str, data: Mapping[str, Any]) -> "RegionDefinition":
        """
        Build a region from its definition mapping.

        Raises:
            ConfigurationError: If the definition fails validation
        """
        errors = validate_region_definition(region_id, data)
        if errors:
            raise ConfigurationError("; ".join(errors), region_id=region_id)

        return cls(
            id=region_id,
            name=data["name"],
            seasonal_weather=SeasonalWeatherConfig.from_dict(
                data["seasonalWeather"], region_id=region_id
            ),
        )


def regions_from_dict(data: Mapping[str, Any]) -> dict[str, RegionDefinition]:
    """
    Build every region of a {"regions": {id: definition}} document.

    Raises:
        ConfigurationError: If any region is invalid
    """
    regions = {
        region_id: RegionDefinition.from_dict(region_id, region_data)
        for region_id, region_data in (data.get("regions") or {}).items()
    }
    logger.info(f"Loaded {len(regions)} region definitions")
    return regions


# =============================================================================
# VALIDATION
# =============================================================================


def validate_region_definition(region_id: str, data: Mapping[str, Any]) -> list[str]:
    """
    Validate a region definition without raising.

    Checks the name, that all four seasons are present with a non-empty
    'conditions' array (or a bare list) of known conditions and positive
    weights, and that any 'mechanicalImpacts' keys refer to conditions
    listed for the season.

    Args:
        region_id: Region identifier (used in messages)
        data: Region definition mapping

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if not data.get("name"):
        errors.append(f"Region '{region_id}' missing required field: name")

    seasonal = data.get("seasonalWeather")
    if not seasonal:
        errors.append(f"Region '{region_id}' missing required field: seasonalWeather")
        return errors

    for season in REQUIRED_SEASONS:
        if season.value not in seasonal:
            errors.append(f"Region '{region_id}' missing season: {season.value}")
            continue

        season_data = seasonal[season.value]
        raw = _season_conditions(season_data)
        table: SeasonTable = ()
        try:
            table = parse_conditions(raw, region_id, season)
        except ConfigurationError as e:
            errors.append(str(e))

        impacts = season_data.get("mechanicalImpacts") if isinstance(season_data, Mapping) else None
        if impacts:
            if not isinstance(impacts, Mapping):
                errors.append(
                    f"Region '{region_id}' season '{season.value}' "
                    f"mechanicalImpacts must be an object"
                )
            else:
                known = {entry.result.value for entry in table}
                for condition in impacts:
                    if condition not in known:
                        errors.append(
                            f"Region '{region_id}' season '{season.value}' mechanicalImpacts "
                            f"references unknown condition: '{condition}'"
                        )

    return errors


def validate_all_regions(regions: Optional[Mapping[str, Any]]) -> list[str]:
    """
    Validate every region in a {region_id: definition} mapping.

    Returns:
        All error messages, in region order
    """
    if not regions:
        return ["No regions configuration found"]

    all_errors = []
    for region_id, region_data in regions.items():
        all_errors.extend(validate_region_definition(region_id, region_data))
    return all_errors


def create_region_template(region_id: str, name: str) -> dict[str, Any]:
    """
    Starter definition for a new region.

    Every condition appears in every season with a plausible weighting;
    edit the weights to give the region its character.
    """
    logger.debug(f"Creating weather template for region {region_id!r}")
    weights = {
        Season.SPRING: {"Clear Skies": 4, "Light Rain": 3, "Heavy Rain": 2, "Storm": 1, "Fog": 1},
        Season.SUMMER: {"Clear Skies": 4, "Hot": 3, "Heatwave": 1, "Light Rain": 1, "Storm": 1},
        Season.AUTUMN: {"Clear Skies": 3, "Light Rain": 3, "Heavy Rain": 2, "Fog": 2, "Storm": 1},
        Season.WINTER: {"Snow": 4, "Clear Skies": 2, "Fog": 2, "Blizzard": 1},
    }
    return {
        "name": name,
        "seasonalWeather": {
            season.value: {
                "conditions": [
                    {"result": condition, "weight": weight}
                    for condition, weight in table.items()
                ]
            }
            for season, table in weights.items()
        },
    }


def known_condition_names() -> list[str]:
    """Display names of every condition accepted in a region file."""
    return [condition.value for condition in ALL_WEATHER_TYPES]
