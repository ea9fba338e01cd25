"""
Pytest fixtures for the Campaign Weather test suite.

Provides a four-season region configuration whose expected weather was
computed independently, plus parsed config, region and run log fixtures.
"""

import pytest

from campaign_weather.observability.run_log import RunLog
from campaign_weather.regions.region_config import RegionDefinition, SeasonalWeatherConfig
from campaign_weather.weather.pattern_resolver import WeatherCache


PATLANIA = "Patlania Southern Point"


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================


def make_seasonal_data() -> dict:
    """Raw four-season table in region file format."""
    return {
        "spring": {
            "conditions": [
                {"result": "Clear Skies", "weight": 4},
                {"result": "Light Rain", "weight": 3},
                {"result": "Heavy Rain", "weight": 2},
                {"result": "Fog", "weight": 1},
                "Storm",
            ]
        },
        "summer": {
            "conditions": [
                {"result": "Clear Skies", "weight": 3},
                {"result": "Hot", "weight": 4},
                {"result": "Heatwave", "weight": 2},
                "Storm",
            ]
        },
        "autumn": {
            "conditions": [
                {"result": "Clear Skies", "weight": 3},
                {"result": "Light Rain", "weight": 3},
                {"result": "Heavy Rain", "weight": 2},
                {"result": "Fog", "weight": 2},
                "Storm",
            ]
        },
        "winter": {
            "conditions": [
                {"result": "Snow", "weight": 4},
                {"result": "Blizzard", "weight": 2},
                {"result": "Fog", "weight": 2},
                "Clear Skies",
            ]
        },
    }


@pytest.fixture
def seasonal_data():
    """Raw seasonal weather mapping."""
    return make_seasonal_data()


@pytest.fixture
def seasonal_config(seasonal_data):
    """Parsed seasonal weather configuration."""
    return SeasonalWeatherConfig.from_dict(seasonal_data, region_id=PATLANIA)


@pytest.fixture
def patlania(seasonal_data):
    """A fully defined region."""
    return RegionDefinition.from_dict(
        PATLANIA,
        {"name": "Patlania Southern Point", "seasonalWeather": seasonal_data},
    )


# =============================================================================
# COLLABORATOR FIXTURES
# =============================================================================


@pytest.fixture
def weather_cache():
    """A fresh weather cache."""
    return WeatherCache()


@pytest.fixture
def run_log():
    """A fresh run log."""
    return RunLog()
