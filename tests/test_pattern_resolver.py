"""
Tests for the weather pattern resolver: base rolls, the continuity walk,
transition smoothing and memoization.
"""

import threading
from datetime import date

import pytest

from campaign_weather.weather.calendar import Season, day_number
from campaign_weather.weather.pattern_resolver import (
    ANCHOR_EPOCH,
    ANCHOR_WEATHER,
    condition_for_epoch_day,
    effective_epoch_end_weather,
    epoch_base_weather,
    resolve_pattern,
)
from campaign_weather.weather.transitions import TransitionGraph
from campaign_weather.weather.weather_types import WeatherCondition as W


PATLANIA = "Patlania Southern Point"
PATLANIA_OFFSET = 710


@pytest.fixture
def winter(seasonal_config):
    return seasonal_config.conditions_for(Season.WINTER)


@pytest.fixture
def summer(seasonal_config):
    return seasonal_config.conditions_for(Season.SUMMER)


class TestEpochBaseWeather:
    """Per-epoch weighted rolls."""

    @pytest.mark.parametrize(
        "epoch_number,expected",
        [
            (5765, W.SNOW),
            (5766, W.CLEAR_SKIES),
            (5767, W.FOG),
            (5768, W.BLIZZARD),
            (5842, W.BLIZZARD),
            (5846, W.FOG),
            (5847, W.SNOW),
            (5848, W.CLEAR_SKIES),
            (5849, W.BLIZZARD),
        ],
    )
    def test_winter_bases(self, winter, epoch_number, expected):
        assert epoch_base_weather(epoch_number, winter, PATLANIA) == expected

    @pytest.mark.parametrize(
        "epoch_number,expected",
        [
            (5893, W.HEATWAVE),
            (5894, W.CLEAR_SKIES),
            (5895, W.STORM),
            (5896, W.HOT),
            (5897, W.CLEAR_SKIES),
        ],
    )
    def test_summer_bases(self, summer, epoch_number, expected):
        assert epoch_base_weather(epoch_number, summer, PATLANIA) == expected

    def test_raw_entries_accepted(self, seasonal_data):
        raw = seasonal_data["winter"]["conditions"]
        base = epoch_base_weather(5765, raw, PATLANIA)
        assert base == W.SNOW
        assert type(base) is W

    def test_condition_names_become_conditions(self):
        assert type(epoch_base_weather(5765, ["Fog"], "x")) is W

    def test_unknown_name_rejected(self):
        with pytest.raises(ValueError):
            epoch_base_weather(5765, ["Sandstorm"], PATLANIA)

    def test_empty_table_rejected(self):
        with pytest.raises(ValueError):
            epoch_base_weather(5765, [], PATLANIA)


class TestEffectiveEpochEndWeather:
    """The continuity walk from the anchor epoch."""

    def test_anchor_constants(self):
        assert ANCHOR_EPOCH == 5765
        assert ANCHOR_WEATHER == W.CLEAR_SKIES

    @pytest.mark.parametrize(
        "epoch_number,expected",
        [
            (5765, W.SNOW),
            (5766, W.CLEAR_SKIES),
            (5767, W.FOG),
            (5768, W.BLIZZARD),
            (5842, W.BLIZZARD),
            (5843, W.BLIZZARD),
            (5846, W.FOG),
            (5847, W.SNOW),
            (5848, W.CLEAR_SKIES),
            (5849, W.BLIZZARD),
            (5850, W.FOG),
        ],
    )
    def test_winter_end_states(self, winter, epoch_number, expected):
        assert effective_epoch_end_weather(epoch_number, winter, PATLANIA) == expected

    @pytest.mark.parametrize(
        "epoch_number,expected",
        [
            (5893, W.HEATWAVE),
            (5894, W.CLEAR_SKIES),
            (5895, W.STORM),
            (5896, W.HOT),
            (5897, W.CLEAR_SKIES),
            (5898, W.HOT),
        ],
    )
    def test_summer_end_states(self, summer, epoch_number, expected):
        assert effective_epoch_end_weather(epoch_number, summer, PATLANIA) == expected

    def test_before_anchor_is_anchor_weather(self, winter):
        assert effective_epoch_end_weather(ANCHOR_EPOCH - 1, winter, PATLANIA) == W.CLEAR_SKIES
        assert effective_epoch_end_weather(10, winter, PATLANIA) == W.CLEAR_SKIES
        assert effective_epoch_end_weather(-4, winter, PATLANIA) == W.CLEAR_SKIES

    def test_custom_anchor(self, winter):
        assert (
            effective_epoch_end_weather(4000, winter, PATLANIA, anchor_weather=W.FOG)
            == W.FOG
        )

    def test_unfinished_path_carries_intermediate_step(self):
        """A path longer than the epoch ends the epoch mid-transition."""
        graph = TransitionGraph(
            {(W.CLEAR_SKIES, W.FOG): [[W.SNOW, W.SNOW, W.SNOW, W.SNOW, W.LIGHT_RAIN]]}
        )
        # Every epoch rolls Fog; the first one starts from Clear Skies
        end = effective_epoch_end_weather(5765, ["Fog"], PATLANIA, graph=graph)
        assert end == W.SNOW
        # From Snow the next epoch changes directly
        assert effective_epoch_end_weather(5766, ["Fog"], PATLANIA, graph=graph) == W.FOG


class TestConditionForEpochDay:
    """Transition steps shown on the first days of an epoch."""

    def test_hot_to_blizzard_scenario(self):
        graph = TransitionGraph.from_nested({W.HOT: {W.BLIZZARD: [[W.SNOW, W.CLEAR_SKIES]]}})
        shown = [
            condition_for_epoch_day(W.HOT, W.BLIZZARD, day, 5849, PATLANIA_OFFSET, graph)[0]
            for day in range(4)
        ]
        assert shown == [W.SNOW, W.CLEAR_SKIES, W.BLIZZARD, W.BLIZZARD]

    def test_direct_change(self):
        condition, path = condition_for_epoch_day(W.CLEAR_SKIES, W.FOG, 0, 5849, PATLANIA_OFFSET)
        assert condition == W.FOG
        assert path is None

    def test_default_graph_reference_path(self):
        condition, path = condition_for_epoch_day(
            W.CLEAR_SKIES, W.BLIZZARD, 1, 5849, PATLANIA_OFFSET
        )
        assert path == (W.FOG, W.SNOW)
        assert condition == W.SNOW


class TestResolvePattern:
    """End-to-end resolution of single days."""

    def test_transition_day(self, winter):
        resolution = resolve_pattern(day_number(date(2026, 1, 20)), winter, PATLANIA)
        assert resolution.epoch_number == 5849
        assert resolution.day_in_epoch == 0
        assert resolution.position.epoch_length == 5
        assert resolution.base_weather == W.BLIZZARD
        assert resolution.previous_weather == W.CLEAR_SKIES
        assert resolution.path == (W.FOG, W.SNOW)
        assert resolution.condition == W.FOG
        assert resolution.in_transition

    def test_after_transition(self, winter):
        resolution = resolve_pattern(day_number(date(2026, 1, 22)), winter, PATLANIA)
        assert resolution.day_in_epoch == 2
        assert resolution.condition == W.BLIZZARD
        assert not resolution.in_transition

    def test_continuity_within_epoch(self, winter):
        """Once any transition is finished, every day shows the base weather."""
        settled = {}
        start = day_number(date(2025, 12, 21))
        for day in range(start, start + 80):
            resolution = resolve_pattern(day, winter, PATLANIA)
            if resolution.path is None:
                assert resolution.condition == resolution.base_weather
            elif resolution.day_in_epoch < len(resolution.path):
                assert resolution.condition == resolution.path[resolution.day_in_epoch]
            else:
                assert resolution.condition == resolution.base_weather
            if not resolution.in_transition:
                settled.setdefault(resolution.epoch_number, set()).add(resolution.condition)
        assert settled
        assert all(len(conditions) == 1 for conditions in settled.values())

    def test_raw_table_matches_parsed(self, winter, seasonal_data):
        raw = seasonal_data["winter"]["conditions"]
        start = day_number(date(2026, 1, 15))
        for day in range(start, start + 10):
            assert resolve_pattern(day, raw, PATLANIA) == resolve_pattern(day, winter, PATLANIA)

    def test_condition_names_resolve(self):
        resolution = resolve_pattern(20000, ["Fog", "Snow"], PATLANIA)
        assert type(resolution.base_weather) is W
        assert type(resolution.condition) is W
        assert resolution.base_weather in (W.FOG, W.SNOW)

    def test_deterministic(self, summer):
        day = day_number(date(2026, 7, 5))
        assert resolve_pattern(day, summer, PATLANIA) == resolve_pattern(day, summer, PATLANIA)

    def test_run_log_records_decisions(self, winter, run_log):
        resolve_pattern(
            day_number(date(2026, 1, 20)), winter, PATLANIA, run_log=run_log, table_name="winter"
        )
        lookups = run_log.get_table_lookups()
        assert len(lookups) == 1
        assert lookups[0].table_id == "winter"
        assert lookups[0].result_text == "Blizzard"
        transitions = run_log.get_transitions()
        assert len(transitions) == 1
        assert transitions[0].path == ["Fog", "Snow"]
        assert transitions[0].condition == "Fog"
        purposes = [roll.purpose for roll in run_log.get_rolls()]
        assert purposes == ["epoch length", "base weather", "transition path"]


class TestWeatherCache:
    """Memoization never changes results."""

    def test_cached_matches_uncached(self, winter, weather_cache):
        start = day_number(date(2026, 1, 1))
        days = list(range(start, start + 40))
        # Out of order so lookups hit both extension and reuse paths
        for day in reversed(days):
            assert resolve_pattern(day, winter, PATLANIA, cache=weather_cache) == resolve_pattern(
                day, winter, PATLANIA
            )

    def test_end_states_are_reused(self, winter, weather_cache):
        effective_epoch_end_weather(5849, winter, PATLANIA, cache=weather_cache)
        stored = len(weather_cache)
        assert stored == 5849 - ANCHOR_EPOCH + 1
        hits = weather_cache.hits
        assert effective_epoch_end_weather(5849, winter, PATLANIA, cache=weather_cache) == W.BLIZZARD
        assert weather_cache.hits == hits + 1
        assert len(weather_cache) == stored

    def test_tables_do_not_share_entries(self, winter, summer, weather_cache):
        a = effective_epoch_end_weather(5896, winter, PATLANIA, cache=weather_cache)
        b = effective_epoch_end_weather(5896, summer, PATLANIA, cache=weather_cache)
        assert a == effective_epoch_end_weather(5896, winter, PATLANIA)
        assert b == W.HOT

    def test_clear(self, winter, weather_cache):
        resolve_pattern(day_number(date(2026, 1, 20)), winter, PATLANIA, cache=weather_cache)
        assert len(weather_cache) > 0
        weather_cache.clear()
        assert len(weather_cache) == 0
        assert weather_cache.hits == 0

    def test_counters_under_threads(self, weather_cache):
        weather_cache.store_end_state(("r", 1), W.FOG)

        def lookup():
            for i in range(500):
                weather_cache.get_end_state(("r", i % 2))

        threads = [threading.Thread(target=lookup) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert weather_cache.hits == 2000
        assert weather_cache.misses == 2000

    def test_boundaries_per_region(self, weather_cache):
        assert weather_cache.boundaries(PATLANIA) is weather_cache.boundaries(PATLANIA)
        assert weather_cache.boundaries(PATLANIA) is not weather_cache.boundaries("default")
