"""
Weather Pattern Resolver.

Turns an epoch position into the condition shown on a day:

1. The epoch's base weather is a weighted roll over the season table.
2. The weather in force at the end of the previous epoch is found by
   walking forward from a fixed anchor epoch with known weather.
3. If the change from that weather to the base needs intermediate days, a
   transition path is chosen and its steps are shown on the first days of
   the epoch.

Every decision uses its own seeded generator, so the result depends only on
the day, the region, the season table and the transition graph.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from campaign_weather.observability.run_log import RunLog
from campaign_weather.weather.epochs import (
    EpochBoundaryIndex,
    EpochPosition,
    epoch_length,
    locate_epoch,
)
from campaign_weather.weather.seeded_rng import (
    SeededRandom,
    epoch_base_weather_seed,
    epoch_length_seed,
    hash_region,
    region_offset,
    transition_path_seed,
)
from campaign_weather.weather.transitions import (
    DEFAULT_TRANSITION_GRAPH,
    TransitionGraph,
    TransitionPath,
)
from campaign_weather.weather.weather_types import WeatherCondition
from campaign_weather.weather.weighted_table import (
    WeightedEntry,
    normalize_table,
    roll_from_table,
)

logger = logging.getLogger(__name__)

# Epoch 5765 starts in early 2020; walks begin here with known weather
ANCHOR_EPOCH = 5765
ANCHOR_WEATHER = WeatherCondition.CLEAR_SKIES

SeasonTable = tuple[WeightedEntry, ...]


@dataclass(frozen=True)
class EpochResolution:
    """
    Trace of how a day's condition was derived.

    Attributes:
        region_id: Region identifier
        day: Days since 1970-01-01
        position: Epoch and day offset within it
        base_weather: Weighted roll for the epoch
        previous_weather: Weather in force at the end of the previous epoch
        path: Transition path in effect, None for a direct change
        condition: Condition shown on the day
    """

    region_id: str
    day: int
    position: EpochPosition
    base_weather: WeatherCondition
    previous_weather: WeatherCondition
    path: Optional[TransitionPath]
    condition: WeatherCondition

    @property
    def epoch_number(self) -> int:
        return self.position.epoch_number

    @property
    def day_in_epoch(self) -> int:
        return self.position.day_in_epoch

    @property
    def in_transition(self) -> bool:
        """True while the day shows an intermediate path step."""
        return self.path is not None and self.day_in_epoch < len(self.path)


class WeatherCache:
    """
    Optional memoization for epoch boundaries and epoch end states.

    Entries are write-once and derived purely from their keys, so a cache
    can be shared between threads and dropped at any time without changing
    any result.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._boundaries: dict[str, EpochBoundaryIndex] = {}
        self._end_states: dict[tuple, WeatherCondition] = {}
        self.hits = 0
        self.misses = 0

    def boundaries(self, region_id: str) -> EpochBoundaryIndex:
        """Get (creating if needed) the boundary index for a region."""
        with self._lock:
            index = self._boundaries.get(region_id)
            if index is None:
                index = EpochBoundaryIndex(region_id)
                self._boundaries[region_id] = index
            return index

    def get_end_state(self, key: tuple) -> Optional[WeatherCondition]:
        """Look up a memoized end state."""
        with self._lock:
            value = self._end_states.get(key)
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
            return value

    def store_end_state(self, key: tuple, value: WeatherCondition) -> None:
        """Memoize an end state; an existing entry is kept."""
        with self._lock:
            self._end_states.setdefault(key, value)

    def clear(self) -> None:
        """Drop all memoized data."""
        with self._lock:
            self._boundaries.clear()
            self._end_states.clear()
            self.hits = 0
            self.misses = 0
        logger.info("Weather cache cleared")

    def __len__(self) -> int:
        return len(self._end_states)


def _as_table(conditions: Sequence[Any]) -> SeasonTable:
    """Normalize a season table with every result as a WeatherCondition."""
    table = tuple(
        WeightedEntry(WeatherCondition.from_name(entry.result), entry.weight)
        for entry in normalize_table(conditions)
    )
    if not table:
        raise ValueError("Season table has no conditions")
    return table


def epoch_base_weather(
    epoch_number: int,
    conditions: Sequence[Any],
    region_id: str,
) -> WeatherCondition:
    """
    Roll the base weather of an epoch on a season table.

    Args:
        epoch_number: Epoch index
        conditions: Season table entries (see normalize_entry)
        region_id: Region identifier

    Returns:
        The rolled condition

    Raises:
        ValueError: If the table is empty or names an unknown condition
    """
    rng = SeededRandom(epoch_base_weather_seed(epoch_number, hash_region(region_id)))
    return roll_from_table(rng, _as_table(conditions))


def _end_of_epoch(
    previous: WeatherCondition,
    epoch_number: int,
    table: SeasonTable,
    region_id: str,
    graph: TransitionGraph,
) -> WeatherCondition:
    """Weather on the last day of an epoch given the weather before it."""
    offset = region_offset(region_id)
    length = epoch_length(epoch_number, offset)
    base = epoch_base_weather(epoch_number, table, region_id)
    path = graph.select_path(SeededRandom(transition_path_seed(epoch_number, offset)), previous, base)
    if path is not None and length - 1 < len(path):
        return path[length - 1]
    return base


def effective_epoch_end_weather(
    epoch_number: int,
    conditions: Sequence[Any],
    region_id: str,
    graph: TransitionGraph = DEFAULT_TRANSITION_GRAPH,
    anchor_epoch: int = ANCHOR_EPOCH,
    anchor_weather: WeatherCondition = ANCHOR_WEATHER,
    cache: Optional[WeatherCache] = None,
) -> WeatherCondition:
    """
    Weather actually in force on the last day of an epoch.

    Walks forward from the anchor epoch, carrying each epoch's end state
    into the next. An epoch whose transition path is longer than the epoch
    ends on an intermediate step, not on its base weather. Epochs before
    the anchor end on the anchor weather.

    Every step of the walk rolls on the same season table.

    Args:
        epoch_number: Epoch whose end state is wanted
        conditions: Season table entries
        region_id: Region identifier
        graph: Transition graph
        anchor_epoch: First epoch of the walk
        anchor_weather: Weather in force before the anchor epoch
        cache: Optional memoization of end states

    Returns:
        The effective end-of-epoch condition
    """
    if epoch_number < anchor_epoch:
        return anchor_weather

    table = _as_table(conditions)
    base_key = (region_id, table, graph, anchor_epoch, anchor_weather)

    start = anchor_epoch
    weather = anchor_weather
    if cache is not None:
        for number in range(epoch_number, anchor_epoch - 1, -1):
            known = cache.get_end_state(base_key + (number,))
            if known is not None:
                if number == epoch_number:
                    return known
                start, weather = number + 1, known
                break

    for number in range(start, epoch_number + 1):
        weather = _end_of_epoch(weather, number, table, region_id, graph)
        if cache is not None:
            cache.store_end_state(base_key + (number,), weather)

    logger.debug(
        f"End of epoch {epoch_number} for {region_id!r}: {weather.value} "
        f"(walked {epoch_number - start + 1} epochs)"
    )
    return weather


def condition_for_epoch_day(
    previous: WeatherCondition,
    base: WeatherCondition,
    day_in_epoch: int,
    epoch_number: int,
    offset: int,
    graph: TransitionGraph = DEFAULT_TRANSITION_GRAPH,
) -> tuple[WeatherCondition, Optional[TransitionPath]]:
    """
    Condition on a given day of an epoch.

    Args:
        previous: Weather in force at the end of the previous epoch
        base: The epoch's base weather
        day_in_epoch: 0-indexed day within the epoch
        epoch_number: Epoch index (seeds the path choice)
        offset: Region offset (seeds the path choice)
        graph: Transition graph

    Returns:
        (condition, path) where path is None for a direct change
    """
    rng = SeededRandom(transition_path_seed(epoch_number, offset))
    path = graph.select_path(rng, previous, base)
    if path is not None and day_in_epoch < len(path):
        return path[day_in_epoch], path
    return base, path


def resolve_pattern(
    day: int,
    conditions: Sequence[Any],
    region_id: str,
    graph: TransitionGraph = DEFAULT_TRANSITION_GRAPH,
    anchor_epoch: int = ANCHOR_EPOCH,
    anchor_weather: WeatherCondition = ANCHOR_WEATHER,
    cache: Optional[WeatherCache] = None,
    run_log: Optional[RunLog] = None,
    table_name: str = "",
) -> EpochResolution:
    """
    Resolve the condition for a day with epoch continuity and transitions.

    Args:
        day: Days since 1970-01-01
        conditions: Season table entries for the day's season
        region_id: Region identifier
        graph: Transition graph
        anchor_epoch: First epoch of the continuity walk
        anchor_weather: Weather in force before the anchor epoch
        cache: Optional memoization
        run_log: Optional run log receiving the decisions for this day
        table_name: Label for the season table in the run log

    Returns:
        EpochResolution with the condition and how it was reached
    """
    table = _as_table(conditions)
    if cache is not None:
        position = cache.boundaries(region_id).locate(day)
    else:
        position = locate_epoch(day, region_id)

    number = position.epoch_number
    offset = region_offset(region_id)
    base = epoch_base_weather(number, table, region_id)
    previous = effective_epoch_end_weather(
        number - 1,
        table,
        region_id,
        graph=graph,
        anchor_epoch=anchor_epoch,
        anchor_weather=anchor_weather,
        cache=cache,
    )
    condition, path = condition_for_epoch_day(
        previous, base, position.day_in_epoch, number, offset, graph
    )

    logger.debug(
        f"{region_id!r} day {day}: epoch {number} day {position.day_in_epoch}, "
        f"{previous.value} -> {base.value}, showing {condition.value}"
    )

    if run_log is not None:
        context = {"region_id": region_id, "day": day, "epoch_number": number}
        length_seed = epoch_length_seed(number, offset)
        run_log.log_roll(length_seed, "epoch length", SeededRandom(length_seed).next(), context)
        base_seed = epoch_base_weather_seed(number, hash_region(region_id))
        run_log.log_roll(base_seed, "base weather", SeededRandom(base_seed).next(), context)
        run_log.log_table_lookup(table_name, region_id, number, base.value, context)
        if previous != base:
            run_log.log_transition(
                previous.value,
                base.value,
                [step.value for step in path] if path else [],
                position.day_in_epoch,
                condition.value,
                context,
            )
            if path:
                path_seed = transition_path_seed(number, offset)
                run_log.log_roll(path_seed, "transition path", SeededRandom(path_seed).next(), context)

    return EpochResolution(
        region_id=region_id,
        day=day,
        position=position,
        base_weather=base,
        previous_weather=previous,
        path=path,
        condition=condition,
    )
