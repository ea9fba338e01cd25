"""
Weather Transition Graph.

Some weather changes are too abrupt to happen overnight (a heatwave does not
turn into a blizzard). The transition graph registers, for such pairs, one or
more paths of intermediate conditions shown on the first days of the new
spell. Pairs without a registered path change directly.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from campaign_weather.weather.seeded_rng import SeededRandom
from campaign_weather.weather.weather_types import WeatherCondition

TransitionPath = tuple[WeatherCondition, ...]


class TransitionGraph:
    """
    Immutable adjacency map from (from, to) condition pairs to alternative
    transition paths.

    Usage:
        graph = TransitionGraph.from_nested({
            WeatherCondition.HOT: {WeatherCondition.BLIZZARD: [[SNOW, CLEAR_SKIES]]},
        })
        path = graph.select_path(rng, WeatherCondition.HOT, WeatherCondition.BLIZZARD)
    """

    def __init__(
        self,
        edges: Mapping[tuple[WeatherCondition, WeatherCondition], Iterable[Iterable[WeatherCondition]]],
    ):
        built: dict[tuple[WeatherCondition, WeatherCondition], tuple[TransitionPath, ...]] = {}
        for (source, target), paths in edges.items():
            if source == target:
                raise ValueError(f"Self transition registered for {source.value}")
            alternatives = tuple(tuple(path) for path in paths)
            if not alternatives:
                continue
            for path in alternatives:
                if not path:
                    raise ValueError(
                        f"Empty transition path for {source.value} -> {target.value}"
                    )
            built[(source, target)] = alternatives
        self._edges = MappingProxyType(built)

    @classmethod
    def from_nested(
        cls,
        table: Mapping[WeatherCondition, Mapping[WeatherCondition, Iterable[Iterable[WeatherCondition]]]],
    ) -> "TransitionGraph":
        """Build from a nested {from: {to: [path, ...]}} table."""
        return cls(
            {
                (source, target): paths
                for source, targets in table.items()
                for target, paths in targets.items()
            }
        )

    @property
    def edges(self) -> Mapping[tuple[WeatherCondition, WeatherCondition], tuple[TransitionPath, ...]]:
        """Read-only view of all registered edges."""
        return self._edges

    def paths(
        self, source: WeatherCondition, target: WeatherCondition
    ) -> tuple[TransitionPath, ...]:
        """Get the alternative paths for a pair (empty if direct)."""
        return self._edges.get((source, target), ())

    def requires_transition(self, source: WeatherCondition, target: WeatherCondition) -> bool:
        """Check if moving from source to target needs intermediate days."""
        return source != target and (source, target) in self._edges

    def max_path_length(self) -> int:
        """Length of the longest registered path."""
        return max(
            (len(path) for paths in self._edges.values() for path in paths),
            default=0,
        )

    def select_path(
        self,
        rng: SeededRandom,
        source: WeatherCondition,
        target: WeatherCondition,
    ) -> Optional[TransitionPath]:
        """
        Choose one of the registered paths uniformly.

        Returns:
            The chosen path, or None when the change is direct (same
            condition, or no path registered). No value is drawn from rng
            in that case.
        """
        if source == target:
            return None

        alternatives = self._edges.get((source, target))
        if not alternatives:
            return None

        index = int(rng.next() * len(alternatives))
        return alternatives[index]

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, pair: object) -> bool:
        return pair in self._edges


# =============================================================================
# DEFAULT TRANSITION PATHS
# =============================================================================

CLEAR_SKIES = WeatherCondition.CLEAR_SKIES
LIGHT_RAIN = WeatherCondition.LIGHT_RAIN
HEAVY_RAIN = WeatherCondition.HEAVY_RAIN
STORM = WeatherCondition.STORM
HOT = WeatherCondition.HOT
HEATWAVE = WeatherCondition.HEATWAVE
SNOW = WeatherCondition.SNOW
BLIZZARD = WeatherCondition.BLIZZARD
FOG = WeatherCondition.FOG

DEFAULT_TRANSITION_GRAPH = TransitionGraph.from_nested(
    {
        HOT: {
            SNOW: [
                [CLEAR_SKIES, LIGHT_RAIN],
                [LIGHT_RAIN, LIGHT_RAIN],
            ],
            BLIZZARD: [
                [CLEAR_SKIES, LIGHT_RAIN, SNOW],
                [LIGHT_RAIN, SNOW, SNOW],
            ],
            FOG: [[CLEAR_SKIES]],
        },
        HEATWAVE: {
            SNOW: [
                [HOT, CLEAR_SKIES, LIGHT_RAIN],
                [HOT, LIGHT_RAIN, LIGHT_RAIN],
            ],
            BLIZZARD: [
                [HOT, CLEAR_SKIES, LIGHT_RAIN, SNOW],
                [HOT, LIGHT_RAIN, SNOW, SNOW],
            ],
            FOG: [
                [HOT, CLEAR_SKIES],
                [LIGHT_RAIN, CLEAR_SKIES],
            ],
            CLEAR_SKIES: [[HOT]],
        },
        SNOW: {
            HOT: [[CLEAR_SKIES], [LIGHT_RAIN]],
            HEATWAVE: [
                [CLEAR_SKIES, HOT],
                [LIGHT_RAIN, CLEAR_SKIES, HOT],
            ],
            HEAVY_RAIN: [[LIGHT_RAIN]],
            STORM: [[LIGHT_RAIN, HEAVY_RAIN]],
        },
        BLIZZARD: {
            HOT: [
                [SNOW, CLEAR_SKIES],
                [FOG, CLEAR_SKIES],
            ],
            HEATWAVE: [
                [SNOW, CLEAR_SKIES, HOT],
                [FOG, CLEAR_SKIES, HOT],
            ],
            CLEAR_SKIES: [[SNOW], [FOG]],
            HEAVY_RAIN: [[LIGHT_RAIN], [SNOW, LIGHT_RAIN]],
            STORM: [
                [LIGHT_RAIN, HEAVY_RAIN],
                [FOG, LIGHT_RAIN, HEAVY_RAIN],
            ],
        },
        STORM: {
            HOT: [[CLEAR_SKIES], [FOG, CLEAR_SKIES]],
            HEATWAVE: [
                [CLEAR_SKIES, HOT],
                [FOG, CLEAR_SKIES, HOT],
            ],
            SNOW: [[FOG], [HEAVY_RAIN, LIGHT_RAIN]],
            BLIZZARD: [
                [FOG, SNOW],
                [HEAVY_RAIN, LIGHT_RAIN, SNOW],
            ],
        },
        HEAVY_RAIN: {
            CLEAR_SKIES: [[LIGHT_RAIN]],
            HOT: [
                [LIGHT_RAIN, CLEAR_SKIES],
                [FOG, CLEAR_SKIES],
            ],
            HEATWAVE: [
                [LIGHT_RAIN, CLEAR_SKIES, HOT],
                [FOG, CLEAR_SKIES, HOT],
            ],
            SNOW: [[LIGHT_RAIN]],
            BLIZZARD: [
                [LIGHT_RAIN, SNOW],
                [FOG, SNOW],
            ],
        },
        FOG: {
            HOT: [[CLEAR_SKIES]],
            HEATWAVE: [[CLEAR_SKIES, HOT]],
            HEAVY_RAIN: [[LIGHT_RAIN]],
            STORM: [[LIGHT_RAIN, HEAVY_RAIN]],
            BLIZZARD: [[SNOW]],
        },
        LIGHT_RAIN: {
            HOT: [[CLEAR_SKIES]],
            HEATWAVE: [[CLEAR_SKIES, HOT]],
            STORM: [[HEAVY_RAIN]],
            BLIZZARD: [[SNOW]],
        },
        CLEAR_SKIES: {
            HEATWAVE: [[HOT]],
            BLIZZARD: [[SNOW], [FOG, SNOW]],
            HEAVY_RAIN: [[LIGHT_RAIN]],
        },
    }
)
