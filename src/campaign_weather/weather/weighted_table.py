"""
Weighted roll tables.

A table is an ordered list of results with relative weights. Order matters:
it fixes both the probability mass assigned to each draw and which entry
wins on ties.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from campaign_weather.weather.seeded_rng import SeededRandom

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeightedEntry:
    """A single weighted table entry."""

    result: Any
    weight: float = 1


def normalize_entry(entry: Any) -> WeightedEntry:
    """
    Coerce a raw table entry into a WeightedEntry.

    Accepts a WeightedEntry, a mapping with "result" (or "condition") and an
    optional "weight", a (result, weight) pair, or a bare result with the
    default weight of 1.
    """
    if isinstance(entry, WeightedEntry):
        return entry
    if isinstance(entry, Mapping):
        result = entry["result"] if "result" in entry else entry["condition"]
        weight = entry.get("weight")
        return WeightedEntry(result, 1 if weight is None else weight)
    if isinstance(entry, tuple) and len(entry) == 2:
        return WeightedEntry(entry[0], entry[1])
    return WeightedEntry(entry)


def normalize_table(entries: Iterable[Any]) -> tuple[WeightedEntry, ...]:
    """Normalize every entry of a table, preserving order."""
    return tuple(normalize_entry(e) for e in entries)


def roll_from_table(rng: SeededRandom, entries: Sequence[Any]) -> Optional[Any]:
    """
    Pick one result from a weighted table using a single draw.

    The draw is scaled by the total weight, then entries are walked in order
    subtracting each weight until the remainder falls below the current
    entry's weight.

    Args:
        rng: Generator to draw from (one value is consumed)
        entries: Ordered table entries (see normalize_entry)

    Returns:
        The selected result. If rounding walks past the end, the last entry;
        for an empty table, None.
    """
    table = normalize_table(entries)
    if not table:
        logger.warning("Roll on empty weighted table, no result")
        return None

    # Accumulate weights in table order
    total_weight = 0
    for entry in table:
        total_weight += entry.weight

    roll = rng.next() * total_weight
    for entry in table:
        if roll < entry.weight:
            return entry.result
        roll -= entry.weight

    return table[-1].result
