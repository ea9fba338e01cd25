"""
Weather Epoch Scheduler.

Time is partitioned, per region, into contiguous spells ("epochs") of 2-5
days. Epoch 0 starts on 1970-01-01 (day 0); each epoch's length is a seeded
roll, so boundaries are re-derivable from the epoch number and region alone.
Epochs -1, -2, ... run backwards from day 0 so every day belongs to exactly
one epoch.
"""

import logging
import threading
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import Iterator

from campaign_weather.weather.seeded_rng import (
    SeededRandom,
    epoch_length_seed,
    region_offset,
)

logger = logging.getLogger(__name__)

MIN_EPOCH_LENGTH = 2
MAX_EPOCH_LENGTH = 5


class InvariantViolation(Exception):
    """Raised when the epoch scan passes its target day (an algorithm defect)."""

    def __init__(self, message: str, target_day: int, epoch_number: int, epoch_start: int):
        self.target_day = target_day
        self.epoch_number = epoch_number
        self.epoch_start = epoch_start
        super().__init__(message)


@dataclass(frozen=True)
class Epoch:
    """
    A weather spell.

    Attributes:
        epoch_number: Index on the region's timeline (0 starts at day 0)
        start_day: First day, as days since 1970-01-01
        length: Number of days (2-5)
    """

    epoch_number: int
    start_day: int
    length: int

    @property
    def end_day(self) -> int:
        """Last day of the epoch (inclusive)."""
        return self.start_day + self.length - 1

    def contains(self, day: int) -> bool:
        """Check if a day number falls inside this epoch."""
        return self.start_day <= day <= self.end_day


@dataclass(frozen=True)
class EpochPosition:
    """Where a day sits within its epoch."""

    epoch: Epoch
    day_in_epoch: int  # 0-indexed

    @property
    def epoch_number(self) -> int:
        return self.epoch.epoch_number

    @property
    def epoch_length(self) -> int:
        return self.epoch.length


def epoch_length(epoch_number: int, offset: int) -> int:
    """Roll the length (2-5 days) of an epoch for a region offset."""
    rng = SeededRandom(epoch_length_seed(epoch_number, offset))
    span = MAX_EPOCH_LENGTH - MIN_EPOCH_LENGTH + 1
    return MIN_EPOCH_LENGTH + int(rng.next() * span)


def _scan_to(day: int, offset: int) -> Epoch:
    """Walk epoch boundaries from day 0 until the epoch containing day."""
    number = 0
    start = 0

    if day < 0:
        # Step backwards: epoch -1 ends on day -1
        while start > day:
            number -= 1
            start -= epoch_length(number, offset)
        epoch = Epoch(number, start, epoch_length(number, offset))
        if not epoch.contains(day):
            raise InvariantViolation(
                f"Epoch calculation error: epoch {number} [{epoch.start_day}, "
                f"{epoch.end_day}] does not contain day {day}",
                target_day=day,
                epoch_number=number,
                epoch_start=start,
            )
        return epoch

    while True:
        length = epoch_length(number, offset)
        epoch = Epoch(number, start, length)
        if epoch.contains(day):
            return epoch
        if start > day:
            raise InvariantViolation(
                f"Epoch calculation error: epochStart {start} > targetDay {day}",
                target_day=day,
                epoch_number=number,
                epoch_start=start,
            )
        start += length
        number += 1


def locate_epoch(day: int, region_id: str) -> EpochPosition:
    """
    Find the epoch containing a day and the day's offset within it.

    Pure and unmemoized: boundaries are accumulated from day 0 on every
    call. Use EpochBoundaryIndex for repeated lookups.

    Args:
        day: Days since 1970-01-01
        region_id: Region identifier

    Returns:
        EpochPosition for the day

    Raises:
        InvariantViolation: If the scan overshoots the target day
    """
    epoch = _scan_to(day, region_offset(region_id))
    logger.debug(
        f"Day {day} in epoch {epoch.epoch_number} "
        f"(start {epoch.start_day}, length {epoch.length}) for {region_id!r}"
    )
    return EpochPosition(epoch=epoch, day_in_epoch=day - epoch.start_day)


def epoch_start_day(epoch_number: int, offset: int) -> int:
    """First day of an epoch, by summing lengths from epoch 0."""
    start = 0
    if epoch_number >= 0:
        for number in range(epoch_number):
            start += epoch_length(number, offset)
    else:
        for number in range(-1, epoch_number - 1, -1):
            start -= epoch_length(number, offset)
    return start


def iter_epochs(region_id: str, start_number: int = 0) -> Iterator[Epoch]:
    """
    Yield consecutive epochs of a region, starting at start_number.

    The iterator is infinite; slice it with itertools.islice.
    """
    offset = region_offset(region_id)
    number = start_number
    start = epoch_start_day(start_number, offset)
    while True:
        length = epoch_length(number, offset)
        yield Epoch(number, start, length)
        start += length
        number += 1


class EpochBoundaryIndex:
    """
    Memoized epoch boundaries for one region.

    Boundaries are appended as far as lookups require and never change, so
    answers are identical to locate_epoch.
    """

    def __init__(self, region_id: str):
        self.region_id = region_id
        self._offset = region_offset(region_id)
        self._lock = threading.Lock()
        # Start days of epochs 0, 1, 2, ...
        self._starts: list[int] = [0]
        # Negated start days of epochs -1, -2, ... (ascending)
        self._negated_back_starts: list[int] = []

    def _extend_forward(self, day: int) -> None:
        with self._lock:
            while self._starts[-1] <= day:
                number = len(self._starts) - 1
                self._starts.append(self._starts[-1] + epoch_length(number, self._offset))

    def _extend_backward(self, day: int) -> None:
        with self._lock:
            while not self._negated_back_starts or -self._negated_back_starts[-1] > day:
                number = -(len(self._negated_back_starts) + 1)
                previous = -self._negated_back_starts[-1] if self._negated_back_starts else 0
                start = previous - epoch_length(number, self._offset)
                self._negated_back_starts.append(-start)

    def epoch(self, epoch_number: int) -> Epoch:
        """Get an epoch by number."""
        length = epoch_length(epoch_number, self._offset)
        if epoch_number >= 0:
            while len(self._starts) <= epoch_number:
                self._extend_forward(self._starts[-1])
            return Epoch(epoch_number, self._starts[epoch_number], length)
        index = -epoch_number - 1
        while len(self._negated_back_starts) <= index:
            current = -self._negated_back_starts[-1] if self._negated_back_starts else 0
            self._extend_backward(current - 1)
        return Epoch(epoch_number, -self._negated_back_starts[index], length)

    def locate(self, day: int) -> EpochPosition:
        """Find the epoch containing a day (memoized locate_epoch)."""
        if day >= 0:
            self._extend_forward(day)
            number = bisect_right(self._starts, day) - 1
        else:
            self._extend_backward(day)
            number = -(bisect_left(self._negated_back_starts, -day) + 1)

        epoch = self.epoch(number)
        if not epoch.contains(day):
            raise InvariantViolation(
                f"Epoch index error: epoch {number} does not contain day {day}",
                target_day=day,
                epoch_number=number,
                epoch_start=epoch.start_day,
            )
        return EpochPosition(epoch=epoch, day_in_epoch=day - epoch.start_day)

    @property
    def known_epochs(self) -> int:
        """Number of epochs whose boundaries are cached."""
        return len(self._starts) - 1 + len(self._negated_back_starts)
