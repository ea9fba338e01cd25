"""
Seeded random source and seed derivation for campaign weather.

All weather randomness goes through SeededRandom so that the same date and
region always produce the same sequence of draws. The generator is Mulberry32
implemented with explicit 32-bit wraparound, so its output is bit-for-bit
identical to other implementations of the same mixing steps.
"""

from datetime import date

MASK_32 = 0xFFFFFFFF
TWO_POW_32 = 4294967296

# Seed multipliers, one per independent random decision
EPOCH_LENGTH_PRIME = 7919
EPOCH_BASE_WEATHER_PRIME = 31337
TRANSITION_PATH_PRIME = 54321

REGION_OFFSET_MODULUS = 1000


def _imul(a: int, b: int) -> int:
    """Multiply two 32-bit values keeping the low 32 bits."""
    return (a * b) & MASK_32


def to_int32(value: int) -> int:
    """Interpret the low 32 bits of value as a signed integer."""
    value &= MASK_32
    return value - TWO_POW_32 if value & 0x80000000 else value


class SeededRandom:
    """
    Deterministic Mulberry32 generator.

    Each call to next() advances the internal counter and returns a float in
    [0, 1). Instances are cheap; create one per purpose and never share them
    between unrelated decisions.

    Usage:
        rng = SeededRandom(epoch_length_seed(5800, 710))
        length = 2 + int(rng.next() * 4)
    """

    __slots__ = ("_state", "_draws")

    def __init__(self, seed: int):
        self._state = (seed & MASK_32) ^ 0xDEADBEEF
        self._draws = 0

    def next_uint32(self) -> int:
        """Advance the generator and return the raw unsigned 32-bit output."""
        self._state = (self._state + 0x7F4A7C15) & MASK_32
        a = self._state
        t = _imul(a ^ (a >> 13), 1 | a)
        t = ((t + _imul(t ^ (t >> 9), 61 | t)) & MASK_32) ^ t
        self._draws += 1
        return (t ^ (t >> 11)) & MASK_32

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        return self.next_uint32() / TWO_POW_32

    __call__ = next

    @property
    def draws(self) -> int:
        """Number of values drawn so far."""
        return self._draws


# =============================================================================
# SEED DERIVATION
# =============================================================================


def hash_region(region_id: str) -> int:
    """
    Hash a region identifier to a non-negative 32-bit value.

    Rolling hash over UTF-16 code units: hash = (hash << 5) - hash + code,
    wrapped to 32 bits. The signed result is made non-negative with abs(),
    so "Patlania Southern Point" always hashes to 1512526710. Order and case
    sensitive.
    """
    encoded = region_id.encode("utf-16-le")
    value = 0
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        value = ((value << 5) - value + code_unit) & MASK_32
    return abs(to_int32(value))


def region_offset(region_id: str) -> int:
    """Cheap per-region decorrelation offset in [0, 1000)."""
    return hash_region(region_id) % REGION_OFFSET_MODULUS


def direct_seed(day: date, region_id: str) -> int:
    """Seed for an independent single-day roll (no transition smoothing)."""
    return day.year * 10000 + day.month * 100 + day.day + region_offset(region_id)


def epoch_length_seed(epoch_number: int, offset: int) -> int:
    """Seed for the length roll of an epoch."""
    return epoch_number * EPOCH_LENGTH_PRIME + offset


def epoch_base_weather_seed(epoch_number: int, region_hash: int) -> int:
    """Seed for the base weather roll of an epoch."""
    return epoch_number * EPOCH_BASE_WEATHER_PRIME + region_hash


def transition_path_seed(epoch_number: int, offset: int) -> int:
    """Seed for choosing between alternative transition paths."""
    return epoch_number * TRANSITION_PATH_PRIME + offset
