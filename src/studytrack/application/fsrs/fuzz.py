"""
Interval fuzzing.

Adds a small bounded random offset to scheduled intervals so items reviewed
together do not keep landing on the same day. The jitter curve is data
(`ranges`) and the random source is injectable for deterministic tests.
"""

import random
from collections.abc import Sequence

from studytrack.domain.constants import DEFAULT_FUZZ_RANGES, MIN_FUZZ_INTERVAL

from .memory_model import round_half_up


class IntervalFuzzer:
    """
    Jitters an interval within a window that widens with the interval.

    The half-width is 1 day plus `factor` per day of interval inside each
    `(start, end, factor)` range, so roughly +-15% for short intervals
    tapering to +-5% for long ones. Intervals under `min_interval` are
    returned unchanged.
    """

    def __init__(
        self,
        ranges: Sequence[tuple[float, float, float]] = DEFAULT_FUZZ_RANGES,
        rng: random.Random | None = None,
        min_interval: float = MIN_FUZZ_INTERVAL,
    ):
        self.ranges = tuple(ranges)
        self.min_interval = min_interval
        self._rng = rng or random.Random()

    def delta(self, interval: float) -> float:
        delta = 1.0
        for start, end, factor in self.ranges:
            delta += factor * max(min(interval, end) - start, 0.0)
        return delta

    def bounds(self, interval: int, max_interval: int) -> tuple[int, int]:
        """Inclusive (low, high) window the fuzzed interval is drawn from."""
        delta = self.delta(interval)
        low = max(2, int(round_half_up(interval - delta)))
        high = min(int(round_half_up(interval + delta)), max_interval)
        return min(low, high), high

    def fuzz(self, interval: int, max_interval: int) -> int:
        if interval < self.min_interval:
            return interval
        low, high = self.bounds(interval, max_interval)
        return self._rng.randint(low, high)
