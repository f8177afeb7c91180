"""Running first and second moments over values and sample ranges."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Moments:
    """Mean, standard deviation and number of values seen."""

    mean: float
    std: float
    count: int


@dataclass
class RunningStatistics:
    """Accumulates values one by one or from non-overlapping vector ranges."""

    name: str = ""
    max_ranges: int = 1000
    count: int = 0
    total: float = 0.0
    total_squares: float = 0.0
    minimum: float = 0.0
    min_index: int = 0
    maximum: float = 0.0
    max_index: int = 0
    ranges: list[tuple[int, int]] = field(default_factory=list)

    def add(self, value: float) -> None:
        """Add one value."""
        self.total += value
        self.total_squares += value * value
        if self.count == 0:
            self.maximum = self.minimum = value
            self.max_index = self.min_index = 0
        if self.maximum < value:
            self.maximum = value
            self.max_index = self.count
        if self.minimum > value:
            self.minimum = value
            self.min_index = self.count
        self.count += 1

    def clip_range(self, start: int, stop: int) -> tuple[int, int, bool]:
        """Shrink [start, stop) away from ranges already added.

        Returns the clipped bounds and whether anything is left.
        """
        for r_start, r_stop in self.ranges:
            if r_start < start < r_stop:
                start = r_stop
                if start >= stop:
                    stop = start
                    break
            if r_start < stop < r_stop:
                stop = r_start
                if start >= stop:
                    stop = start
                    break
        return start, stop, stop > start

    def add_range(
        self,
        vector: Sequence[float] | None,
        start: int,
        stop: int,
        to_energy: bool = False,
    ) -> None:
        """Add vector[start:stop], clipped against earlier ranges."""
        if vector is None or len(self.ranges) >= self.max_ranges:
            return
        start, stop, accepted = self.clip_range(start, stop)
        if not accepted:
            return
        self.ranges.append((start, stop))
        for value in vector[start:stop]:
            self.add(value * value if to_energy else value)

    def moments(self) -> Moments:
        """Mean and unbiased standard deviation of the values added."""
        mean = std = 0.0
        n = self.count
        if n > 0:
            mean = self.total / n
            if n > 1:
                mean_square = self.total_squares / n
                std = (n / (n - 1)) * (mean_square - mean * mean)
                if std > 0.0:
                    std = math.sqrt(std)
        return Moments(mean, std, n)