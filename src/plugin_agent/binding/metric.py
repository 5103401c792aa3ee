"""
Metric accumulator.

A metric folds repeated samples into count/min/max/sum-of-squares between
two deliveries. Values are sent as a 5-element list and the platform
derives averages and deviations from them.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional


class MetricOptions(NamedTuple):
    """Pre-aggregated statistics reported instead of a single sample."""
    count: int
    min: float
    max: float
    sum_of_squares: float


@dataclass
class Metric:
    """
    Statistical accumulator for one named metric.

    `prev` holds the value passed to the last `aggregate` call. It survives
    `reset` so a plugin can compute deltas across delivery windows.
    """
    name: str
    value: float = 0.0
    count: int = 0
    min: float = 0.0
    max: float = 0.0
    sum_of_squares: float = 0.0
    prev: float = 0.0

    @classmethod
    def valued(
        cls,
        name: str,
        value: float,
        options: Optional[MetricOptions] = None,
    ) -> "Metric":
        """Build a transient metric holding one sample or a reported batch."""
        if options is not None:
            count, min_value, max_value, sum_of_squares = options
            return cls(
                name=name,
                value=value,
                count=count,
                min=min_value,
                max=max_value,
                sum_of_squares=sum_of_squares,
            )

        return cls(
            name=name,
            value=value,
            count=1,
            min=value,
            max=value,
            sum_of_squares=value * value,
        )

    def aggregate(self, metric: "Metric") -> float:
        """
        Fold `metric` into this accumulator.

        Returns the `prev` marker as it stood before this call.
        """
        prev = self.prev
        self.prev = metric.value
        self.value += metric.value

        if self.count == 0:
            self.min = metric.value
        else:
            self.min = min(self.min, metric.min)

        self.count += metric.count
        # Compared against the updated min, not the previous max.
        self.max = max(self.min, metric.max)
        self.sum_of_squares += metric.sum_of_squares

        return prev

    def reset(self) -> None:
        """Zero the accumulated statistics. `prev` is kept."""
        self.value = 0.0
        self.count = 0
        self.min = 0.0
        self.max = 0.0
        self.sum_of_squares = 0.0

    def to_payload(self) -> tuple[str, list[Optional[float]]]:
        """Return the metric name and its wire values. NaN and inf become None."""
        values = [self.value, self.count, self.min, self.max, self.sum_of_squares]
        return (
            self.name,
            [v if math.isfinite(v) else None for v in values],
        )

    def __str__(self) -> str:
        return (
            f"Name: {self.name}, Value: {self.value}, Count: {self.count}, "
            f"Min.: {self.min}, Max.: {self.max}, "
            f"Sum of squares: {self.sum_of_squares}"
        )
