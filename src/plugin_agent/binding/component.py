"""
Plugin component.

A component is one monitored source, identified by name and GUID. It owns
its metrics and remembers when they were last delivered.
"""

import logging
import time
from typing import Optional

from .metric import Metric, MetricOptions

logger = logging.getLogger(__name__)

DEFAULT_DELIVER_CYCLE = 60


class Component:
    """
    Named metric source.

    Two components are equal when both name and GUID match.
    """

    def __init__(self, name: str, guid: str, deliver_cycle: int = DEFAULT_DELIVER_CYCLE):
        """Initialize the component."""
        self.name = name
        self.guid = guid
        self.deliver_cycle = deliver_cycle
        self.metrics: list[Metric] = []
        self.last_delivered_at: Optional[float] = None

    def key(self) -> str:
        """Identity string used in logs."""
        return f"{self.name}{self.guid}"

    def add_metric(self, name: str) -> Metric:
        """Register a metric name. Returns the existing metric if already known."""
        existing = self.get_metric(name)
        if existing is not None:
            return existing

        metric = Metric(name)
        self.metrics.append(metric)
        return metric

    def get_metric(self, name: str) -> Optional[Metric]:
        """Look up a metric by name."""
        for metric in self.metrics:
            if metric.name == name:
                return metric
        return None

    def report_metric(
        self,
        name: str,
        value: float,
        options: Optional[MetricOptions] = None,
    ) -> float:
        """
        Aggregate a sample into the named metric.

        Unknown names are dropped. Returns the metric's previous marker,
        or 0.0 when the sample was dropped.
        """
        metric = self.get_metric(name)
        if metric is None:
            logger.debug(f"Dropping sample for unknown metric {name!r} on {self.key()}")
            return 0.0

        return metric.aggregate(Metric.valued(name, value, options))

    def duration(self) -> int:
        """Seconds covered by the pending metrics."""
        if self.last_delivered_at is None:
            return self.deliver_cycle
        return int(time.time() - self.last_delivered_at)

    def mark_delivered(self) -> None:
        """Record a successful delivery and reset every metric."""
        self.last_delivered_at = time.time()
        for metric in self.metrics:
            metric.reset()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Component):
            return NotImplemented
        return (self.name, self.guid) == (other.name, other.guid)

    def __hash__(self) -> int:
        return hash((self.name, self.guid))

    def __repr__(self) -> str:
        return f"Component(name={self.name!r}, guid={self.guid!r})"

    def __str__(self) -> str:
        metrics = "; ".join(str(m) for m in self.metrics)
        last = self.last_delivered_at if self.last_delivered_at is not None else -1
        return (
            f"Name: {self.name}, GUID: {self.guid}, Metrics: [{metrics}], "
            f"Last delivered at: {last}"
        )
