"""
Agent context.

Holds the agent identity and the registered components, builds the
outbound payload and runs one delivery attempt.
"""

import logging
import time
from typing import Optional

from .component import Component
from .metric import MetricOptions
from .sender import PlatformSender, SendResult

logger = logging.getLogger(__name__)


class Context:
    """Agent identity plus the components it reports for."""

    def __init__(
        self,
        license_key: str,
        version: str,
        host: str,
        pid: int,
        sender: PlatformSender,
    ):
        """Initialize the context."""
        self._license_key = license_key
        self._version = version
        self._host = host
        self._pid = pid
        self.sender = sender

        self.components: list[Component] = []
        self.last_reported: Optional[float] = None

    @property
    def license_key(self) -> str:
        return self._license_key

    @property
    def version(self) -> str:
        return self._version

    @property
    def host(self) -> str:
        return self._host

    @property
    def pid(self) -> int:
        return self._pid

    def register_component(self, component: Component) -> None:
        """Add a component. Duplicate GUIDs are allowed and reported separately."""
        self.components.append(component)
        logger.debug(f"Registered component {component.key()}")

    def report_metric(
        self,
        guid: str,
        name: str,
        value: float,
        options: Optional[MetricOptions] = None,
    ) -> float:
        """Report a sample to the first component with a matching GUID."""
        for component in self.components:
            if component.guid == guid:
                return component.report_metric(name, value, options)
        return 0.0

    def build_payload(self) -> dict:
        """Build the ingestion request body."""
        components = []
        for component in self.components:
            metrics = dict(metric.to_payload() for metric in component.metrics)
            components.append({
                'name': component.name,
                'guid': component.guid,
                'duration': component.duration(),
                'metrics': metrics,
            })

        return {
            'agent': {
                'host': self.host,
                'pid': self.pid,
                'version': self.version,
            },
            'components': components,
        }

    def deliver(self) -> SendResult:
        """
        Send every component's metrics once.

        Metrics are reset only on a confirmed success. `last_reported`
        advances whatever the outcome, except when ForbiddenError escapes.
        """
        result = self.sender.send(self.build_payload(), self.license_key)

        if result.success:
            for component in self.components:
                component.mark_delivered()

        self.last_reported = time.time()
        return result

    def __str__(self) -> str:
        return f"Components: [{'; '.join(str(c) for c in self.components)}]"
