"""
Plugin Agent - cycle driver.

Calls the plugin's cycle function every poll cycle and delivers the
aggregated metrics once a deliver cycle has elapsed since the last attempt.

Example:
    agent = Agent("<license_key>", "1.0.0", "host", 1234)
    component = agent.create_component("Test Plugin", "com.test_plugin.plugin_name")
    agent.create_metric(component, "Component/Request/Rate/host1[requests/second]")
    agent.register_component(component)

    def cycle(agent):
        agent.report_metric(
            "com.test_plugin.plugin_name",
            "Component/Request/Rate/host1[requests/second]",
            1000,
        )

    agent.run(cycle)
"""

import logging
import math
import time
from typing import Any, Callable, Optional

from .binding import AgentConfig, Component, Context, MetricOptions, PlatformSender, SendResult

logger = logging.getLogger(__name__)

CycleFunction = Callable[["Agent"], None]


class Agent:
    """
    Main plugin agent loop.

    The agent carries an opaque `state` value between cycles. It is set and
    read by the cycle function only.
    """

    def __init__(
        self,
        license_key: str,
        version: str,
        host: str,
        pid: int,
        config: Optional[AgentConfig] = None,
        sender: Optional[PlatformSender] = None,
    ):
        """Initialize the agent."""
        self.config = config or AgentConfig()
        self.sender = sender or PlatformSender(
            endpoint=self.config.endpoint,
            timeout=self.config.timeout,
            version=version,
        )
        self.context = Context(license_key, version, host, pid, self.sender)
        self.state: Any = None

    def set_state(self, state: Any) -> None:
        self.state = state

    def get_state(self) -> Any:
        return self.state

    def create_component(self, name: str, guid: str) -> Component:
        """Create an unregistered component using the configured deliver cycle."""
        return Component(name, guid, deliver_cycle=self.config.deliver_cycle)

    def create_metric(self, component: Component, name: str) -> None:
        component.add_metric(name)

    def register_component(self, component: Component) -> None:
        self.context.register_component(component)

    def report_metric(
        self,
        guid: str,
        name: str,
        value: float,
        options: Optional[MetricOptions] = None,
    ) -> float:
        """Report a sample. Returns the metric's previous value marker."""
        return self.context.report_metric(guid, name, value, options)

    def context_duration(self) -> float:
        """Seconds since the last delivery attempt, infinite if none yet."""
        if self.context.last_reported is None:
            return math.inf
        return time.time() - self.context.last_reported

    def finish_cycle(self) -> Optional[SendResult]:
        """Deliver if a deliver cycle has elapsed since the last attempt."""
        elapsed = self.context_duration()
        logger.info(f"Finishing cycle. Elapsed: {elapsed}.")

        result = None
        if elapsed >= self.config.deliver_cycle:
            logger.info("Sending metrics.")
            result = self.context.deliver()

        logger.debug(f"Context now: {self.context}")
        return result

    def run_cycle(self, cycle_fn: CycleFunction) -> Optional[SendResult]:
        """Run the cycle function once, then maybe deliver."""
        logger.info("Starting cycle fn.")
        cycle_fn(self)
        return self.finish_cycle()

    def run(self, cycle_fn: CycleFunction, cycles: Optional[int] = None) -> None:
        """
        Run the agent loop.

        Loops forever unless `cycles` is given. ForbiddenError is not caught
        here; it ends the loop and should end the process.
        """
        logger.info(
            f"Starting plugin agent on {self.context.host} "
            f"(poll {self.config.poll_cycle}s, deliver {self.config.deliver_cycle}s)"
        )
        logger.info(f"Endpoint: {self.config.endpoint}")

        completed = 0
        while cycles is None or completed < cycles:
            self.run_cycle(cycle_fn)
            completed += 1
            time.sleep(self.config.poll_cycle)

    def close(self) -> None:
        """Close the HTTP session."""
        self.sender.close()

    def __str__(self) -> str:
        return (
            f"License Key: {self.context.license_key}, Version: {self.context.version}, "
            f"Host: {self.context.host}, PID: {self.context.pid}"
        )
