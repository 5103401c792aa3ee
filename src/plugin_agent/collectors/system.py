"""
System Metrics Plugin.

Samples CPU, memory, load and root disk usage with psutil and reports them
as metrics of a single component.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import psutil

from ..binding import Component

logger = logging.getLogger(__name__)

DEFAULT_GUID = "com.plugin_agent.system"

CPU_USAGE = "Component/CPU/Usage[percent]"
LOAD_1M = "Component/CPU/Load/1m[processes]"
MEMORY_USAGE = "Component/Memory/Usage[percent]"
SWAP_USAGE = "Component/Memory/Swap[percent]"
DISK_USAGE = "Component/Disk/Usage[percent]"
DISK_READ_RATE = "Component/Disk/Read[bytes/second]"
DISK_WRITE_RATE = "Component/Disk/Write[bytes/second]"

METRIC_NAMES = [
    CPU_USAGE,
    LOAD_1M,
    MEMORY_USAGE,
    SWAP_USAGE,
    DISK_USAGE,
    DISK_READ_RATE,
    DISK_WRITE_RATE,
]


@dataclass
class SystemSnapshot:
    """Point-in-time system readings."""
    timestamp: float
    cpu_percent: float
    load_1m: float
    memory_percent: float
    swap_percent: float
    disk_percent: float
    disk_read_bytes: int = 0
    disk_write_bytes: int = 0


class SystemCollector:
    """Collects system-level readings using psutil."""

    def __init__(self, disk_path: str = "/"):
        """Initialize the system collector."""
        self.disk_path = disk_path

    def collect(self) -> SystemSnapshot:
        """Take one snapshot."""
        mem = psutil.virtual_memory()
        swap = psutil.swap_memory()

        try:
            disk_percent = psutil.disk_usage(self.disk_path).percent
        except OSError as e:
            logger.warning(f"Disk usage unavailable for {self.disk_path}: {e}")
            disk_percent = 0.0

        read_bytes = write_bytes = 0
        io = psutil.disk_io_counters()
        if io is not None:
            read_bytes, write_bytes = io.read_bytes, io.write_bytes

        return SystemSnapshot(
            timestamp=time.time(),
            cpu_percent=psutil.cpu_percent(interval=0.1),
            load_1m=psutil.getloadavg()[0],
            memory_percent=mem.percent,
            swap_percent=swap.percent,
            disk_percent=disk_percent,
            disk_read_bytes=read_bytes,
            disk_write_bytes=write_bytes,
        )


class SystemPlugin:
    """
    Cycle function reporting host metrics.

    The previous snapshot is kept in the agent state so disk I/O counters
    can be reported as rates.
    """

    def __init__(self, guid: str = DEFAULT_GUID, collector: Optional[SystemCollector] = None):
        """Initialize the plugin."""
        self.guid = guid
        self.collector = collector or SystemCollector()

    def register(self, agent, name: str = "System") -> Component:
        """Create, populate and register this plugin's component."""
        component = agent.create_component(name, self.guid)
        for metric_name in METRIC_NAMES:
            agent.create_metric(component, metric_name)
        agent.register_component(component)
        return component

    def __call__(self, agent) -> None:
        snapshot = self.collector.collect()

        agent.report_metric(self.guid, CPU_USAGE, snapshot.cpu_percent)
        agent.report_metric(self.guid, LOAD_1M, snapshot.load_1m)
        agent.report_metric(self.guid, MEMORY_USAGE, snapshot.memory_percent)
        agent.report_metric(self.guid, SWAP_USAGE, snapshot.swap_percent)
        agent.report_metric(self.guid, DISK_USAGE, snapshot.disk_percent)

        previous = agent.get_state()
        if isinstance(previous, SystemSnapshot):
            elapsed = snapshot.timestamp - previous.timestamp
            if elapsed > 0:
                agent.report_metric(
                    self.guid,
                    DISK_READ_RATE,
                    (snapshot.disk_read_bytes - previous.disk_read_bytes) / elapsed,
                )
                agent.report_metric(
                    self.guid,
                    DISK_WRITE_RATE,
                    (snapshot.disk_write_bytes - previous.disk_write_bytes) / elapsed,
                )

        agent.set_state(snapshot)
