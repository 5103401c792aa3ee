"""
Platform API bindings.

Metric aggregation, components, delivery context and the HTTP sender.
"""

from .component import Component
from .config import AgentConfig
from .context import Context
from .metric import Metric, MetricOptions
from .sender import (
    DeliveryStatus,
    ForbiddenError,
    PlatformSender,
    PluginAgentError,
    SendResult,
)

__all__ = [
    "AgentConfig",
    "Component",
    "Context",
    "DeliveryStatus",
    "ForbiddenError",
    "Metric",
    "MetricOptions",
    "PlatformSender",
    "PluginAgentError",
    "SendResult",
]
