"""
Plugin Agent - metrics reporting agent for the platform plugin API.

Plugins sample their sources every poll cycle; the agent aggregates the
samples and posts them to the ingestion endpoint every deliver cycle.
"""

from .agent import Agent
from .binding import (
    AgentConfig,
    Component,
    Context,
    DeliveryStatus,
    ForbiddenError,
    Metric,
    MetricOptions,
    PlatformSender,
    PluginAgentError,
    SendResult,
)

__version__ = "1.0.0"

__all__ = [
    "Agent",
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
