"""
Plugin Agent Configuration.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://platform-api.newrelic.com/platform/v1/metrics"
DEFAULT_CONFIG_PATH = "config.yml"


@dataclass
class AgentConfig:
    """Delivery endpoint and cycle timing."""
    endpoint: str = DEFAULT_ENDPOINT
    log_config: Optional[str] = "logging.yml"
    deliver_cycle: int = 60  # seconds
    poll_cycle: int = 20  # seconds
    timeout: int = 30  # seconds, per request

    @classmethod
    def load(cls, path: str = DEFAULT_CONFIG_PATH) -> "AgentConfig":
        """Load configuration from YAML, falling back to defaults on any problem."""
        try:
            return cls.from_yaml(path)
        except OSError as e:
            logger.error(f"Could not open config file. Error: {e}")
        except (yaml.YAMLError, TypeError, ValueError) as e:
            logger.error(f"Config file couldn't be parsed. Error: {e}")
        return cls()

    @classmethod
    def from_yaml(cls, path: str) -> "AgentConfig":
        """Load configuration from YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return cls._from_dict(data)

    @classmethod
    def from_env(cls, base: Optional["AgentConfig"] = None) -> "AgentConfig":
        """Apply environment variable overrides."""
        config = base or cls()

        if os.getenv("PLUGIN_AGENT_ENDPOINT"):
            config.endpoint = os.getenv("PLUGIN_AGENT_ENDPOINT")

        for key in ["deliver_cycle", "poll_cycle"]:
            env_name = f"PLUGIN_AGENT_{key.upper()}"
            raw = os.getenv(env_name)
            if not raw:
                continue
            try:
                setattr(config, key, int(raw))
            except ValueError:
                logger.error(f"Invalid {env_name}={raw!r}, keeping {getattr(config, key)}")

        return config

    @classmethod
    def _from_dict(cls, data: dict) -> "AgentConfig":
        """Create config from dictionary."""
        if not isinstance(data, dict):
            raise ValueError("config root must be a mapping")

        config = cls()

        for key in ["endpoint", "log_config"]:
            if key in data:
                setattr(config, key, data[key])

        for key in ["deliver_cycle", "poll_cycle", "timeout"]:
            if key in data:
                setattr(config, key, int(data[key]))

        return config

    def to_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        with open(path, 'w') as f:
            yaml.dump(dataclasses.asdict(self), f, default_flow_style=False)
