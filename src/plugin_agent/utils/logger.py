"""Logging configuration."""

import logging
import logging.config
from pathlib import Path
from typing import Optional, Union

import yaml
from rich.logging import RichHandler

ROOT_LOGGER = "plugin_agent"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the plugin agent hierarchy."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    config_path: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the plugin agent loggers.

    A YAML `dictConfig` file at `config_path` takes precedence. Without one,
    the agent logger writes to a rich console handler and, if given, a file.
    """
    logger = logging.getLogger(ROOT_LOGGER)

    if config_path and Path(config_path).is_file():
        try:
            with open(config_path, 'r') as f:
                logging.config.dictConfig(yaml.safe_load(f))
            return logger
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            logger.error(f"Logging config {config_path} couldn't be applied. Error: {e}")

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        # Console handler with rich
        console_handler = RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

        # File handler
        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            logger.addHandler(file_handler)

    return logger
