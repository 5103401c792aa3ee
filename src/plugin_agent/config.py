"""Process settings for the plugin agent."""

import os
import socket
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_AGENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Authentication
    license_key: Optional[str] = None

    # Identity reported in every payload
    version: str = "1.0.0"
    host: str = Field(default_factory=socket.gethostname)
    pid: int = Field(default_factory=os.getpid)

    # Agent configuration file
    config_path: Path = Path("config.yml")

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None
