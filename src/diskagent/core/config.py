"""
diskagent configuration management.

Provides centralized configuration with validation using Pydantic.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path.home() / ".diskagent" / "config.json"


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_enabled: bool = True
    console_enabled: bool = True
    json_format: bool = False
    log_directory: Path = Field(default_factory=lambda: Path.home() / ".diskagent" / "logs")

    @field_validator("log_directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class PartitionerConfig(BaseModel):
    """Configuration for the partition reconciliation engine."""

    parted_path: str = "parted"
    delta_bytes: int = Field(default=1024 * 1024, ge=0)
    command_timeout_seconds: int = Field(default=300, ge=1)


class RetryConfig(BaseModel):
    """Configuration for retried read-only queries."""

    max_tries: int = Field(default=3, ge=1)


class SafetyConfig(BaseModel):
    """Configuration for safety features."""

    require_confirmation: bool = True


class DiskAgentConfig(BaseModel):
    """Main diskagent configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    partitioner: PartitionerConfig = Field(default_factory=PartitionerConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    safety: SafetyConfig = Field(default_factory=SafetyConfig)
    session_directory: Path = Field(
        default_factory=lambda: Path.home() / ".diskagent" / "sessions"
    )

    @field_validator("session_directory", mode="before")
    @classmethod
    def expand_session_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()

    @classmethod
    def load(cls, config_path: Path | None = None) -> DiskAgentConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            return cls.model_validate(data)

        return cls()

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.logging.log_directory.mkdir(parents=True, exist_ok=True)
        self.session_directory.mkdir(parents=True, exist_ok=True)

    def get_session_file(self, session_id: str) -> Path:
        """Get the report path for a session."""
        return self.session_directory / f"report_{session_id[:8]}.json"


def load_config(config_path: Path | None = None) -> DiskAgentConfig:
    """Load or create configuration."""
    config = DiskAgentConfig.load(config_path)
    config.ensure_directories()
    return config
