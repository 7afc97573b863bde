"""
Configuration management for the alteration monitor.

Handles environment variables and .env loading, and provides validated
defaults for scan scheduling, name comparison, filtering and logging.
"""

import fnmatch
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from alteration_monitor.models.comparison import CaseSensitivity


class LogLevel(str, Enum):
    """Logging level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class MonitorConfig(BaseSettings):
    """
    Central configuration class for observers and monitors.

    Every option can be overridden with an ``ALTERATION_MONITOR_`` prefixed
    environment variable or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALTERATION_MONITOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # === Scheduling Configuration ===
    monitor_interval_seconds: float = Field(default=10.0, ge=0.0, description="Delay between successive scans")
    stop_timeout_seconds: float | None = Field(
        default=None, ge=0.0, description="How long stop() waits for the loop thread (None waits indefinitely)"
    )
    thread_name: str = Field(default="FileAlterationMonitor", min_length=1, description="Name of the loop thread")
    daemon_thread: bool = Field(default=True, description="Run the loop thread as a daemon")

    # === Observation Configuration ===
    case_sensitivity: CaseSensitivity = Field(
        default=CaseSensitivity.SYSTEM, description="Default name comparison mode for observers"
    )
    ignored_patterns: list[str] = Field(default=[], description="Entry name patterns excluded by build_file_filter()")

    # === Logging Configuration ===
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(default=None, description="Log file path (stderr if None)")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s",
        description="Log message format",
    )

    @field_validator('ignored_patterns')
    @classmethod
    def validate_ignored_patterns(cls, v):
        """Drop blank patterns."""
        return [pattern.strip() for pattern in v if pattern.strip()]

    def should_ignore_file(self, file_path: str | Path) -> bool:
        """Check if an entry should be ignored based on its name."""
        name = Path(file_path).name
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.ignored_patterns)

    def build_file_filter(self) -> Callable[[Path], bool] | None:
        """
        Build a file filter rejecting entries that match the ignored patterns.

        Returns:
            Predicate accepting the entries to track, or None when nothing is ignored
        """
        if not self.ignored_patterns:
            return None

        def accept(path: Path) -> bool:
            return not self.should_ignore_file(path)

        return accept

    def get_log_config(self) -> dict[str, Any]:
        """Get logging configuration dictionary."""
        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": self.log_format}},
            "handlers": {
                "default": {
                    "level": self.log_level.value,
                    "formatter": "standard",
                    "class": "logging.StreamHandler" if not self.log_file else "logging.FileHandler",
                }
            },
            "loggers": {
                "alteration_monitor": {"handlers": ["default"], "level": self.log_level.value, "propagate": False}
            },
        }

        if self.log_file:
            config["handlers"]["default"]["filename"] = str(self.log_file)

        return config


# Global configuration instance
_config: MonitorConfig | None = None


def get_config() -> MonitorConfig:
    """
    Get the global configuration instance.

    Creates a new instance on first call and reuses it for subsequent calls.
    """
    global _config
    if _config is None:
        _config = MonitorConfig()
    return _config


def reload_config() -> MonitorConfig:
    """
    Force reload the configuration from environment/files.

    Useful for testing or when configuration needs to be updated at runtime.
    """
    global _config
    _config = MonitorConfig()
    return _config


def set_config(config: MonitorConfig | None) -> None:
    """
    Set a custom configuration instance.

    Passing None drops the current instance so the next get_config() reloads.
    """
    global _config
    _config = config
