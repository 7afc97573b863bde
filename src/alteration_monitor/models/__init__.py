"""Data models and exceptions for the alteration monitor."""

from alteration_monitor.models.comparison import CaseSensitivity
from alteration_monitor.models.exceptions import (
    BaseError,
    ConfigurationError,
    InitializationError,
    MonitoringError,
    MonitorStateError,
    ShutdownError,
)
from alteration_monitor.models.file_change import FileChangeEvent
from alteration_monitor.models.file_entry import FileEntry
from alteration_monitor.models.path_stat import EPOCH, PathStat

__all__ = [
    "CaseSensitivity",
    "EPOCH",
    "FileChangeEvent",
    "FileEntry",
    "PathStat",
    "BaseError",
    "ConfigurationError",
    "MonitoringError",
    "MonitorStateError",
    "InitializationError",
    "ShutdownError",
]
