"""
Polling file system alteration monitor.

Observers snapshot a directory tree and report created, changed and deleted
files and directories between scans; a monitor runs observers periodically
on a background thread.
"""

from alteration_monitor.config import MonitorConfig, get_config
from alteration_monitor.core import IFileAlterationListener, IFileSystem
from alteration_monitor.filesystem import LocalFileSystem
from alteration_monitor.models import CaseSensitivity, FileChangeEvent, FileEntry, PathStat
from alteration_monitor.monitoring import (
    CollectingFileListener,
    FileAlterationListenerAdaptor,
    FileAlterationMonitor,
    FileAlterationObserver,
    WatchdogEventListener,
)

__version__ = "0.1.0"

__all__ = [
    "CaseSensitivity",
    "CollectingFileListener",
    "FileAlterationListenerAdaptor",
    "FileAlterationMonitor",
    "FileAlterationObserver",
    "FileChangeEvent",
    "FileEntry",
    "IFileAlterationListener",
    "IFileSystem",
    "LocalFileSystem",
    "MonitorConfig",
    "PathStat",
    "WatchdogEventListener",
    "get_config",
]
