"""
Monitoring package for polling file system change detection.

This package provides the observer that diffs a directory tree between
scans, the listeners it notifies, and the monitor that schedules scans on
a background thread.
"""

from .alteration_monitor import FileAlterationMonitor
from .comparators import (
    compare_names,
    compare_names_insensitive,
    compare_names_system,
    get_name_comparator,
)
from .file_observer import FileAlterationObserver
from .listeners import CollectingFileListener, FileAlterationListenerAdaptor
from .watchdog_bridge import WatchdogEventListener

__all__ = [
    "CollectingFileListener",
    "FileAlterationListenerAdaptor",
    "FileAlterationMonitor",
    "FileAlterationObserver",
    "WatchdogEventListener",
    "compare_names",
    "compare_names_insensitive",
    "compare_names_system",
    "get_name_comparator",
]
