"""Abstract contracts shared by observers, listeners and filesystem backends."""

from alteration_monitor.core.interfaces import FileFilter, IFileAlterationListener, IFileSystem

__all__ = [
    "FileFilter",
    "IFileAlterationListener",
    "IFileSystem",
]
