"""Filesystem backends used by observers to read the live tree."""

from alteration_monitor.filesystem.local_filesystem import LocalFileSystem

__all__ = ["LocalFileSystem"]
