"""
Abstract interfaces for the alteration monitor.

These interfaces define the contracts between the observer and its
collaborators: the filesystem it reads and the listeners it notifies.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from alteration_monitor.models import PathStat

if TYPE_CHECKING:
    from alteration_monitor.monitoring.file_observer import FileAlterationObserver

FileFilter = Callable[[Path], bool]


class IFileSystem(ABC):
    """Interface for the filesystem primitives consumed by observers."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """
        Check whether a path currently exists.

        Args:
            path: Path to check

        Returns:
            True if the path exists
        """
        pass

    @abstractmethod
    def stat(self, path: Path) -> PathStat:
        """
        Read the current state of a path.

        A path that does not exist or cannot be read is reported as missing
        rather than raising.

        Args:
            path: Path to read

        Returns:
            Observed state of the path
        """
        pass

    @abstractmethod
    def list_children(self, path: Path, file_filter: FileFilter | None = None) -> list[Path]:
        """
        List the immediate children of a directory.

        Args:
            path: Directory to list
            file_filter: Optional predicate restricting the returned entries

        Returns:
            Child paths in no particular order; empty for files, missing paths
            and directories that cannot be read
        """
        pass


class IFileAlterationListener(ABC):
    """
    Interface for receiving change notifications from an observer.

    Callbacks run synchronously on the thread performing the scan and
    should return quickly.
    """

    @abstractmethod
    def on_start(self, observer: "FileAlterationObserver") -> None:
        """Called before a scan starts."""
        pass

    @abstractmethod
    def on_directory_create(self, directory: Path) -> None:
        """Called when a directory is created."""
        pass

    @abstractmethod
    def on_directory_change(self, directory: Path) -> None:
        """Called when a directory's attributes change."""
        pass

    @abstractmethod
    def on_directory_delete(self, directory: Path) -> None:
        """Called when a directory is deleted."""
        pass

    @abstractmethod
    def on_file_create(self, file: Path) -> None:
        """Called when a file is created."""
        pass

    @abstractmethod
    def on_file_change(self, file: Path) -> None:
        """Called when a file's modification time, length or type changes."""
        pass

    @abstractmethod
    def on_file_delete(self, file: Path) -> None:
        """Called when a file is deleted."""
        pass

    @abstractmethod
    def on_stop(self, observer: "FileAlterationObserver") -> None:
        """Called after a scan finishes."""
        pass
