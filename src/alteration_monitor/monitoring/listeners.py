"""
Listener implementations for file alteration observers.

FileAlterationListenerAdaptor provides no-op callbacks so subclasses only
override what they need. CollectingFileListener records every notification,
which is handy for tests and for batch processing after each scan.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from alteration_monitor.core.interfaces import IFileAlterationListener
from alteration_monitor.models import FileChangeEvent

if TYPE_CHECKING:
    from alteration_monitor.monitoring.file_observer import FileAlterationObserver


class FileAlterationListenerAdaptor(IFileAlterationListener):
    """Listener whose callbacks all do nothing."""

    def on_start(self, observer: "FileAlterationObserver") -> None:
        pass

    def on_directory_create(self, directory: Path) -> None:
        pass

    def on_directory_change(self, directory: Path) -> None:
        pass

    def on_directory_delete(self, directory: Path) -> None:
        pass

    def on_file_create(self, file: Path) -> None:
        pass

    def on_file_change(self, file: Path) -> None:
        pass

    def on_file_delete(self, file: Path) -> None:
        pass

    def on_stop(self, observer: "FileAlterationObserver") -> None:
        pass


class CollectingFileListener(FileAlterationListenerAdaptor):
    """
    Listener that collects the paths reported by an observer.

    Paths are kept per category, and every notification is also appended
    to ``events`` so the order of a scan can be inspected.
    """

    def __init__(self, clear_on_start: bool = True):
        """
        Initialize the listener.

        Args:
            clear_on_start: Whether to forget previous results when a scan starts
        """
        self.clear_on_start = clear_on_start
        self.created_files: list[Path] = []
        self.changed_files: list[Path] = []
        self.deleted_files: list[Path] = []
        self.created_directories: list[Path] = []
        self.changed_directories: list[Path] = []
        self.deleted_directories: list[Path] = []
        self.events: list[FileChangeEvent] = []
        self.scans_started = 0
        self.scans_finished = 0

    def clear(self) -> None:
        """Forget all collected paths and events."""
        self.created_files.clear()
        self.changed_files.clear()
        self.deleted_files.clear()
        self.created_directories.clear()
        self.changed_directories.clear()
        self.deleted_directories.clear()
        self.events.clear()

    @property
    def has_changes(self) -> bool:
        """Whether any create, change or delete has been collected."""
        return bool(self.events)

    def on_start(self, observer: "FileAlterationObserver") -> None:
        self.scans_started += 1
        if self.clear_on_start:
            self.clear()

    def on_directory_create(self, directory: Path) -> None:
        self.created_directories.append(directory)
        self.events.append(FileChangeEvent("created", directory, is_directory=True))

    def on_directory_change(self, directory: Path) -> None:
        self.changed_directories.append(directory)
        self.events.append(FileChangeEvent("modified", directory, is_directory=True))

    def on_directory_delete(self, directory: Path) -> None:
        self.deleted_directories.append(directory)
        self.events.append(FileChangeEvent("deleted", directory, is_directory=True))

    def on_file_create(self, file: Path) -> None:
        self.created_files.append(file)
        self.events.append(FileChangeEvent("created", file))

    def on_file_change(self, file: Path) -> None:
        self.changed_files.append(file)
        self.events.append(FileChangeEvent("modified", file))

    def on_file_delete(self, file: Path) -> None:
        self.deleted_files.append(file)
        self.events.append(FileChangeEvent("deleted", file))

    def on_stop(self, observer: "FileAlterationObserver") -> None:
        self.scans_finished += 1
