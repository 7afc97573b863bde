"""
Polling observer for a single directory tree.

The observer keeps a FileEntry snapshot of everything below its root and,
on each check_and_notify() call, walks the live tree in name order, merging
it against the snapshot to fire create, change and delete notifications.
"""

import logging
import os
import threading
from collections.abc import Callable, Sequence
from functools import cmp_to_key
from pathlib import Path

from alteration_monitor.config import get_config
from alteration_monitor.core.interfaces import FileFilter, IFileAlterationListener, IFileSystem
from alteration_monitor.filesystem import LocalFileSystem
from alteration_monitor.models import CaseSensitivity, ConfigurationError, FileEntry, PathStat
from alteration_monitor.monitoring.comparators import NameComparator, get_name_comparator

logger = logging.getLogger(__name__)

EntryFactory = Callable[[FileEntry, Path], FileEntry]


def _default_entry_factory(parent: FileEntry, path: Path) -> FileEntry:
    return parent.new_child_instance(path)


class FileAlterationObserver:
    """
    Observes a directory tree and notifies listeners of changes.

    Scans are synchronous and must not run concurrently on the same observer.
    Listeners may be added or removed from any thread at any time; a scan
    already in progress may or may not see the change.
    """

    def __init__(
        self,
        directory: str | os.PathLike | FileEntry,
        file_filter: FileFilter | None = None,
        case_sensitivity: CaseSensitivity | str | None = None,
        *,
        filesystem: IFileSystem | None = None,
        entry_factory: EntryFactory | None = None,
    ):
        """
        Initialize the observer.

        Args:
            directory: Root directory to observe, or a prepared root FileEntry
            file_filter: Optional predicate restricting which entries are tracked
            case_sensitivity: Name comparison mode (configured default if None)
            filesystem: Filesystem backend (local filesystem if None)
            entry_factory: Builds child snapshots; defaults to the parent's
                new_child_instance()

        Raises:
            ConfigurationError: If the root entry or directory is missing
        """
        if directory is None:
            raise ConfigurationError("Root entry is missing", config_key="directory")

        if isinstance(directory, FileEntry):
            root_entry = directory
        else:
            raw_path = os.fspath(directory)
            if not raw_path:
                raise ConfigurationError(
                    "Root directory is missing", config_key="directory", actual_value=repr(raw_path)
                )
            root_entry = FileEntry(path=Path(raw_path))

        if case_sensitivity is None:
            case_sensitivity = get_config().case_sensitivity

        self._root_entry = root_entry
        self._file_filter = file_filter
        self._case_sensitivity = CaseSensitivity(case_sensitivity)
        self._comparator = get_name_comparator(self._case_sensitivity)
        self._sort_key = cmp_to_key(self._comparator)
        self._filesystem = filesystem or LocalFileSystem()
        self._entry_factory = entry_factory or _default_entry_factory

        # Copy-on-write: scans iterate whichever tuple was current when they looked
        self._listeners: tuple[IFileAlterationListener, ...] = ()
        self._listeners_lock = threading.Lock()

    @property
    def directory(self) -> Path:
        """The observed root directory."""
        return self._root_entry.path

    @property
    def root_entry(self) -> FileEntry:
        """The snapshot of the root directory."""
        return self._root_entry

    @property
    def file_filter(self) -> FileFilter | None:
        """The predicate restricting tracked entries, or None to track everything."""
        return self._file_filter

    @property
    def comparator(self) -> NameComparator:
        """The name comparator that orders and matches entries."""
        return self._comparator

    @property
    def case_sensitivity(self) -> CaseSensitivity:
        """The name comparison mode the comparator was selected from."""
        return self._case_sensitivity

    @property
    def listeners(self) -> tuple[IFileAlterationListener, ...]:
        """Snapshot of the registered listeners in registration order."""
        return self._listeners

    def add_listener(self, listener: IFileAlterationListener | None) -> None:
        """Register a listener; None is ignored."""
        if listener is None:
            return
        with self._listeners_lock:
            self._listeners = self._listeners + (listener,)

    def remove_listener(self, listener: IFileAlterationListener | None) -> None:
        """Remove every registration of a listener; unknown listeners are ignored."""
        if listener is None:
            return
        with self._listeners_lock:
            self._listeners = tuple(existing for existing in self._listeners if existing is not listener)

    def initialize(self) -> None:
        """
        Build the initial snapshot of the tree without firing any events.

        Entries present now are treated as already known by later scans.
        """
        root_path = self._root_entry.path
        self._root_entry.refresh(self._stat(root_path))
        self._root_entry.children = self._do_list_files(root_path, self._root_entry)
        logger.debug("Initialized observer for %s (%d top-level entries)", root_path, len(self._root_entry.children))

    def destroy(self) -> None:
        """Release resources held by the observer. Nothing to release by default."""
        logger.debug("Destroyed observer for %s", self._root_entry.path)

    def check_and_notify(self) -> None:
        """Scan the tree once and notify listeners of every difference found."""
        self._notify("on_start", self)

        root_path = self._root_entry.path
        if self._filesystem.exists(root_path):
            self._check_and_notify(self._root_entry, self._root_entry.children, self._list_files(root_path))
        elif self._root_entry.exists or self._root_entry.children:
            self._check_and_notify(self._root_entry, self._root_entry.children, [])

        # The root itself is never reported, but its state decides the next scan
        self._root_entry.refresh(self._stat(root_path))

        self._notify("on_stop", self)

    def _check_and_notify(self, parent: FileEntry, previous: Sequence[FileEntry], files: Sequence[Path]) -> None:
        """
        Merge the previous children of ``parent`` against its current listing.

        Both sequences are sorted with the observer's comparator, so a single
        forward pass over each is enough to classify every entry.
        """
        c = 0
        current: list[FileEntry] = []
        for entry in previous:
            while c < len(files) and self._comparator(entry.path, files[c]) > 0:
                created = self._create_file_entry(parent, files[c])
                current.append(created)
                self._do_create(created)
                c += 1

            if c < len(files) and self._comparator(entry.path, files[c]) == 0:
                self._do_match(entry, files[c])
                self._check_and_notify(entry, entry.children, self._list_files(files[c]))
                current.append(entry)
                c += 1
            else:
                self._check_and_notify(entry, entry.children, [])
                self._do_delete(entry)

        for path in files[c:]:
            created = self._create_file_entry(parent, path)
            current.append(created)
            self._do_create(created)

        parent.children = current

    def _create_file_entry(self, parent: FileEntry, path: Path) -> FileEntry:
        entry = self._entry_factory(parent, path)
        entry.refresh(self._stat(path))
        entry.children = self._do_list_files(path, entry)
        return entry

    def _do_list_files(self, path: Path, entry: FileEntry) -> list[FileEntry]:
        return [self._create_file_entry(entry, child) for child in self._list_files(path)]

    def _list_files(self, path: Path) -> list[Path]:
        """List the tracked children of ``path`` in comparator order."""
        try:
            children = self._filesystem.list_children(path, self._file_filter)
        except OSError as e:
            logger.debug("Listing %s failed, treating it as empty: %s", path, e)
            return []
        return sorted(children, key=self._sort_key)

    def _stat(self, path: Path) -> PathStat:
        try:
            return self._filesystem.stat(path)
        except OSError as e:
            logger.debug("Stat of %s failed, treating it as missing: %s", path, e)
            return PathStat.missing(path)

    def _do_create(self, entry: FileEntry) -> None:
        """Fire create for ``entry`` and then for each of its descendants."""
        if entry.is_directory:
            self._notify("on_directory_create", entry.path)
        else:
            self._notify("on_file_create", entry.path)

        for child in entry.children:
            self._do_create(child)

    def _do_match(self, entry: FileEntry, path: Path) -> None:
        if entry.refresh(self._stat(path)):
            if entry.is_directory:
                self._notify("on_directory_change", path)
            else:
                self._notify("on_file_change", path)

    def _do_delete(self, entry: FileEntry) -> None:
        if entry.is_directory:
            self._notify("on_directory_delete", entry.path)
        else:
            self._notify("on_file_delete", entry.path)

    def _notify(self, callback: str, argument) -> None:
        for listener in self._listeners:
            try:
                getattr(listener, callback)(argument)
            except Exception as e:
                logger.error("Listener %r failed in %s(%s): %s", listener, callback, argument, e, exc_info=True)

    def __str__(self) -> str:
        parts = [f"file='{self._root_entry.path}'"]
        if self._file_filter is not None:
            parts.append(getattr(self._file_filter, "__name__", repr(self._file_filter)))
        parts.append(f"listeners={len(self._listeners)}")
        return f"{type(self).__name__}[{', '.join(parts)}]"
