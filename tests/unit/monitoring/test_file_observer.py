"""Unit tests for the file alteration observer."""

import os
import shutil
from pathlib import Path
from unittest.mock import Mock

import pytest
from alteration_monitor.core import IFileAlterationListener
from alteration_monitor.filesystem import LocalFileSystem
from alteration_monitor.models import CaseSensitivity, ConfigurationError, FileEntry
from alteration_monitor.monitoring import (
    CollectingFileListener,
    FileAlterationObserver,
    compare_names,
    compare_names_insensitive,
)

MTIME = 1_000_000


def write_file(path: Path, content: str = "content", mtime: float = MTIME) -> Path:
    """Write a file and pin its modification time."""
    path.write_text(content)
    os.utime(path, (mtime, mtime))
    return path


def event_log(listener: CollectingFileListener) -> list[tuple[str, bool, Path]]:
    return [(event.event_type, event.is_directory, event.file_path) for event in listener.events]


class DenyingFileSystem(LocalFileSystem):
    """Local filesystem that refuses to list selected directories."""

    def __init__(self):
        self.denied: set[Path] = set()

    def list_children(self, path, file_filter=None):
        if path in self.denied:
            raise PermissionError(f"Permission denied: {path}")
        return super().list_children(path, file_filter)


class TestObserverConfiguration:
    """Test cases for observer construction and listener management."""

    def test_missing_directory_rejected(self):
        """Test that a missing root fails fast."""
        with pytest.raises(ConfigurationError) as exc_info:
            FileAlterationObserver(None)

        assert "Root entry is missing" in str(exc_info.value)

    def test_empty_directory_rejected(self):
        """Test that an empty root path fails fast."""
        with pytest.raises(ConfigurationError) as exc_info:
            FileAlterationObserver("")

        assert "Root directory is missing" in str(exc_info.value)

    def test_directory_from_string(self, tmp_path):
        """Test constructing an observer from a string path."""
        observer = FileAlterationObserver(str(tmp_path))

        assert observer.directory == tmp_path
        assert observer.root_entry.path == tmp_path
        assert observer.file_filter is None

    def test_directory_need_not_exist(self, tmp_path):
        """Test that the root may be created after the observer."""
        observer = FileAlterationObserver(tmp_path / "later")

        assert observer.directory == tmp_path / "later"

    def test_root_entry(self, tmp_path):
        """Test constructing an observer from a prepared root entry."""
        root = FileEntry(path=tmp_path)
        observer = FileAlterationObserver(root)

        assert observer.root_entry is root

    def test_comparator_selection(self, tmp_path):
        """Test that the comparison mode selects the comparator."""
        assert FileAlterationObserver(tmp_path, case_sensitivity="sensitive").comparator is compare_names
        insensitive = FileAlterationObserver(tmp_path, case_sensitivity=CaseSensitivity.INSENSITIVE)
        assert insensitive.comparator is compare_names_insensitive
        assert insensitive.case_sensitivity == CaseSensitivity.INSENSITIVE

    def test_add_remove_listeners(self, tmp_path):
        """Test adding and removing listeners."""
        observer = FileAlterationObserver(tmp_path)
        listener = CollectingFileListener()

        observer.add_listener(None)
        assert observer.listeners == ()

        observer.add_listener(listener)
        assert observer.listeners == (listener,)

        observer.remove_listener(listener)
        assert observer.listeners == ()

        # Removing again or removing None is harmless
        observer.remove_listener(listener)
        observer.remove_listener(None)
        assert observer.listeners == ()

    def test_remove_listener_registered_twice(self, tmp_path):
        """Test that removal drops every registration."""
        observer = FileAlterationObserver(tmp_path)
        listener = CollectingFileListener()
        other = CollectingFileListener()

        observer.add_listener(listener)
        observer.add_listener(other)
        observer.add_listener(listener)
        observer.remove_listener(listener)

        assert observer.listeners == (other,)

    def test_string_representation(self, tmp_path):
        """Test string representation of an observer."""

        def markdown_only(path):
            return path.suffix == ".md"

        plain = FileAlterationObserver(tmp_path)
        assert str(plain) == f"FileAlterationObserver[file='{tmp_path}', listeners=0]"

        filtered = FileAlterationObserver(tmp_path, markdown_only)
        filtered.add_listener(CollectingFileListener())
        assert str(filtered) == f"FileAlterationObserver[file='{tmp_path}', markdown_only, listeners=1]"

    def test_destroy_is_noop(self, tmp_path):
        """Test that destroy() can be called at any time."""
        observer = FileAlterationObserver(tmp_path)
        observer.destroy()
        observer.destroy()


class TestObserverScanning:
    """Test cases for check_and_notify() against a real directory tree."""

    @pytest.fixture
    def listener(self):
        """Create a collecting listener."""
        return CollectingFileListener()

    @pytest.fixture
    def make_observer(self, tmp_path, listener):
        """Build an initialized, case-sensitive observer for tmp_path."""

        def _make(directory: Path = tmp_path, **kwargs) -> FileAlterationObserver:
            kwargs.setdefault("case_sensitivity", CaseSensitivity.SENSITIVE)
            observer = FileAlterationObserver(directory, **kwargs)
            observer.add_listener(listener)
            observer.initialize()
            return observer

        return _make

    def test_initialize_fires_nothing(self, tmp_path, listener, make_observer):
        """Test that pre-existing entries are not reported."""
        write_file(tmp_path / "a.txt")
        (tmp_path / "sub").mkdir()

        observer = make_observer()

        assert listener.events == []
        assert listener.scans_started == 0
        assert [child.name for child in observer.root_entry.children] == ["a.txt", "sub"]

    def test_no_change_scan_is_idempotent(self, tmp_path, listener, make_observer):
        """Test that unchanged trees produce only start/stop notifications."""
        write_file(tmp_path / "a.txt")
        (tmp_path / "sub").mkdir()
        write_file(tmp_path / "sub" / "b.txt")
        observer = make_observer()

        observer.check_and_notify()
        observer.check_and_notify()

        assert listener.events == []
        assert listener.scans_started == 2
        assert listener.scans_finished == 2

    def test_file_create(self, tmp_path, listener, make_observer):
        """Test detection of a new file."""
        observer = make_observer()

        write_file(tmp_path / "a.txt")
        observer.check_and_notify()

        assert listener.created_files == [tmp_path / "a.txt"]
        assert listener.changed_files == []
        assert listener.deleted_files == []

    def test_file_delete(self, tmp_path, listener, make_observer):
        """Test detection of a deleted file, reported only once."""
        write_file(tmp_path / "a.txt")
        observer = make_observer()

        (tmp_path / "a.txt").unlink()
        observer.check_and_notify()

        assert listener.deleted_files == [tmp_path / "a.txt"]
        assert listener.created_files == []
        assert observer.root_entry.children == []

        observer.check_and_notify()
        assert listener.events == []

    def test_rewrite_without_attribute_change(self, tmp_path, listener, make_observer):
        """Test that identical content, time and length is not a change."""
        write_file(tmp_path / "a.txt", "same")
        observer = make_observer()

        write_file(tmp_path / "a.txt", "same")
        observer.check_and_notify()

        assert listener.changed_files == []

    def test_touch_is_a_change(self, tmp_path, listener, make_observer):
        """Test that a newer modification time alone is a change."""
        write_file(tmp_path / "a.txt", "same")
        observer = make_observer()

        os.utime(tmp_path / "a.txt", (MTIME + 60, MTIME + 60))
        observer.check_and_notify()

        assert listener.changed_files == [tmp_path / "a.txt"]
        assert len(listener.events) == 1

        observer.check_and_notify()
        assert listener.events == []

    def test_length_change_is_a_change(self, tmp_path, listener, make_observer):
        """Test that a different length with the same time is a change."""
        write_file(tmp_path / "a.txt", "short")
        observer = make_observer()

        write_file(tmp_path / "a.txt", "much longer content")
        observer.check_and_notify()

        assert listener.changed_files == [tmp_path / "a.txt"]

    def test_siblings_created_in_name_order(self, tmp_path, listener, make_observer):
        """Test that creations among siblings follow comparator order."""
        observer = make_observer()

        for name in ["c.txt", "a.txt", "b.txt"]:
            write_file(tmp_path / name)
        observer.check_and_notify()

        assert listener.created_files == [tmp_path / "a.txt", tmp_path / "b.txt", tmp_path / "c.txt"]

    def test_mixed_sibling_changes_in_order(self, tmp_path, listener, make_observer):
        """Test the merge of deletions, matches and creations among siblings."""
        write_file(tmp_path / "a.txt")
        write_file(tmp_path / "c.txt")
        observer = make_observer()

        (tmp_path / "a.txt").unlink()
        write_file(tmp_path / "b.txt")
        os.utime(tmp_path / "c.txt", (MTIME + 60, MTIME + 60))
        write_file(tmp_path / "d.txt")
        observer.check_and_notify()

        assert event_log(listener) == [
            ("deleted", False, tmp_path / "a.txt"),
            ("created", False, tmp_path / "b.txt"),
            ("modified", False, tmp_path / "c.txt"),
            ("created", False, tmp_path / "d.txt"),
        ]
        assert [child.name for child in observer.root_entry.children] == ["b.txt", "c.txt", "d.txt"]

    def test_directory_create_precedes_descendants(self, tmp_path, listener, make_observer):
        """Test that a new directory is reported before its contents."""
        observer = make_observer()

        sub = tmp_path / "sub"
        (sub / "nested").mkdir(parents=True)
        write_file(sub / "nested" / "deep.txt")
        write_file(sub / "x.txt")
        write_file(sub / "y.txt")
        observer.check_and_notify()

        assert event_log(listener) == [
            ("created", True, sub),
            ("created", True, sub / "nested"),
            ("created", False, sub / "nested" / "deep.txt"),
            ("created", False, sub / "x.txt"),
            ("created", False, sub / "y.txt"),
        ]

    def test_directory_delete_follows_descendants(self, tmp_path, listener, make_observer):
        """Test that a deleted directory is reported after its contents."""
        sub = tmp_path / "sub"
        (sub / "inner").mkdir(parents=True)
        write_file(sub / "a.txt")
        write_file(sub / "inner" / "b.txt")
        observer = make_observer()

        shutil.rmtree(sub)
        observer.check_and_notify()

        assert event_log(listener) == [
            ("deleted", False, sub / "a.txt"),
            ("deleted", False, sub / "inner" / "b.txt"),
            ("deleted", True, sub / "inner"),
            ("deleted", True, sub),
        ]
        assert observer.root_entry.children == []

    def test_nested_create_reports_directory_change(self, tmp_path, listener, make_observer):
        """Test that adding a file inside a tracked directory is seen below it."""
        sub = tmp_path / "sub"
        sub.mkdir()
        os.utime(sub, (MTIME, MTIME))
        observer = make_observer()

        write_file(sub / "new.txt")
        os.utime(sub, (MTIME + 60, MTIME + 60))
        observer.check_and_notify()

        assert listener.changed_directories == [sub]
        assert listener.created_files == [sub / "new.txt"]
        assert event_log(listener)[0] == ("modified", True, sub)

    def test_file_replaced_by_directory(self, tmp_path, listener, make_observer):
        """Test that a type change on a matched name is a directory change."""
        write_file(tmp_path / "thing")
        observer = make_observer()

        (tmp_path / "thing").unlink()
        (tmp_path / "thing").mkdir()
        observer.check_and_notify()

        assert event_log(listener) == [("modified", True, tmp_path / "thing")]
        assert observer.root_entry.children[0].is_directory

    def test_filter_excludes_entries(self, tmp_path, listener, make_observer):
        """Test that filtered entries are never reported or tracked."""
        observer = make_observer(file_filter=lambda path: path.suffix != ".tmp")

        write_file(tmp_path / "keep.txt")
        write_file(tmp_path / "skip.tmp")
        observer.check_and_notify()

        assert listener.created_files == [tmp_path / "keep.txt"]
        assert [child.name for child in observer.root_entry.children] == ["keep.txt"]

    def test_case_only_rename_matches_when_insensitive(self, tmp_path, listener, make_observer):
        """Test that a case-only rename is not a create/delete pair when case is ignored."""
        write_file(tmp_path / "A.TXT")
        observer = make_observer(case_sensitivity=CaseSensitivity.INSENSITIVE)

        os.rename(tmp_path / "A.TXT", tmp_path / "a.txt")
        observer.check_and_notify()

        assert listener.events == []
        assert observer.root_entry.children[0].name == "a.txt"

    def test_case_only_rename_is_replacement_when_sensitive(self, tmp_path, listener, make_observer):
        """Test that a case-only rename is a delete and a create when case matters."""
        write_file(tmp_path / "A.TXT")
        observer = make_observer()

        os.rename(tmp_path / "A.TXT", tmp_path / "a.txt")
        observer.check_and_notify()

        assert listener.deleted_files == [tmp_path / "A.TXT"]
        assert listener.created_files == [tmp_path / "a.txt"]

    def test_root_deleted_and_recreated(self, tmp_path, listener, make_observer):
        """Test that removing the root cascades deletes once."""
        root = tmp_path / "watched"
        (root / "sub").mkdir(parents=True)
        write_file(root / "sub" / "a.txt")
        observer = make_observer(root)

        shutil.rmtree(root)
        observer.check_and_notify()

        assert event_log(listener) == [
            ("deleted", False, root / "sub" / "a.txt"),
            ("deleted", True, root / "sub"),
        ]

        observer.check_and_notify()
        assert listener.events == []

        root.mkdir()
        write_file(root / "b.txt")
        observer.check_and_notify()
        assert listener.created_files == [root / "b.txt"]

    def test_root_missing_throughout(self, tmp_path, listener, make_observer):
        """Test that a root that never existed produces no events until created."""
        root = tmp_path / "missing"
        observer = make_observer(root)

        observer.check_and_notify()
        assert listener.events == []
        assert listener.scans_finished == 1

        root.mkdir()
        write_file(root / "a.txt")
        observer.check_and_notify()
        assert listener.created_files == [root / "a.txt"]
        assert observer.root_entry.exists

        shutil.rmtree(root)
        observer.check_and_notify()
        assert listener.deleted_files == [root / "a.txt"]
        assert observer.root_entry.children == []
        assert not observer.root_entry.exists

        root.mkdir()
        write_file(root / "a.txt")
        observer.check_and_notify()
        assert listener.created_files == [root / "a.txt"]
        assert listener.changed_files == []

    def test_root_deleted_without_initialize(self, tmp_path, listener):
        """Test that a root first seen by a scan still cascades deletes."""
        root = tmp_path / "watched"
        root.mkdir()
        write_file(root / "a.txt")
        observer = FileAlterationObserver(root, case_sensitivity=CaseSensitivity.SENSITIVE)
        observer.add_listener(listener)

        observer.check_and_notify()
        assert listener.created_files == [root / "a.txt"]

        shutil.rmtree(root)
        observer.check_and_notify()
        assert listener.deleted_files == [root / "a.txt"]

    def test_unreadable_directory_treated_as_empty(self, tmp_path, listener, make_observer):
        """Test that a listing failure reports the tracked contents as deleted."""
        sub = tmp_path / "sub"
        sub.mkdir()
        write_file(sub / "a.txt")
        filesystem = DenyingFileSystem()
        observer = make_observer(filesystem=filesystem)

        filesystem.denied.add(sub)
        observer.check_and_notify()

        assert event_log(listener) == [("deleted", False, sub / "a.txt")]
        assert observer.root_entry.children[0].children == []

        filesystem.denied.clear()
        observer.check_and_notify()
        assert listener.created_files == [sub / "a.txt"]

    def test_failing_listener_does_not_stop_others(self, tmp_path, listener):
        """Test that a listener error is contained."""
        failing = Mock(spec=IFileAlterationListener)
        failing.on_file_create.side_effect = RuntimeError("listener bug")

        observer = FileAlterationObserver(tmp_path, case_sensitivity="sensitive")
        observer.add_listener(failing)
        observer.add_listener(listener)
        observer.initialize()

        write_file(tmp_path / "a.txt")
        observer.check_and_notify()

        failing.on_file_create.assert_called_once_with(tmp_path / "a.txt")
        failing.on_stop.assert_called_once_with(observer)
        assert listener.created_files == [tmp_path / "a.txt"]

    def test_listeners_notified_in_registration_order(self, tmp_path):
        """Test that every listener sees each event, in registration order."""
        calls = []
        first = Mock(spec=IFileAlterationListener)
        first.on_file_create.side_effect = lambda path: calls.append(("first", path))
        second = Mock(spec=IFileAlterationListener)
        second.on_file_create.side_effect = lambda path: calls.append(("second", path))

        observer = FileAlterationObserver(tmp_path, case_sensitivity="sensitive")
        observer.add_listener(first)
        observer.add_listener(second)
        observer.initialize()

        write_file(tmp_path / "a.txt")
        observer.check_and_notify()

        assert calls == [("first", tmp_path / "a.txt"), ("second", tmp_path / "a.txt")]
        first.on_start.assert_called_once_with(observer)
        second.on_stop.assert_called_once_with(observer)

    def test_listener_removed_during_scan(self, tmp_path, listener):
        """Test that removing a listener from a callback does not disturb the scan."""
        observer = FileAlterationObserver(tmp_path, case_sensitivity="sensitive")
        removing = Mock(spec=IFileAlterationListener)
        removing.on_file_create.side_effect = lambda path: observer.remove_listener(removing)
        observer.add_listener(removing)
        observer.add_listener(listener)
        observer.initialize()

        write_file(tmp_path / "a.txt")
        write_file(tmp_path / "b.txt")
        observer.check_and_notify()

        assert listener.created_files == [tmp_path / "a.txt", tmp_path / "b.txt"]
        assert observer.listeners == (listener,)

    def test_custom_entry_factory(self, tmp_path, listener, make_observer):
        """Test that child snapshots come from the injected factory."""

        class AnnotatedEntry(FileEntry):
            annotation: str = ""

        created_for = []

        def factory(parent: FileEntry, path: Path) -> FileEntry:
            created_for.append(path)
            entry = AnnotatedEntry(path=path, annotation=f"level-{parent.level + 1}")
            entry._parent = parent
            return entry

        (tmp_path / "sub").mkdir()
        write_file(tmp_path / "sub" / "a.txt")
        observer = make_observer(entry_factory=factory)

        sub_entry = observer.root_entry.children[0]
        assert created_for == [tmp_path / "sub", tmp_path / "sub" / "a.txt"]
        assert isinstance(sub_entry, AnnotatedEntry)
        assert sub_entry.children[0].annotation == "level-2"
        assert sub_entry.children[0].level == 2
