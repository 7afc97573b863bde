"""
Host filesystem backend.

Reads path state with os.stat and directory listings with os.scandir,
mapping missing or unreadable paths to empty results instead of errors.
"""

import logging
import os
import stat
from datetime import UTC, datetime
from pathlib import Path

from alteration_monitor.core.interfaces import FileFilter, IFileSystem
from alteration_monitor.models import PathStat

logger = logging.getLogger(__name__)


class LocalFileSystem(IFileSystem):
    """IFileSystem implementation backed by the local operating system."""

    def exists(self, path: Path) -> bool:
        return os.path.exists(path)

    def stat(self, path: Path) -> PathStat:
        try:
            st = os.stat(path)
        except FileNotFoundError:
            return PathStat.missing(path)
        except OSError as e:
            logger.debug("Cannot stat %s, treating it as missing: %s", path, e)
            return PathStat.missing(path)

        is_directory = stat.S_ISDIR(st.st_mode)
        return PathStat(
            path=path,
            exists=True,
            is_directory=is_directory,
            last_modified=datetime.fromtimestamp(st.st_mtime, tz=UTC),
            length=0 if is_directory else st.st_size,
        )

    def list_children(self, path: Path, file_filter: FileFilter | None = None) -> list[Path]:
        if not os.path.isdir(path):
            return []

        try:
            with os.scandir(path) as it:
                children = [path / entry.name for entry in it]
        except OSError as e:
            logger.debug("Cannot list %s, treating it as empty: %s", path, e)
            return []

        if file_filter is not None:
            children = [child for child in children if file_filter(child)]
        return children
