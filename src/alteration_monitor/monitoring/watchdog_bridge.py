"""
Bridge from observer callbacks to watchdog event handlers.

Lets an existing watchdog FileSystemEventHandler be driven by the polling
observer instead of a native watchdog Observer.
"""

import logging
from pathlib import Path

from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)

from alteration_monitor.monitoring.listeners import FileAlterationListenerAdaptor

logger = logging.getLogger(__name__)


class WatchdogEventListener(FileAlterationListenerAdaptor):
    """Listener translating each notification into a watchdog event."""

    def __init__(self, handler: FileSystemEventHandler):
        """
        Initialize the bridge.

        Args:
            handler: watchdog handler receiving the translated events
        """
        self.handler = handler

    def _dispatch(self, event: FileSystemEvent) -> None:
        logger.debug("Dispatching %s to %s", event, type(self.handler).__name__)
        self.handler.dispatch(event)

    def on_directory_create(self, directory: Path) -> None:
        self._dispatch(DirCreatedEvent(str(directory)))

    def on_directory_change(self, directory: Path) -> None:
        self._dispatch(DirModifiedEvent(str(directory)))

    def on_directory_delete(self, directory: Path) -> None:
        self._dispatch(DirDeletedEvent(str(directory)))

    def on_file_create(self, file: Path) -> None:
        self._dispatch(FileCreatedEvent(str(file)))

    def on_file_change(self, file: Path) -> None:
        self._dispatch(FileModifiedEvent(str(file)))

    def on_file_delete(self, file: Path) -> None:
        self._dispatch(FileDeletedEvent(str(file)))
