"""Record of a single change dispatched by an observer."""

import time
from pathlib import Path


class FileChangeEvent:
    """Represents a file system change event."""

    def __init__(self, event_type: str, file_path: Path, is_directory: bool = False):
        self.event_type = event_type  # 'created', 'modified', 'deleted'
        self.file_path = file_path
        self.is_directory = is_directory
        self.timestamp = time.time()

    def __str__(self) -> str:
        kind = "directory" if self.is_directory else "file"
        return f"FileChangeEvent({self.event_type} {kind}: {self.file_path})"

    def __repr__(self) -> str:
        return (
            f"FileChangeEvent(event_type='{self.event_type}', "
            f"file_path='{self.file_path}', is_directory={self.is_directory})"
        )
