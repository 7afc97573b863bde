"""
Snapshot model for entries in an observed directory tree.

A FileEntry records what a scan last saw for one filesystem node. Observers
keep a tree of these and compare each entry against the live state on every
scan to decide which change events to fire.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator

from alteration_monitor.models.exceptions import ConfigurationError
from alteration_monitor.models.path_stat import EPOCH, PathStat


class FileEntry(BaseModel):
    """
    Recorded state of one file or directory at the time of the last scan.

    Entries form a tree: a directory entry owns the entries of its children,
    and each non-root entry keeps a reference to its parent for depth lookups.
    The path is fixed for the lifetime of the entry; every other attribute is
    overwritten by refresh().
    """

    path: Path = Field(..., description="Path this entry was created for")
    name: str = Field(default="", description="Entry name as last observed")
    exists: bool = Field(default=False, description="Whether the path existed at the last refresh")
    is_directory: bool = Field(default=False, description="Whether the path was a directory")
    last_modified: datetime = Field(default=EPOCH, description="Last modification time (UTC)")
    length: int = Field(default=0, ge=0, description="Size in bytes for existing files")
    children: list["FileEntry"] = Field(default_factory=list, description="Snapshots of the direct children")

    _parent: Optional["FileEntry"] = PrivateAttr(default=None)

    @field_validator('path', mode='before')
    @classmethod
    def validate_path(cls, v: Any) -> Any:
        """Reject missing root paths before pydantic coerces them."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ConfigurationError(
                "File is missing",
                config_key="path",
                expected_type="str | os.PathLike",
                actual_value=v,
            )
        return v

    @model_validator(mode='after')
    def default_name(self):
        """Use the final path component when no name is given."""
        if not self.name:
            self.name = self.path.name
        return self

    @property
    def parent(self) -> Optional["FileEntry"]:
        """The entry owning this one, or None for a root entry."""
        return self._parent

    @property
    def level(self) -> int:
        """Depth of this entry in its tree; the root is at level 0."""
        return 0 if self._parent is None else self._parent.level + 1

    def new_child_instance(self, path: Path) -> "FileEntry":
        """
        Create a fresh child entry of the same type, parented to this entry.

        The child carries no observed state until refresh() is called on it.

        Args:
            path: Path of the child node

        Returns:
            New, un-refreshed child entry
        """
        child = type(self)(path=path)
        child._parent = self
        return child

    def refresh(self, state: PathStat) -> bool:
        """
        Overwrite the recorded attributes from the live filesystem state.

        Args:
            state: Current state of this entry's path

        Returns:
            True if existence, type, modification time or length changed
        """
        original = (self.exists, self.is_directory, self.last_modified, self.length)

        self.name = state.path.name
        self.exists = state.exists
        self.is_directory = state.exists and state.is_directory
        self.last_modified = state.last_modified if state.exists else EPOCH
        self.length = state.length if state.exists and not state.is_directory else 0

        return (self.exists, self.is_directory, self.last_modified, self.length) != original

    def __eq__(self, other: object) -> bool:
        # Field-wise only; comparing parents would recurse back into children
        if not isinstance(other, FileEntry):
            return NotImplemented
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __str__(self) -> str:
        kind = "dir" if self.is_directory else "file"
        return f"FileEntry({kind}: {self.path}, children={len(self.children)})"
