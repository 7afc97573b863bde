"""
Live filesystem state of a single path.

A PathStat is what the filesystem collaborator reports for a path at the
moment it is read. Snapshots compare themselves against it on every scan.
"""

from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

EPOCH = datetime.fromtimestamp(0, tz=UTC)


class PathStat(BaseModel):
    """Observed attributes of one filesystem node."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Path the attributes were read from")
    exists: bool = Field(default=False, description="Whether the path exists")
    is_directory: bool = Field(default=False, description="Whether the path is a directory")
    last_modified: datetime = Field(default=EPOCH, description="Last modification time (UTC)")
    length: int = Field(default=0, ge=0, description="Size in bytes, zero for directories")

    @classmethod
    def missing(cls, path: Path) -> "PathStat":
        """State reported for a path that does not exist."""
        return cls(path=path)
