"""Name comparison modes for ordering and matching directory entries."""

from enum import Enum


class CaseSensitivity(str, Enum):
    """How entry names are compared when listings are sorted and matched."""

    SYSTEM = "system"  # Follow the host platform convention
    SENSITIVE = "sensitive"
    INSENSITIVE = "insensitive"
