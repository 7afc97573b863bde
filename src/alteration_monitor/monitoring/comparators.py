"""
Name comparators used to sort directory listings and match entries.

Two entries are treated as the same node when their comparator returns 0,
so the comparison mode decides whether a case-only rename is a match.
"""

import os
from collections.abc import Callable
from pathlib import PurePath

from alteration_monitor.models import CaseSensitivity

NameComparator = Callable[[PurePath, PurePath], int]


def _cmp(a: str, b: str) -> int:
    return (a > b) - (a < b)


def compare_names(a: PurePath, b: PurePath) -> int:
    """Case-sensitive comparison of the final path components."""
    return _cmp(a.name, b.name)


def compare_names_insensitive(a: PurePath, b: PurePath) -> int:
    """Case-insensitive comparison of the final path components."""
    return _cmp(a.name.casefold(), b.name.casefold())


def is_system_case_sensitive() -> bool:
    """Whether the host platform treats file names case-sensitively."""
    return os.name != "nt"


def compare_names_system(a: PurePath, b: PurePath) -> int:
    """Compare names following the host platform's case convention."""
    if is_system_case_sensitive():
        return compare_names(a, b)
    return compare_names_insensitive(a, b)


def get_name_comparator(case_sensitivity: CaseSensitivity | str | None) -> NameComparator:
    """
    Resolve the comparator for a comparison mode.

    Args:
        case_sensitivity: Comparison mode; None selects the system convention

    Returns:
        Three-way comparator over path names
    """
    if case_sensitivity is None:
        return compare_names_system

    mode = CaseSensitivity(case_sensitivity)
    if mode == CaseSensitivity.INSENSITIVE:
        return compare_names_insensitive
    if mode == CaseSensitivity.SENSITIVE:
        return compare_names
    return compare_names_system
