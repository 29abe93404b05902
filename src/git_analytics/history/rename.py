"""Rename detection over git's raw diff records.

git decides renames with its own similarity heuristic (``-M``, 50% by
default). This module only interprets the verdict, so the change index
never depends on how a rename was found.
"""

from typing import Optional, Sequence

from .models import ChangeType

_STATUS_TYPES = {
    "A": ChangeType.ADD,
    "C": ChangeType.ADD,
    "D": ChangeType.DELETE,
    "M": ChangeType.MODIFY,
    "T": ChangeType.MODIFY,
    "R": ChangeType.RENAME,
}


def change_type_for(status: str) -> ChangeType:
    """Map a raw status letter (``M``, ``A``, ``R087``...) to a ChangeType."""
    return _STATUS_TYPES.get(status[:1], ChangeType.MODIFY)


def detect_rename(status: str, paths: Sequence[str]) -> Optional[str]:
    """Return the old path if the raw record is a rename, else None.

    Rename records carry a similarity score and two paths::

        R087<TAB>old/path.py<TAB>new/path.py
    """
    if status.startswith("R") and len(paths) >= 2:
        return paths[0]
    return None
