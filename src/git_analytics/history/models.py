"""Data models for commits read from git history."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class ChangeType(str, Enum):
    """How a commit touched a file."""

    ADD = "add"
    MODIFY = "modify"
    DELETE = "delete"
    RENAME = "rename"


@dataclass(frozen=True)
class FileDelta:
    path: str  # post-rename path
    additions: int
    deletions: int
    change_type: ChangeType = ChangeType.MODIFY
    old_path: Optional[str] = None  # set for renames only

    @property
    def lines_changed(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class Commit:
    hash: str
    author_name: str
    author_email: str
    timestamp: datetime  # UTC, timezone-aware
    parent_count: int = 1
    subject: str = ""
    deltas: tuple[FileDelta, ...] = field(default_factory=tuple)

    @property
    def is_merge(self) -> bool:
        return self.parent_count >= 2

    @property
    def is_root(self) -> bool:
        return self.parent_count == 0


@dataclass(frozen=True)
class LastCommit:
    hash: str
    author_name: str
    author_email: str
    timestamp: datetime
    subject: str
