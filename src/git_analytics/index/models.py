"""In-memory change index: arena-style mappings keyed by path, hash and email."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class AuthorLines:
    added: int = 0
    removed: int = 0

    @property
    def net(self) -> int:
        """Net lines contributed, floored at 0."""
        return max(0, self.added - self.removed)


@dataclass
class FileAggregate:
    path: str
    additions: int = 0
    deletions: int = 0
    commits: int = 0
    last_changed: Optional[datetime] = None
    authors: dict[str, AuthorLines] = field(default_factory=dict)  # email -> lines

    @property
    def lines_changed(self) -> int:
        return self.additions + self.deletions


@dataclass
class ContributorAggregate:
    email: str
    name: str
    commits: int = 0
    additions: int = 0
    deletions: int = 0
    last_seen: Optional[datetime] = None


@dataclass(frozen=True)
class CommitRecord:
    hash: str
    timestamp: datetime
    author_email: str
    files: frozenset[str]  # canonical, non-excluded paths


@dataclass
class ChangeIndex:
    """Everything the metric computers read.

    ``commits`` holds every commit in the window, including ones whose files
    were all excluded (their ``files`` is empty).
    """

    files: dict[str, FileAggregate] = field(default_factory=dict)
    commits: dict[str, CommitRecord] = field(default_factory=dict)
    contributors: dict[str, ContributorAggregate] = field(default_factory=dict)
    names: dict[str, str] = field(default_factory=dict)  # email -> latest display name
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.commits

    def file_commit_count(self, path: str) -> int:
        aggregate = self.files.get(path)
        return aggregate.commits if aggregate else 0
