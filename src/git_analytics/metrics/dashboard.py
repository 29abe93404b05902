"""Window-wide totals computed straight from the commit stream."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Iterable, Optional, Sequence, Union

from ..exceptions import Cancelled
from ..history.models import Commit
from ..index.builder import RenameResolver
from ..index.patterns import ExcludeMatcher
from .models import DashboardStats


def compute_dashboard_stats(
    commits: Iterable[Commit],
    exclude: Union[ExcludeMatcher, Sequence[str], None] = None,
    cancel: Optional[threading.Event] = None,
) -> DashboardStats:
    """Totals for the summary cards without building a full index.

    ``commits`` and ``contributors`` count all activity in the window;
    line totals and ``files_changed`` leave out excluded files, and renamed
    files count once.
    """
    matcher = exclude if isinstance(exclude, ExcludeMatcher) else ExcludeMatcher(exclude)
    renames = RenameResolver()
    hashes: set[str] = set()
    emails: set[str] = set()
    changes: list[tuple[str, datetime, str, int, int]] = []

    for commit in commits:
        if cancel is not None and cancel.is_set():
            raise Cancelled("computing dashboard stats")
        if commit.hash in hashes:
            continue
        hashes.add(commit.hash)
        emails.add(commit.author_email)
        for delta in commit.deltas:
            if delta.old_path:
                renames.add(delta.old_path, delta.path, commit.timestamp, commit.hash)
            changes.append(
                (delta.path, commit.timestamp, commit.hash, delta.additions, delta.deletions)
            )

    additions = deletions = 0
    files: set[str] = set()
    for raw_path, when, sha, added, removed in changes:
        path = renames.resolve(raw_path, when, sha)
        if matcher.matches(path):
            continue
        files.add(path)
        additions += added
        deletions += removed

    return DashboardStats(
        commits=len(hashes),
        contributors=len(emails),
        additions=additions,
        deletions=deletions,
        files_changed=len(files),
    )
