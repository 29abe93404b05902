"""Contributor leaderboard."""

from __future__ import annotations

from typing import Optional

from ..index.models import ChangeIndex
from .models import Contributor


def contributor_sort_key(c: Contributor) -> tuple:
    return (-c.commits, -c.additions, c.author_name, c.author_email)


def aggregate_contributors(index: ChangeIndex, limit: Optional[int] = None) -> list[Contributor]:
    """Per-email totals over commits touching at least one non-excluded file.

    Identity is the email address; the display name is the one used on the
    author's most recent commit in the window.
    """
    result = [
        Contributor(
            author_name=c.name,
            author_email=c.email,
            commits=c.commits,
            additions=c.additions,
            deletions=c.deletions,
        )
        for c in index.contributors.values()
    ]
    result.sort(key=contributor_sort_key)
    return result[:limit] if limit else result
