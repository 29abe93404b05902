"""Per-file ownership: who contributed the net lines of each file."""

from __future__ import annotations

from typing import Optional

from ..index.models import ChangeIndex
from .models import FileOwnership


def ownership_sort_key(o: FileOwnership) -> tuple:
    return (-o.top_author_pct, -o.total_lines, o.path)


def analyze_ownership(index: ChangeIndex, limit: Optional[int] = None) -> list[FileOwnership]:
    """Top and second author by net lines (added - removed, floored at 0).

    Files whose authors have no net lines at all are omitted: ownership is
    undefined for them. ``contributor_count`` still counts every author with
    a recorded delta.
    """
    result = []
    for f in index.files.values():
        if not f.authors:
            continue
        ranked = sorted(
            ((lines.net, email) for email, lines in f.authors.items()),
            key=lambda item: (-item[0], item[1]),
        )
        total = sum(net for net, _ in ranked)
        if total == 0:
            continue

        top_net, top_email = ranked[0]
        entry = FileOwnership(
            path=f.path,
            top_author_name=index.names.get(top_email, top_email),
            top_author_email=top_email,
            top_author_pct=top_net / total,
            second_author_name="",
            second_author_email="",
            second_author_pct=0.0,
            contributor_count=len(f.authors),
            total_lines=total,
        )
        if len(ranked) >= 2:
            second_net, second_email = ranked[1]
            entry.second_author_name = index.names.get(second_email, second_email)
            entry.second_author_email = second_email
            entry.second_author_pct = second_net / total
        result.append(entry)

    result.sort(key=ownership_sort_key)
    return result[:limit] if limit else result
