"""Hotspot ranking: raw churn and recency-weighted churn per file."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..index.models import ChangeIndex
from .models import FileHotspot, TemporalHotspot

DEFAULT_HALF_LIFE_DAYS = 30.0
_SECONDS_PER_DAY = 86400


def hotspot_sort_key(h: FileHotspot) -> tuple:
    return (-h.lines_changed, -h.commits, h.path)


def temporal_sort_key(h: TemporalHotspot) -> tuple:
    return (-h.score, -h.commits, h.path)


def rank_hotspots(index: ChangeIndex, limit: Optional[int] = None) -> list[FileHotspot]:
    """Files ordered by lines changed, then commits, then path."""
    result = [
        FileHotspot(
            path=f.path,
            lines_changed=f.lines_changed,
            additions=f.additions,
            deletions=f.deletions,
            commits=f.commits,
        )
        for f in index.files.values()
    ]
    result.sort(key=hotspot_sort_key)
    return result[:limit] if limit else result


def decay(days_since: float, half_life_days: float = DEFAULT_HALF_LIFE_DAYS) -> float:
    """Hyperbolic recency weight: 1 at day 0, 0.5 at one half-life, never 0."""
    return 1.0 / (1.0 + max(0.0, days_since) / half_life_days)


def score_temporal_hotspots(
    index: ChangeIndex,
    now: Optional[datetime] = None,
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
    limit: Optional[int] = None,
) -> list[TemporalHotspot]:
    """Files ranked by ``lines_changed * decay(days since last change)``.

    ``now`` defaults to the index's window end, so historical queries give
    the same answer whenever they run.
    """
    reference = now or index.end
    result = []
    for f in index.files.values():
        last = f.last_changed
        days_since = 0
        if reference is not None and last is not None:
            days_since = max(0, int((reference - last).total_seconds() // _SECONDS_PER_DAY))
        result.append(
            TemporalHotspot(
                path=f.path,
                lines_changed=f.lines_changed,
                additions=f.additions,
                deletions=f.deletions,
                commits=f.commits,
                last_changed=last.date().isoformat() if last else "",
                days_since=days_since,
                score=f.lines_changed * decay(days_since, half_life_days),
            )
        )
    result.sort(key=temporal_sort_key)
    return result[:limit] if limit else result
