"""Commit activity by calendar day and by hour of day (UTC)."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Optional, Union

from ..index.models import ChangeIndex, CommitRecord
from .models import HeatmapDay, HourBucket


def _selected(index: ChangeIndex, author_email: Optional[str]) -> list[CommitRecord]:
    if author_email:
        return [c for c in index.commits.values() if c.author_email == author_email]
    return list(index.commits.values())


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def build_day_heatmap(
    index: ChangeIndex,
    start: Optional[Union[date, datetime]] = None,
    end: Optional[Union[date, datetime]] = None,
    author_email: Optional[str] = None,
) -> list[HeatmapDay]:
    """One entry per UTC day in ``[start, end)``, zero-filled.

    Counts every commit in the window, independent of exclude patterns.
    Without bounds the window spans the first to the last commit day.
    """
    commits = _selected(index, author_email)
    counts = Counter(c.timestamp.date() for c in commits)

    start = start if start is not None else index.start
    end = end if end is not None else index.end
    if start is None:
        if not counts:
            return []
        first = min(counts)
    else:
        first = _as_date(start)
    if end is None:
        if not counts:
            return []
        stop = max(counts) + timedelta(days=1)
    else:
        end_date = _as_date(end)
        # A datetime end past midnight still includes that day's commits.
        if isinstance(end, datetime) and end.time() != datetime.min.time():
            end_date += timedelta(days=1)
        stop = end_date

    days = []
    day = first
    while day < stop:
        days.append(HeatmapDay(date=day.isoformat(), count=counts.get(day, 0)))
        day += timedelta(days=1)
    return days


def build_hour_histogram(index: ChangeIndex, author_email: Optional[str] = None) -> list[HourBucket]:
    """Commit counts for hours 0-23, zero-filled."""
    counts = Counter(c.timestamp.hour for c in _selected(index, author_email))
    return [HourBucket(hour=h, count=counts.get(h, 0)) for h in range(24)]
