"""Query facade: validate inputs, stream history, index it, compute a metric.

The engine keeps no mutable state between calls apart from the optional
IndexCache, so one instance can serve several concurrent queries.

Example:
    >>> engine = QueryEngine()
    >>> engine.hotspots("/path/to/repo", "2025-01-01", "2025-04-01", exclude=["vendor/*"])
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Union

from ..config import DEFAULT_CONFIG, EngineConfig
from ..exceptions import UnknownMetric
from ..history.models import Commit
from ..history.reader import GitRepository
from ..index.builder import build_index
from ..index.models import ChangeIndex
from ..index.patterns import ExcludeMatcher, validate_patterns
from ..logging_config import get_logger
from ..metrics import (
    CoChangePair,
    Contributor,
    DashboardStats,
    FileHotspot,
    FileOwnership,
    HeatmapDay,
    HourBucket,
    RepoInfo,
    TemporalHotspot,
    aggregate_contributors,
    analyze_ownership,
    build_day_heatmap,
    build_hour_histogram,
    compute_dashboard_stats,
    detect_coupling,
    rank_hotspots,
    score_temporal_hotspots,
)
from .cache import IndexCache
from .dates import DateLike, parse_range
from .prefetch import prefetch

logger = get_logger(__name__)

RepoLike = Union[str, Path, GitRepository]


class MetricKind(str, Enum):
    REPO_INFO = "repo_info"
    DASHBOARD = "dashboard"
    HOTSPOTS = "hotspots"
    TEMPORAL_HOTSPOTS = "temporal_hotspots"
    OWNERSHIP = "ownership"
    CONTRIBUTORS = "contributors"
    COUPLING = "coupling"
    HEATMAP = "heatmap"
    HOURS = "hours"


def _metric_kind(metric: Union[str, MetricKind]) -> MetricKind:
    if isinstance(metric, MetricKind):
        return metric
    try:
        return MetricKind(str(metric).lower().replace("-", "_"))
    except ValueError:
        raise UnknownMetric(str(metric), [m.value for m in MetricKind])


class QueryEngine:
    """Request/response facade over reader, index and metric computers."""

    def __init__(self, config: Optional[EngineConfig] = None, cache: Optional[IndexCache] = None):
        self.config = config or DEFAULT_CONFIG
        if cache is None and self.config.index_cache_enabled:
            cache = IndexCache()
        self.cache = cache

    def run(
        self,
        repo: RepoLike,
        start: DateLike = None,
        end: DateLike = None,
        exclude: Optional[Sequence[str]] = None,
        metric: Union[str, MetricKind] = MetricKind.HOTSPOTS,
        cancel: Optional[threading.Event] = None,
        **options: Any,
    ) -> Any:
        """Run one query and return its typed result.

        Inputs are validated before any I/O: dates raise ``InvalidRange``,
        patterns raise ``InvalidPattern``, an unknown metric raises
        ``UnknownMetric``. Setting ``cancel`` aborts with ``Cancelled``;
        no partial result is ever returned.

        Options:
            limit: truncate list results
            author_email: restrict heatmap/hours to one author
            half_life_days: override the temporal decay half-life
            pairwise_cap, min_count: override coupling parameters
        """
        kind = _metric_kind(metric)
        since, until = parse_range(start, end)
        matcher = ExcludeMatcher(validate_patterns([*self.config.default_excludes, *(exclude or [])]))
        repository = self._open(repo)

        started = time.perf_counter()
        if kind is MetricKind.REPO_INFO:
            result: Any = self._repo_info(repository)
        elif kind is MetricKind.DASHBOARD:
            result = compute_dashboard_stats(
                self._stream(repository, since, until, cancel), matcher, cancel
            )
        else:
            index = self._index(repository, since, until, matcher, cancel)
            result = self._compute(kind, index, since, until, options)

        logger.debug(
            "%s on %s finished in %.3fs", kind.value, repository.path, time.perf_counter() - started
        )
        return result

    # --- per-metric conveniences -------------------------------------------------

    def repo_info(self, repo: RepoLike) -> RepoInfo:
        return self.run(repo, metric=MetricKind.REPO_INFO)

    def dashboard(self, repo: RepoLike, start: DateLike = None, end: DateLike = None,
                  exclude: Optional[Sequence[str]] = None,
                  cancel: Optional[threading.Event] = None) -> DashboardStats:
        return self.run(repo, start, end, exclude, MetricKind.DASHBOARD, cancel)

    def hotspots(self, repo: RepoLike, start: DateLike = None, end: DateLike = None,
                 exclude: Optional[Sequence[str]] = None, limit: Optional[int] = None,
                 cancel: Optional[threading.Event] = None) -> list[FileHotspot]:
        return self.run(repo, start, end, exclude, MetricKind.HOTSPOTS, cancel, limit=limit)

    def temporal_hotspots(self, repo: RepoLike, start: DateLike = None, end: DateLike = None,
                          exclude: Optional[Sequence[str]] = None, limit: Optional[int] = None,
                          half_life_days: Optional[float] = None,
                          cancel: Optional[threading.Event] = None) -> list[TemporalHotspot]:
        return self.run(repo, start, end, exclude, MetricKind.TEMPORAL_HOTSPOTS, cancel,
                        limit=limit, half_life_days=half_life_days)

    def ownership(self, repo: RepoLike, start: DateLike = None, end: DateLike = None,
                  exclude: Optional[Sequence[str]] = None, limit: Optional[int] = None,
                  cancel: Optional[threading.Event] = None) -> list[FileOwnership]:
        return self.run(repo, start, end, exclude, MetricKind.OWNERSHIP, cancel, limit=limit)

    def contributors(self, repo: RepoLike, start: DateLike = None, end: DateLike = None,
                     exclude: Optional[Sequence[str]] = None, limit: Optional[int] = None,
                     cancel: Optional[threading.Event] = None) -> list[Contributor]:
        return self.run(repo, start, end, exclude, MetricKind.CONTRIBUTORS, cancel, limit=limit)

    def coupling(self, repo: RepoLike, start: DateLike = None, end: DateLike = None,
                 exclude: Optional[Sequence[str]] = None, limit: Optional[int] = None,
                 min_count: Optional[int] = None, pairwise_cap: Optional[int] = None,
                 cancel: Optional[threading.Event] = None) -> list[CoChangePair]:
        return self.run(repo, start, end, exclude, MetricKind.COUPLING, cancel,
                        limit=limit, min_count=min_count, pairwise_cap=pairwise_cap)

    def heatmap(self, repo: RepoLike, start: DateLike = None, end: DateLike = None,
                exclude: Optional[Sequence[str]] = None, author_email: Optional[str] = None,
                cancel: Optional[threading.Event] = None) -> list[HeatmapDay]:
        return self.run(repo, start, end, exclude, MetricKind.HEATMAP, cancel,
                        author_email=author_email)

    def hours(self, repo: RepoLike, start: DateLike = None, end: DateLike = None,
              exclude: Optional[Sequence[str]] = None, author_email: Optional[str] = None,
              cancel: Optional[threading.Event] = None) -> list[HourBucket]:
        return self.run(repo, start, end, exclude, MetricKind.HOURS, cancel,
                        author_email=author_email)

    # --- internals ---------------------------------------------------------------

    def _open(self, repo: RepoLike) -> GitRepository:
        if isinstance(repo, GitRepository):
            return repo
        return GitRepository(repo, timeout=self.config.git_timeout_seconds)

    def _stream(
        self,
        repository: GitRepository,
        since: Optional[datetime],
        until: Optional[datetime],
        cancel: Optional[threading.Event],
    ) -> Iterator[Commit]:
        commits = repository.iter_commits(since, until, cancel)
        if self.config.reader_prefetch > 0:
            return prefetch(commits, self.config.reader_prefetch, cancel)
        return commits

    def _index(
        self,
        repository: GitRepository,
        since: Optional[datetime],
        until: Optional[datetime],
        matcher: ExcludeMatcher,
        cancel: Optional[threading.Event],
    ) -> ChangeIndex:
        key = None
        if self.cache is not None:
            head = repository.head_hash() or ""
            key = (repository.path, head, since, until, matcher.patterns)
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Index cache hit for %s", repository.path)
                return cached

        index = build_index(
            self._stream(repository, since, until, cancel),
            matcher,
            start=since,
            end=until,
            cancel=cancel,
        )
        if self.cache is not None and key is not None:
            self.cache.put(key, index)
        return index

    def _compute(
        self,
        kind: MetricKind,
        index: ChangeIndex,
        since: Optional[datetime],
        until: Optional[datetime],
        options: dict[str, Any],
    ) -> Any:
        limit = options.get("limit")
        author_email = options.get("author_email")

        if kind is MetricKind.HOTSPOTS:
            return rank_hotspots(index, limit=limit)
        if kind is MetricKind.TEMPORAL_HOTSPOTS:
            half_life = options.get("half_life_days") or self.config.half_life_days
            return score_temporal_hotspots(index, now=until, half_life_days=half_life, limit=limit)
        if kind is MetricKind.OWNERSHIP:
            return analyze_ownership(index, limit=limit)
        if kind is MetricKind.CONTRIBUTORS:
            return aggregate_contributors(index, limit=limit)
        if kind is MetricKind.COUPLING:
            return detect_coupling(
                index,
                pairwise_cap=options.get("pairwise_cap") or self.config.pairwise_cap,
                min_count=options.get("min_count") or self.config.min_cochanges,
                limit=limit or self.config.coupling_limit,
            )
        if kind is MetricKind.HEATMAP:
            return build_day_heatmap(index, since, until, author_email=author_email)
        if kind is MetricKind.HOURS:
            return build_hour_histogram(index, author_email=author_email)
        raise UnknownMetric(kind.value, [m.value for m in MetricKind])

    def _repo_info(self, repository: GitRepository) -> RepoInfo:
        head = repository.head_hash() or ""
        info = RepoInfo(
            name=repository.name,
            branch=repository.current_branch(),
            head_hash=head[:7],
        )
        last = repository.last_commit()
        if last is not None:
            info.last_author = last.author_name
            info.last_email = last.author_email
            info.last_message = last.subject
            info.last_commit_age = relative_time(last.timestamp)
        return info


def relative_time(when: datetime, now: Optional[datetime] = None) -> str:
    """Human age of a timestamp: "just now", "5 minutes ago", "3 days ago"."""
    now = now or datetime.now(timezone.utc)
    seconds = (now - when).total_seconds()
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        minutes = int(seconds // 60)
        return "1 minute ago" if minutes == 1 else f"{minutes} minutes ago"
    if seconds < 86400:
        hours = int(seconds // 3600)
        return "1 hour ago" if hours == 1 else f"{hours} hours ago"
    days = int(seconds // 86400)
    return "1 day ago" if days == 1 else f"{days} days ago"
