"""
git-analytics - change analytics mined from a repository's commit history

Streams `git log` once per query, folds it into a rename-aware index and
computes hotspots, ownership, contributor, coupling and activity metrics
over a time window.
"""

__version__ = "0.1.0"
__author__ = "Naman Agarwal"

from .config import EngineConfig, load_config
from .exceptions import (
    Cancelled,
    GitAnalyticsError,
    InvalidPattern,
    InvalidRange,
    QueryError,
    RepositoryUnavailable,
    UnknownMetric,
)
from .history import GitRepository
from .query import IndexCache, MetricKind, QueryEngine

__all__ = [
    "QueryEngine",  # Main entry point
    "MetricKind",
    "IndexCache",
    "EngineConfig",
    "load_config",
    "GitRepository",
    "GitAnalyticsError",
    "QueryError",
    "RepositoryUnavailable",
    "InvalidRange",
    "InvalidPattern",
    "UnknownMetric",
    "Cancelled",
]
