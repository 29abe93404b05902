"""Exception hierarchy for git-analytics."""

from .base import ErrorCode, GitAnalyticsError
from .config import ConfigFileError, ConfigurationError, InvalidConfigError
from .query import (
    Cancelled,
    HistoryReadError,
    InvalidPattern,
    InvalidRange,
    QueryError,
    RepositoryUnavailable,
    UnknownMetric,
)

__all__ = [
    "ErrorCode",
    "GitAnalyticsError",
    "QueryError",
    "RepositoryUnavailable",
    "InvalidRange",
    "InvalidPattern",
    "UnknownMetric",
    "HistoryReadError",
    "Cancelled",
    "ConfigurationError",
    "InvalidConfigError",
    "ConfigFileError",
]
