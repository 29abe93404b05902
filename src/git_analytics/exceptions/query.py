"""Query-time exceptions: bad inputs, unreadable repositories, cancellation."""

from datetime import date
from pathlib import Path
from typing import Optional, Union

from .base import ErrorCode, GitAnalyticsError


class QueryError(GitAnalyticsError):
    """Base class for errors that fail a query."""

    pass


class RepositoryUnavailable(QueryError):
    """Raised when the location is missing, unreadable, or not a git repository."""

    code = ErrorCode.GA200

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Repository unavailable: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class InvalidRange(QueryError):
    """Raised when a date range is malformed or from > to."""

    code = ErrorCode.GA100

    def __init__(
        self,
        reason: str,
        start: Optional[Union[str, date]] = None,
        end: Optional[Union[str, date]] = None,
    ):
        details = {"reason": reason}
        if start is not None:
            details["from"] = str(start)
        if end is not None:
            details["to"] = str(end)
        super().__init__(f"Invalid date range: {reason}", details=details)
        self.reason = reason
        self.start = start
        self.end = end


class InvalidPattern(QueryError):
    """Raised when an exclude pattern is malformed."""

    code = ErrorCode.GA101

    def __init__(self, pattern: str, reason: str):
        super().__init__(
            f"Invalid exclude pattern: {pattern!r}",
            details={"pattern": pattern, "reason": reason},
        )
        self.pattern = pattern
        self.reason = reason


class UnknownMetric(QueryError):
    """Raised when a query names a metric the engine does not compute."""

    code = ErrorCode.GA102

    def __init__(self, metric: str, supported: list[str]):
        super().__init__(
            f"Unknown metric: {metric}",
            details={"metric": metric, "supported": ", ".join(supported)},
        )
        self.metric = metric
        self.supported = supported


class HistoryReadError(QueryError):
    """Raised when git history cannot be streamed completely.

    Partial history would silently skew every aggregate, so the query is
    aborted instead of dropping commits.
    """

    code = ErrorCode.GA201

    def __init__(self, reason: str, commit: Optional[str] = None):
        details = {"reason": reason}
        if commit:
            details["commit"] = commit
        super().__init__(f"Failed to read git history: {reason}", details=details)
        self.reason = reason
        self.commit = commit


class Cancelled(GitAnalyticsError):
    """Raised when the caller's cancellation signal stops a query.

    Not a QueryError: callers should not report it as a failure.
    """

    code = ErrorCode.GA400

    def __init__(self, stage: str = "query"):
        super().__init__("Query cancelled", details={"stage": stage})
        self.stage = stage
