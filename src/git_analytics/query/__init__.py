"""Query facade over the analytics engine."""

from .cache import IndexCache
from .dates import parse_range
from .engine import MetricKind, QueryEngine, relative_time
from .prefetch import prefetch

__all__ = [
    "IndexCache",
    "MetricKind",
    "QueryEngine",
    "parse_range",
    "prefetch",
    "relative_time",
]
