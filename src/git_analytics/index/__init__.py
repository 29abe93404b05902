"""Change index: per-file, per-commit and per-author aggregates for one query."""

from .builder import RenameResolver, build_index
from .models import AuthorLines, ChangeIndex, CommitRecord, ContributorAggregate, FileAggregate
from .patterns import ExcludeMatcher, validate_patterns

__all__ = [
    "AuthorLines",
    "ChangeIndex",
    "CommitRecord",
    "ContributorAggregate",
    "FileAggregate",
    "ExcludeMatcher",
    "RenameResolver",
    "build_index",
    "validate_patterns",
]
