"""Commit reading: stream git history as Commit records."""

from .models import ChangeType, Commit, FileDelta, LastCommit
from .reader import GitRepository, parse_log
from .rename import detect_rename

__all__ = [
    "ChangeType",
    "Commit",
    "FileDelta",
    "LastCommit",
    "GitRepository",
    "parse_log",
    "detect_rename",
]
