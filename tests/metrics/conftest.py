"""Fixtures for metric computer tests."""

from datetime import datetime, timedelta, timezone

import pytest

from git_analytics.history.models import Commit, FileDelta
from git_analytics.index.builder import build_index

T0 = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


def _make_commit(sha, when, files, email="alice@example.com", name="Alice"):
    """``when`` is a datetime or a day offset from T0; files are (path, added, removed)."""
    if not isinstance(when, datetime):
        when = T0 + timedelta(days=when)
    return Commit(
        hash=sha,
        author_name=name,
        author_email=email,
        timestamp=when,
        deltas=tuple(FileDelta(path=p, additions=a, deletions=r) for p, a, r in files),
    )


@pytest.fixture
def make_commit():
    return _make_commit


@pytest.fixture
def scenario_commits():
    return [
        _make_commit("c3", 2, [("b.txt", 0, 3)]),
        _make_commit("c2", 1, [("a.txt", 5, 2)], "bob@example.com", "Bob"),
        _make_commit("c1", 0, [("a.txt", 10, 0), ("b.txt", 10, 0)]),
    ]


@pytest.fixture
def scenario_index(scenario_commits):
    return build_index(scenario_commits)
