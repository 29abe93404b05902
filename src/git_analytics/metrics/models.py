"""Result records returned by the metric computers."""

from dataclasses import dataclass


@dataclass
class FileHotspot:
    path: str
    lines_changed: int  # additions + deletions
    additions: int
    deletions: int
    commits: int


@dataclass
class TemporalHotspot:
    path: str
    lines_changed: int
    additions: int
    deletions: int
    commits: int
    last_changed: str  # YYYY-MM-DD (UTC)
    days_since: int  # whole days between last change and the query's `to`
    score: float  # lines_changed weighted by recency


@dataclass
class FileOwnership:
    path: str
    top_author_name: str
    top_author_email: str
    top_author_pct: float  # [0, 1]
    second_author_name: str
    second_author_email: str
    second_author_pct: float  # [0, 1], 0 with a single contributor
    contributor_count: int
    total_lines: int  # sum of per-author net lines


@dataclass
class Contributor:
    author_name: str
    author_email: str
    commits: int
    additions: int
    deletions: int


@dataclass
class CoChangePair:
    file_a: str  # file_a < file_b
    file_b: str
    co_change_count: int
    commits_a: int
    commits_b: int
    coupling_ratio: float  # co_change_count / min(commits_a, commits_b)


@dataclass
class HeatmapDay:
    date: str  # YYYY-MM-DD (UTC)
    count: int


@dataclass
class HourBucket:
    hour: int  # 0-23 (UTC)
    count: int


@dataclass
class DashboardStats:
    commits: int
    contributors: int
    additions: int
    deletions: int
    files_changed: int


@dataclass
class RepoInfo:
    name: str
    branch: str
    head_hash: str  # abbreviated
    last_author: str = ""
    last_email: str = ""
    last_message: str = ""
    last_commit_age: str = ""
