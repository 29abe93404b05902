"""Build a ChangeIndex from a commit stream in one pass."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Iterable, NamedTuple, Optional, Sequence, Union

from ..exceptions import Cancelled
from ..history.models import Commit
from ..logging_config import get_logger
from .models import AuthorLines, ChangeIndex, CommitRecord, ContributorAggregate, FileAggregate
from .patterns import ExcludeMatcher

logger = get_logger(__name__)


class RenameResolver:
    """Maps a path, as written at a given time, to its newest name.

    Each rename is kept on a timeline for its old path. A change to ``path``
    at time ``when`` follows only renames of that path made at or after
    ``when`` by a different commit, then continues from the new name at the
    rename's own time. A path reused after it was moved away therefore stays
    a separate file, and a file renamed back to an earlier name ends up
    under that name.
    """

    def __init__(self) -> None:
        self._timelines: dict[str, list[_Rename]] = {}
        self._sorted = True

    def __len__(self) -> int:
        return sum(len(timeline) for timeline in self._timelines.values())

    def add(
        self, old_path: str, new_path: str, when: datetime, commit: Optional[str] = None
    ) -> None:
        if old_path == new_path:
            return
        self._timelines.setdefault(old_path, []).append(_Rename(when, commit or "", new_path))
        self._sorted = False

    def resolve(self, path: str, when: datetime, commit: Optional[str] = None) -> str:
        """Name of the file that ``path`` belonged to at ``when``.

        ``commit`` is the commit the change was made in; its own renames
        never apply to it.
        """
        if not self._sorted:
            for timeline in self._timelines.values():
                timeline.sort()
            self._sorted = True

        current, since, skip = path, when, commit
        used: set[_Rename] = set()
        while True:
            step = None
            for rename in self._timelines.get(current, ()):
                if rename.when < since or rename in used:
                    continue
                if skip and rename.commit == skip:
                    continue
                step = rename
                break
            if step is None:
                return current
            used.add(step)
            current, since, skip = step.new_path, step.when, step.commit


class _Rename(NamedTuple):
    when: datetime
    commit: str
    new_path: str


def build_index(
    commits: Iterable[Commit],
    exclude: Union[ExcludeMatcher, Sequence[str], None] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    cancel: Optional[threading.Event] = None,
) -> ChangeIndex:
    """Consume ``commits`` once and build the change index.

    Renames are collected while the stream is read; each change is then
    attributed to its file using the time it was made, so the result does
    not depend on the order commits arrive in. Exclusions apply to that
    resolved name.

    Raises:
        Cancelled: ``cancel`` was set between two commits
    """
    matcher = exclude if isinstance(exclude, ExcludeMatcher) else ExcludeMatcher(exclude)

    raw_commits: list[Commit] = []
    seen_hashes: set[str] = set()
    renames = RenameResolver()
    names: dict[str, tuple[str, datetime]] = {}

    for commit in commits:
        if cancel is not None and cancel.is_set():
            raise Cancelled("building index")
        if commit.hash in seen_hashes:
            continue
        seen_hashes.add(commit.hash)

        latest = names.get(commit.author_email)
        if latest is None or commit.timestamp >= latest[1]:
            names[commit.author_email] = (commit.author_name, commit.timestamp)

        for delta in commit.deltas:
            if delta.old_path:
                renames.add(delta.old_path, delta.path, commit.timestamp, commit.hash)
        raw_commits.append(commit)

    if cancel is not None and cancel.is_set():
        raise Cancelled("building index")

    index = ChangeIndex(
        start=start,
        end=end,
        names={email: name for email, (name, _) in names.items()},
    )

    excluded = 0
    for commit in raw_commits:
        files: set[str] = set()
        added = removed = 0
        for delta in commit.deltas:
            path = renames.resolve(delta.path, commit.timestamp, commit.hash)
            if matcher.matches(path):
                excluded += 1
                continue
            _accumulate(index.files, path, delta.additions, delta.deletions, commit)
            files.add(path)
            added += delta.additions
            removed += delta.deletions

        index.commits[commit.hash] = CommitRecord(
            hash=commit.hash,
            timestamp=commit.timestamp,
            author_email=commit.author_email,
            files=frozenset(files),
        )
        for path in files:
            index.files[path].commits += 1
        if files:
            contributor = index.contributors.get(commit.author_email)
            if contributor is None:
                contributor = ContributorAggregate(
                    email=commit.author_email, name=index.names[commit.author_email]
                )
                index.contributors[commit.author_email] = contributor
            contributor.commits += 1
            contributor.additions += added
            contributor.deletions += removed
            if contributor.last_seen is None or commit.timestamp > contributor.last_seen:
                contributor.last_seen = commit.timestamp

    logger.debug(
        "Indexed %d commits, %d files (%d changes excluded, %d renames), %d contributors",
        len(index.commits),
        len(index.files),
        excluded,
        len(renames),
        len(index.contributors),
    )
    return index


def _accumulate(
    files: dict[str, FileAggregate], path: str, added: int, removed: int, commit: Commit
) -> None:
    aggregate = files.get(path)
    if aggregate is None:
        aggregate = FileAggregate(path=path)
        files[path] = aggregate
    aggregate.additions += added
    aggregate.deletions += removed
    if aggregate.last_changed is None or commit.timestamp > aggregate.last_changed:
        aggregate.last_changed = commit.timestamp
    lines = aggregate.authors.get(commit.author_email)
    if lines is None:
        lines = AuthorLines()
        aggregate.authors[commit.author_email] = lines
    lines.added += added
    lines.removed += removed

