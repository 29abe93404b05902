"""Stream git history via the native git CLI."""

from __future__ import annotations

import codecs
import subprocess
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

from ..exceptions import Cancelled, HistoryReadError, InvalidRange, RepositoryUnavailable
from ..logging_config import get_logger
from .models import Commit, FileDelta, LastCommit
from .rename import change_type_for, detect_rename

logger = get_logger(__name__)

# Each commit header starts with this line; it cannot occur in a subject
# because git strips control characters from %s.
_MARKER = "\x1egit-analytics"

# marker, hash, parents, author name, author email, author date, subject
_LOG_FORMAT = "%x1egit-analytics%n%H%n%P%n%aN%n%aE%n%aI%n%s"
_HEADER_LINES = 6

# git --since compares committer dates and stops walking at the first older
# commit, so the cut-off is widened to tolerate clock skew between the
# committer and author dates. The exact author-date filter runs afterwards.
_SINCE_SLACK = timedelta(days=1)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class GitRepository:
    """A local git repository read through ``git`` subprocesses.

    Opening validates the location; reading streams ``git log`` output and
    never loads the whole history into memory.
    """

    def __init__(self, path: str | Path, timeout: int = 10):
        self.path = str(Path(path).expanduser().resolve())
        self.timeout = timeout
        self._check_repository()

    @property
    def name(self) -> str:
        return Path(self.path).name

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            ["git", "-C", self.path, *args],
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )

    def _check_repository(self) -> None:
        location = Path(self.path)
        if not location.exists():
            raise RepositoryUnavailable(self.path, "path does not exist")
        if not location.is_dir():
            raise RepositoryUnavailable(self.path, "not a directory")
        try:
            result = self._git("rev-parse", "--git-dir")
        except FileNotFoundError:
            raise RepositoryUnavailable(self.path, "git executable not found")
        except PermissionError as e:
            raise RepositoryUnavailable(self.path, f"permission denied: {e}")
        except subprocess.TimeoutExpired:
            raise RepositoryUnavailable(self.path, "git rev-parse timed out")
        if result.returncode != 0:
            raise RepositoryUnavailable(self.path, result.stderr.strip() or "not a git repository")

    def head_hash(self) -> Optional[str]:
        """Full hash of HEAD, or None for a repository without commits."""
        result = self._git("rev-parse", "--verify", "--quiet", "HEAD")
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def current_branch(self) -> str:
        """Short branch name, or ``HEAD`` when detached."""
        result = self._git("symbolic-ref", "--short", "HEAD")
        if result.returncode != 0:
            return "HEAD"
        return result.stdout.strip()

    def last_commit(self) -> Optional[LastCommit]:
        """Metadata of the commit HEAD points to."""
        if self.head_hash() is None:
            return None
        result = self._git("log", "-1", "--format=%H%n%aN%n%aE%n%aI%n%s", "HEAD")
        if result.returncode != 0:
            raise HistoryReadError(result.stderr.strip() or "git log -1 failed")
        lines = result.stdout.split("\n")
        if len(lines) < 5:
            raise HistoryReadError("truncated git log -1 output")
        return LastCommit(
            hash=lines[0],
            author_name=lines[1],
            author_email=lines[2],
            timestamp=_parse_timestamp(lines[3], lines[0]),
            subject=lines[4].strip(),
        )

    def iter_commits(
        self,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Iterator[Commit]:
        """Yield commits with author time in ``[since, until)``, newest first.

        Merge commits are diffed against their first parent and root commits
        against the empty tree.

        Raises:
            InvalidRange: since > until
            HistoryReadError: git failed or produced unparsable output
            Cancelled: ``cancel`` was set between two commits
        """
        if since is not None and until is not None and since > until:
            raise InvalidRange("from is after to", since, until)

        if self.head_hash() is None:
            logger.debug("Repository %s has no commits", self.path)
            return

        cmd = [
            "git",
            "-C",
            self.path,
            "-c",
            "core.quotepath=off",
            "log",
            f"--format={_LOG_FORMAT}",
            "--raw",
            "--numstat",
            "-M",
            "--diff-merges=first-parent",
            "--no-color",
        ]
        cutoff = _since_cutoff(since)
        if cutoff is not None:
            cmd.append(f"--since={cutoff}")
        cmd.append("HEAD")
        try:
            proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except FileNotFoundError:
            raise RepositoryUnavailable(self.path, "git executable not found")
        except OSError as e:
            raise HistoryReadError(f"cannot start git log: {e}")

        seen = 0
        finished = False
        try:
            for commit in parse_log(_decode_lines(proc.stdout)):
                if cancel is not None and cancel.is_set():
                    raise Cancelled("reading history")
                if since is not None and commit.timestamp < since:
                    continue
                if until is not None and commit.timestamp >= until:
                    continue
                seen += 1
                yield commit
            finished = True
        finally:
            if finished:
                returncode = proc.wait(timeout=self.timeout)
                stderr = proc.stderr.read().decode("utf-8", "replace") if proc.stderr else ""
                _close(proc)
                if returncode != 0:
                    logger.warning("git log failed: %s", stderr.strip())
                    raise HistoryReadError(stderr.strip() or f"git log exited with {returncode}")
                logger.debug("Read %d commits in range from %s", seen, self.path)
            else:
                proc.kill()
                proc.wait()
                _close(proc)


def _since_cutoff(since: Optional[datetime]) -> Optional[str]:
    """Value for git's --since, or None when nothing can be skipped."""
    if since is None:
        return None
    cutoff = since - _SINCE_SLACK
    if cutoff <= _EPOCH:
        return None
    return cutoff.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S +0000")


def _close(proc: subprocess.Popen) -> None:
    if proc.stdout:
        proc.stdout.close()
    if proc.stderr:
        proc.stderr.close()


def _decode_lines(stream: Optional[IO[bytes]]) -> Iterator[str]:
    # Binary iteration splits on "\n" only; text mode would also split on "\r".
    if stream is None:
        return
    for raw in stream:
        yield raw.decode("utf-8", "replace").rstrip("\n")


def parse_log(lines: Iterable[str]) -> Iterator[Commit]:
    """Parse ``git log --raw --numstat`` output produced with our format.

    Raw records (``:100644 100644 <sha> <sha> M<TAB>path``) carry the change
    type and exact paths; numstat records carry the line counts. git emits
    both lists for a commit in the same order, so they are paired by index.
    """
    it = iter(lines)
    header: Optional[list[str]] = None
    raws: list[str] = []
    stats: list[str] = []

    for line in it:
        if line == _MARKER:
            if header is not None:
                yield _build_commit(header, raws, stats)
            header = []
            for _ in range(_HEADER_LINES):
                meta = next(it, None)
                if meta is None:
                    raise HistoryReadError("unexpected end of git log output in commit header")
                header.append(meta)
            raws, stats = [], []
        elif not line.strip():
            continue
        elif header is None:
            raise HistoryReadError(f"unexpected git log output: {line[:80]!r}")
        elif line.startswith(":"):
            raws.append(line)
        else:
            stats.append(line)

    if header is not None:
        yield _build_commit(header, raws, stats)


def _build_commit(header: list[str], raws: list[str], stats: list[str]) -> Commit:
    commit_hash, parents, name, email, date_str, subject = header
    if len(raws) != len(stats):
        raise HistoryReadError(
            f"{len(raws)} raw records but {len(stats)} numstat records", commit=commit_hash
        )

    deltas = tuple(
        _build_delta(raw, stat, commit_hash) for raw, stat in zip(raws, stats)
    )
    return Commit(
        hash=commit_hash,
        author_name=name,
        author_email=email,
        timestamp=_parse_timestamp(date_str, commit_hash),
        parent_count=len(parents.split()),
        subject=subject,
        deltas=deltas,
    )


def _build_delta(raw: str, stat: str, commit_hash: str) -> FileDelta:
    fields = raw.split("\t")
    if len(fields) < 2:
        raise HistoryReadError(f"malformed raw record {raw!r}", commit=commit_hash)
    status = fields[0].split()[-1]
    paths = [_unquote(p) for p in fields[1:]]

    parts = stat.split("\t", 2)
    if len(parts) != 3:
        raise HistoryReadError(f"malformed numstat record {stat!r}", commit=commit_hash)
    additions = _parse_count(parts[0], commit_hash)
    deletions = _parse_count(parts[1], commit_hash)

    return FileDelta(
        path=paths[-1],
        additions=additions,
        deletions=deletions,
        change_type=change_type_for(status),
        old_path=detect_rename(status, paths),
    )


def _parse_count(value: str, commit_hash: str) -> int:
    # Binary files report "-"
    if value == "-":
        return 0
    try:
        count = int(value)
    except ValueError:
        raise HistoryReadError(f"bad line count {value!r}", commit=commit_hash)
    if count < 0:
        raise HistoryReadError(f"negative line count {value!r}", commit=commit_hash)
    return count


def _parse_timestamp(value: str, commit_hash: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise HistoryReadError(f"bad author date {value!r}", commit=commit_hash)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _unquote(path: str) -> str:
    """Undo git's C-style quoting of unusual paths (``"a\\tb.txt"``)."""
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        raw_bytes, _ = codecs.escape_decode(path[1:-1].encode("utf-8"))
        return raw_bytes.decode("utf-8", "replace")
    return path
