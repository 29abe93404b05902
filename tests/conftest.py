"""Shared fixtures for git-analytics tests."""

import os
import shutil
import subprocess
from datetime import datetime, timezone
from pathlib import Path

import pytest


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class RepoBuilder:
    """Builds a throwaway git repository with controlled authors and dates."""

    def __init__(self, path: Path):
        self.path = path
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")

    def git(self, *args: str, env=None) -> subprocess.CompletedProcess:
        return subprocess.run(
            ["git", "-C", str(self.path), *args],
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )

    def write(self, rel: str, content: str) -> None:
        target = self.path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def remove(self, rel: str) -> None:
        (self.path / rel).unlink()

    def move(self, old: str, new: str) -> None:
        (self.path / new).parent.mkdir(parents=True, exist_ok=True)
        self.git("mv", old, new)

    @staticmethod
    def _identity(when: datetime, author: str, email: str) -> dict:
        stamp = when.isoformat()
        return {
            **os.environ,
            "GIT_AUTHOR_NAME": author,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_AUTHOR_DATE": stamp,
            "GIT_COMMITTER_NAME": author,
            "GIT_COMMITTER_EMAIL": email,
            "GIT_COMMITTER_DATE": stamp,
        }

    def commit(
        self,
        message: str,
        when: datetime,
        author: str = "Alice",
        email: str = "alice@example.com",
    ) -> str:
        self.git("add", "-A")
        self.git(
            "-c",
            "commit.gpgsign=false",
            "commit",
            "-q",
            "--allow-empty",
            "-m",
            message,
            env=self._identity(when, author, email),
        )
        return self.git("rev-parse", "HEAD").stdout.strip()

    def merge(
        self,
        branch: str,
        when: datetime,
        author: str = "Alice",
        email: str = "alice@example.com",
    ) -> str:
        self.git(
            "-c",
            "commit.gpgsign=false",
            "merge",
            "-q",
            "--no-ff",
            "-m",
            f"Merge {branch}",
            branch,
            env=self._identity(when, author, email),
        )
        return self.git("rev-parse", "HEAD").stdout.strip()


@pytest.fixture
def git_repo(tmp_path):
    """An empty repository on branch ``main``; skipped when git is missing."""
    if shutil.which("git") is None:
        pytest.skip("git not found")
    path = tmp_path / "repo"
    path.mkdir()
    return RepoBuilder(path)


@pytest.fixture
def scenario_repo(git_repo):
    """Three commits: C1 adds a.txt and b.txt, C2 edits a.txt, C3 trims b.txt."""
    git_repo.write("a.txt", "".join(f"a{i}\n" for i in range(10)))
    git_repo.write("b.txt", "".join(f"b{i}\n" for i in range(10)))
    git_repo.commit("C1", datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc))

    lines = [f"a{i}\n" for i in range(10)]
    lines[0] = "changed0\n"
    lines[1] = "changed1\n"
    lines += ["x1\n", "x2\n", "x3\n"]
    git_repo.write("a.txt", "".join(lines))
    git_repo.commit(
        "C2", datetime(2025, 1, 11, 14, 0, tzinfo=timezone.utc), "Bob", "bob@example.com"
    )

    git_repo.write("b.txt", "".join(f"b{i}\n" for i in range(7)))
    git_repo.commit("C3", datetime(2025, 1, 12, 22, 30, tzinfo=timezone.utc))
    return git_repo


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME, XDG_CONFIG_HOME and the cwd at a scratch directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for key in list(os.environ):
        if key.startswith("GIT_ANALYTICS_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(home)
    return home
