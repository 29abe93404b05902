"""Recently analysed repositories, kept in the user's config directory."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .logging_config import get_logger

logger = get_logger(__name__)

APP_NAME = "git-analytics"
RECENT_FILE = "recent.json"
MAX_RECENT = 10


def default_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/git-analytics``, falling back to ``~/.config``."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME


@dataclass
class RecentRepo:
    path: str
    name: str
    opened_at: str  # ISO-8601 UTC


class RecentRepos:
    """Most-recent-first list of repositories, capped at MAX_RECENT."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()
        self.repos: list[RecentRepo] = []

    @property
    def file_path(self) -> Path:
        return self.config_dir / RECENT_FILE

    @classmethod
    def load(cls, config_dir: Optional[Path] = None) -> RecentRepos:
        """Read the list; a missing or corrupt file yields an empty list."""
        store = cls(config_dir)
        try:
            data = json.loads(store.file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return store
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable %s: %s", store.file_path, e)
            return store

        for entry in data.get("recent_repos", []) if isinstance(data, dict) else []:
            try:
                store.repos.append(RecentRepo(**entry))
            except TypeError:
                logger.debug("Skipping malformed recent entry: %r", entry)
        return store

    def save(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        payload = {"recent_repos": [asdict(r) for r in self.repos]}
        self.file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def add(self, path: str, name: str, now: Optional[datetime] = None) -> None:
        """Move ``path`` to the front with a fresh timestamp."""
        opened = (now or datetime.now(timezone.utc)).isoformat()
        self.repos = [r for r in self.repos if r.path != path]
        self.repos.insert(0, RecentRepo(path=path, name=name, opened_at=opened))
        del self.repos[MAX_RECENT:]

    def remove(self, path: str) -> None:
        self.repos = [r for r in self.repos if r.path != path]

    def existing(self) -> list[RecentRepo]:
        """Entries whose path is still on disk."""
        return [r for r in self.repos if Path(r.path).exists()]
