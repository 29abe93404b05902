"""Optional cross-query cache of change indexes."""

from __future__ import annotations

import threading
from collections import OrderedDict
from datetime import datetime
from typing import Optional

from ..index.models import ChangeIndex
from ..logging_config import get_logger

logger = get_logger(__name__)

CacheKey = tuple[str, str, Optional[datetime], Optional[datetime], tuple[str, ...]]


class IndexCache:
    """LRU cache of ChangeIndex keyed by (repo, head, window, excludes).

    Every access goes through one lock. When a repository's head moves, all
    of its entries are dropped. Cached indexes are shared between callers;
    metric computers only read them.
    """

    def __init__(self, max_entries: int = 16):
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: OrderedDict[CacheKey, ChangeIndex] = OrderedDict()
        self._heads: dict[str, str] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _sync_head(self, repo_path: str, head: str) -> None:
        previous = self._heads.get(repo_path)
        if previous is not None and previous != head:
            stale = [k for k in self._entries if k[0] == repo_path]
            for key in stale:
                del self._entries[key]
            logger.debug("Head of %s moved, dropped %d cached indexes", repo_path, len(stale))
        self._heads[repo_path] = head

    def get(self, key: CacheKey) -> Optional[ChangeIndex]:
        with self._lock:
            self._sync_head(key[0], key[1])
            index = self._entries.get(key)
            if index is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return index

    def put(self, key: CacheKey, index: ChangeIndex) -> None:
        with self._lock:
            self._sync_head(key[0], key[1])
            self._entries[key] = index
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._heads.clear()
