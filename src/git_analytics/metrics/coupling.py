"""Detect files that change together (temporal coupling)."""

from __future__ import annotations

from collections import defaultdict
from itertools import combinations
from typing import Optional

from ..index.models import ChangeIndex
from ..logging_config import get_logger
from .models import CoChangePair

logger = get_logger(__name__)

DEFAULT_PAIRWISE_CAP = 50
DEFAULT_MIN_COCHANGES = 2


def coupling_sort_key(p: CoChangePair) -> tuple:
    return (-p.coupling_ratio, -p.co_change_count, p.file_a, p.file_b)


def count_cochanges(index: ChangeIndex, pairwise_cap: int = DEFAULT_PAIRWISE_CAP) -> dict[tuple[str, str], int]:
    """Co-occurrence counts keyed by ``(file_a, file_b)`` with ``file_a < file_b``.

    Commits touching more than ``pairwise_cap`` files (mass renames, vendor
    bumps) are left out of pair expansion; they still count toward each
    file's own commit total in the index.
    """
    pair_counts: dict[tuple[str, str], int] = defaultdict(int)
    skipped = 0
    for record in index.commits.values():
        k = len(record.files)
        if k < 2:
            continue
        if k > pairwise_cap:
            skipped += 1
            continue
        for a, b in combinations(sorted(record.files), 2):
            pair_counts[(a, b)] += 1

    if skipped:
        logger.debug("Skipped %d commits over the %d-file pairwise cap", skipped, pairwise_cap)
    return pair_counts


def detect_coupling(
    index: ChangeIndex,
    pairwise_cap: int = DEFAULT_PAIRWISE_CAP,
    min_count: int = DEFAULT_MIN_COCHANGES,
    limit: Optional[int] = None,
) -> list[CoChangePair]:
    """File pairs with at least ``min_count`` shared commits.

    ``coupling_ratio`` normalises by the less active file, so a file that
    always changes alongside a busier one scores high from its own side.
    """
    result = []
    for (a, b), count in count_cochanges(index, pairwise_cap).items():
        if count < min_count:
            continue
        commits_a = index.file_commit_count(a)
        commits_b = index.file_commit_count(b)
        least = min(commits_a, commits_b)
        result.append(
            CoChangePair(
                file_a=a,
                file_b=b,
                co_change_count=count,
                commits_a=commits_a,
                commits_b=commits_b,
                coupling_ratio=count / least if least > 0 else 0.0,
            )
        )

    result.sort(key=coupling_sort_key)
    return result[:limit] if limit else result
