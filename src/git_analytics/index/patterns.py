"""Exclude-pattern validation and matching.

Patterns containing glob metacharacters (``*``, ``?``, ``[``) are matched
case-sensitively against the whole repository-relative path; ``*`` also
crosses ``/`` so ``vendor/*`` drops everything under ``vendor``. Patterns
without metacharacters match as substrings (``node_modules`` drops any path
containing it).
"""

from __future__ import annotations

import fnmatch
import re
from typing import Iterable, Optional, Sequence

from ..exceptions import InvalidPattern

_GLOB_CHARS = frozenset("*?[")


def validate_patterns(patterns: Optional[Iterable[str]]) -> list[str]:
    """Check every pattern and return them as a list, order preserved.

    Raises:
        InvalidPattern: for a non-string, blank, NUL-containing pattern or
            one with an unclosed character class
    """
    if patterns is None:
        return []
    if isinstance(patterns, str):
        raise InvalidPattern(patterns, "expected a list of patterns, got a single string")

    checked = []
    for pattern in patterns:
        if not isinstance(pattern, str):
            raise InvalidPattern(repr(pattern), "pattern must be a string")
        if not pattern.strip():
            raise InvalidPattern(pattern, "pattern is empty")
        if "\x00" in pattern:
            raise InvalidPattern(pattern, "pattern contains a NUL character")
        _check_brackets(pattern)
        checked.append(pattern)
    return checked


def _check_brackets(pattern: str) -> None:
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c != "[":
            continue
        j = i
        if j < n and pattern[j] == "!":
            j += 1
        if j < n and pattern[j] == "]":
            j += 1
        while j < n and pattern[j] != "]":
            j += 1
        if j >= n:
            raise InvalidPattern(pattern, "unclosed '[' character class")
        i = j + 1


def is_glob(pattern: str) -> bool:
    return any(c in _GLOB_CHARS for c in pattern)


class ExcludeMatcher:
    """Decides whether a path is excluded; results are memoised per path."""

    def __init__(self, patterns: Optional[Sequence[str]] = None):
        self.patterns = tuple(validate_patterns(patterns))
        self._substrings = tuple(p for p in self.patterns if not is_glob(p))
        globs = [p for p in self.patterns if is_glob(p)]
        self._regex: Optional[re.Pattern[str]] = None
        if globs:
            try:
                self._regex = re.compile("|".join(fnmatch.translate(g) for g in globs))
            except re.error as e:
                raise InvalidPattern(", ".join(globs), str(e))
        self._memo: dict[str, bool] = {}

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __repr__(self) -> str:
        return f"ExcludeMatcher({list(self.patterns)!r})"

    def matches(self, path: str) -> bool:
        if not self.patterns:
            return False
        hit = self._memo.get(path)
        if hit is None:
            hit = any(s in path for s in self._substrings) or (
                self._regex is not None and self._regex.match(path) is not None
            )
            self._memo[path] = hit
        return hit
