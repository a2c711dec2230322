"""Gitignore-style path classification and demo-code detection."""

from __future__ import annotations

from functools import lru_cache

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

IGNORED = "ignored"
SMART_MERGE = "smart_merge"
FULL_COPY = "full_copy"


@lru_cache(maxsize=256)
def _spec(pattern: str) -> PathSpec:
    return PathSpec.from_lines(GitWildMatchPattern, [pattern])


def match_pattern(path: str, pattern: str) -> bool:
    """Match a repository-relative POSIX path against one gitwildmatch pattern.

    ``**/`` matches zero or more directories. A pattern without a slash
    (``*.css``) matches at any depth.
    """
    return _spec(pattern).match_file(path)


def matches_any(path: str, patterns: list[str]) -> str | None:
    """Return the first pattern matching ``path``, if any."""
    for pattern in patterns:
        if match_pattern(path, pattern):
            return pattern
    return None


def classify(path: str, patterns: dict[str, list[str]]) -> str:
    """Decide how a changed file is carried into the derivative.

    Ignore patterns win, then smart-merge patterns; everything else is
    copied in full.

    Args:
        path: Repository-relative path.
        patterns: Output of ``demosync.config.get_patterns``.
    """
    if matches_any(path, patterns.get("ignore", [])):
        return IGNORED
    if matches_any(path, patterns.get("smart_merge", [])):
        return SMART_MERGE
    return FULL_COPY


def detect_demo_patterns(
    content: str,
    auto_detect_patterns: dict[str, list[str]],
) -> list[tuple[str, str]]:
    """Find known demo-only snippets (mock data, disabled buttons) in a file."""
    detected = []
    for category, pattern_list in auto_detect_patterns.items():
        for pattern in pattern_list or []:
            if pattern in content:
                detected.append((category, pattern))
    return detected
