"""Change detection and file classification between the two codebases."""

from demosync.changes.detect import ChangeSet, compare_trees, detect_changes
from demosync.changes.patterns import classify, detect_demo_patterns, match_pattern

__all__ = [
    "ChangeSet",
    "classify",
    "compare_trees",
    "detect_changes",
    "detect_demo_patterns",
    "match_pattern",
]
