"""Protected-block balance check (the MalformedBlock condition)."""

from __future__ import annotations

from demosync.blocks.extractor import MarkerSet
from demosync.lint.report import MALFORMED_BLOCK, Issue


def check_block_balance(
    lines: list[str],
    markers: MarkerSet,
    file: str = "<document>",
) -> list[Issue]:
    """Report end markers without a start and start markers never closed.

    Uses a running count rather than the extractor, so a start marker nested
    inside an open block shows up here as an unclosed block even though the
    extractor absorbs it as content.

    Returns:
        One issue per stray end marker (at its line) and, when blocks remain
        open, one issue at the last start marker line. Lines are 1-indexed.
    """
    issues: list[Issue] = []
    open_blocks = 0
    starts: list[int] = []

    for i, line in enumerate(lines):
        if markers.is_start(line):
            open_blocks += 1
            starts.append(i + 1)
        if markers.is_end(line):
            open_blocks -= 1
            if open_blocks < 0:
                issues.append(Issue(
                    file, MALFORMED_BLOCK,
                    "protected block end marker without matching start marker",
                    i + 1,
                ))
                open_blocks = 0

    if open_blocks > 0:
        issues.append(Issue(
            file, MALFORMED_BLOCK,
            f"{open_blocks} unclosed protected block(s) - missing end marker",
            starts[-1],
        ))

    return issues
