"""Smart merge: adopt upstream content, keep the derivative's protected blocks.

The merge process:
1. Extract protected blocks from the derivative file
2. With no blocks, the upstream file is adopted verbatim
3. Otherwise each block, in derivative order, is located by its surrounding
   context in the working copy of the upstream file and spliced in
4. Blocks whose context is gone are appended with a warning line

Each block is located against the document as left by the previous splices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from demosync.blocks import DEFAULT_LOOKAHEAD, DEFAULT_WINDOW_SIZE, UNANCHORED_WARNING
from demosync.blocks.anchor import locate
from demosync.blocks.context import sample_context
from demosync.blocks.extractor import MarkerSet, extract_blocks, split_lines
from demosync.blocks.reinsert import MergeWarning, reinsert

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """Merged document text plus everything the reporting layer needs."""

    text: str
    warnings: tuple[MergeWarning, ...] = field(default_factory=tuple)
    blocks_preserved: int = 0

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")

    @property
    def clean(self) -> bool:
        return not self.warnings


def merge(
    source: str,
    derivative: str,
    markers: MarkerSet | None = None,
    window_size: int = DEFAULT_WINDOW_SIZE,
    lookahead: int = DEFAULT_LOOKAHEAD,
    warning_template: str = UNANCHORED_WARNING,
) -> MergeResult:
    """Merge an updated upstream file into its derivative.

    Args:
        source: Updated upstream text.
        derivative: Previous derivative text containing protected blocks.
        markers: Marker strings. Defaults to the INTENTIONAL markers.
        window_size: Context lines sampled on each side of a block.
        lookahead: Lines searched past the insertion point for the
            after-context.
        warning_template: Line written above unanchored blocks; formatted
            with ``start`` and ``end`` (1-indexed).

    Returns:
        MergeResult with the merged text, warnings and block count.

    Raises:
        TypeError: If either document is not text.
    """
    markers = markers or MarkerSet()
    source_lines = split_lines(source)
    derivative_lines = split_lines(derivative)

    blocks = extract_blocks(derivative_lines, markers)
    if not blocks:
        return MergeResult(source)

    working = list(source_lines)
    warnings: list[MergeWarning] = []

    for block in blocks:
        window = sample_context(derivative_lines, block, window_size, markers)
        anchor = locate(working, window, lookahead)
        logger.debug(
            "block %d-%d: before=%r after=%r -> %r",
            block.start_line + 1, block.end_line + 1,
            window.before_lines, window.after_lines, anchor,
        )
        placed = reinsert(working, block, anchor, warning_template)
        working = placed.lines
        if placed.warning:
            warnings.append(placed.warning)

    return MergeResult("\n".join(working), tuple(warnings), len(blocks))
