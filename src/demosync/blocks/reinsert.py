"""Splice a protected block back into the working document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from demosync.blocks import UNANCHORED_WARNING
from demosync.blocks.anchor import AnchorResult, Found
from demosync.blocks.extractor import ProtectedBlock

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 100


class WarningKind(str, Enum):
    CONTEXT_MISSING = "context_missing"


@dataclass(frozen=True)
class MergeWarning:
    """A block that was preserved but could not be placed by context."""

    kind: WarningKind
    block: ProtectedBlock
    message: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "start_line": self.block.start_line + 1,
            "end_line": self.block.end_line + 1,
            "message": self.message,
        }


@dataclass(frozen=True)
class ReinsertResult:
    lines: list[str]
    warning: MergeWarning | None = None


def _append_index(lines: list[str]) -> int:
    # Keep a trailing newline (empty last element) at the very end
    if lines and lines[-1] == "":
        return len(lines) - 1
    return len(lines)


def reinsert(
    lines: list[str],
    block: ProtectedBlock,
    anchor: AnchorResult,
    warning_template: str = UNANCHORED_WARNING,
) -> ReinsertResult:
    """Place ``block`` into a copy of ``lines`` according to ``anchor``.

    With a span, the upstream lines in ``[position, span_end)`` are replaced.
    Without one, the block is inserted at ``position``. When the anchor was not
    found, the block is appended after a warning line; it is never dropped.
    """
    content = list(block.content)

    if isinstance(anchor, Found):
        end = anchor.span_end if anchor.span_end is not None else anchor.position
        new_lines = lines[:anchor.position] + content + lines[end:]
        return ReinsertResult(new_lines)

    start, end = block.start_line + 1, block.end_line + 1
    marker_line = warning_template.format(start=start, end=end)
    at = _append_index(lines)
    new_lines = lines[:at] + [marker_line] + content + lines[at:]

    message = (
        f"Could not find context for protected block at lines {start}-{end}; "
        f"appended at end of file: {block.preview(PREVIEW_CHARS)!r}"
    )
    logger.warning(message)
    return ReinsertResult(
        new_lines,
        MergeWarning(WarningKind.CONTEXT_MISSING, block, message),
    )
