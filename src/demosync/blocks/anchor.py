"""Locate a context window in an updated document.

Matching is line-based and lenient: two lines match when,
trimmed, they are equal or one contains the other. This tolerates small
reformatting upstream (added props, trailing commas, changed indentation)
at the cost of precision.

The first matching position wins. On documents with repeated boilerplate
the block can therefore be anchored at an earlier look-alike occurrence;
there is no scoring and no preference for the block's original position.
"""

from __future__ import annotations

from dataclasses import dataclass

from demosync.blocks import DEFAULT_LOOKAHEAD
from demosync.blocks.context import ContextWindow


@dataclass(frozen=True)
class Found:
    """Anchor located.

    ``position`` is the insertion point, just after the matched before-context.
    ``span_end`` is the exclusive end of the upstream lines the block replaces,
    or None when the after-context was not found within the lookahead.
    """

    position: int
    span_end: int | None = None

    @property
    def has_span(self) -> bool:
        return self.span_end is not None


@dataclass(frozen=True)
class NotFound:
    """No position in the document matches the before-context."""


AnchorResult = Found | NotFound


def lines_match(context_line: str, candidate: str) -> bool:
    c = context_line.strip()
    d = candidate.strip()
    if not c or not d:
        return False
    return d == c or c in d or d in c


def match_sequence(
    lines: list[str],
    start: int,
    context: tuple[str, ...],
    skip_empty: bool = True,
) -> int | None:
    """Match ``context`` against ``lines`` beginning at ``start``.

    Blank document lines are stepped over without consuming a context line
    when ``skip_empty`` is set. The first document line must itself match.

    Returns:
        Index just past the last matched document line, or None.
    """
    if not context:
        return start
    if start >= len(lines) or not lines[start].strip():
        return None

    i = start
    for expected in context:
        if skip_empty:
            while i < len(lines) and not lines[i].strip():
                i += 1
        if i >= len(lines) or not lines_match(expected, lines[i]):
            return None
        i += 1
    return i


def find_span_end(
    lines: list[str],
    position: int,
    after_lines: tuple[str, ...],
    lookahead: int = DEFAULT_LOOKAHEAD,
    skip_empty: bool = True,
) -> int | None:
    """First index in ``[position, position + lookahead]`` that starts the after-context."""
    if not after_lines:
        return None
    last = min(len(lines) - 1, position + lookahead)
    for p in range(position, last + 1):
        if match_sequence(lines, p, after_lines, skip_empty) is not None:
            return p
    return None


def locate(
    lines: list[str],
    window: ContextWindow,
    lookahead: int = DEFAULT_LOOKAHEAD,
    skip_empty: bool = True,
) -> AnchorResult:
    """Find where a protected block belongs in ``lines``.

    An empty before-context anchors the block at the top of the document.

    Args:
        lines: Target (working) document.
        window: Context sampled around the block in the derivative document.
        lookahead: How many lines past the insertion point to search for the
            after-context.
        skip_empty: Step over blank document lines while matching.

    Returns:
        ``Found`` with the insertion point and optional span end, or ``NotFound``.
    """
    before = window.before_lines
    if not before:
        return Found(0, find_span_end(lines, 0, window.after_lines, lookahead, skip_empty))

    for i in range(len(lines)):
        end = match_sequence(lines, i, before, skip_empty)
        if end is not None:
            span_end = find_span_end(lines, end, window.after_lines, lookahead, skip_empty)
            return Found(end, span_end)

    return NotFound()
