"""Sample the lines surrounding a protected block.

The before/after windows are what the anchor locator searches for in the
updated upstream file. Blank lines and marker lines carry no positional
information, so they are skipped without using up the window.
"""

from __future__ import annotations

from dataclasses import dataclass

from demosync.blocks import DEFAULT_WINDOW_SIZE
from demosync.blocks.extractor import MarkerSet, ProtectedBlock

# How far a walk may go, as a multiple of the requested window
SCAN_FACTOR = 3


@dataclass(frozen=True)
class ContextWindow:
    before_lines: tuple[str, ...] = ()
    after_lines: tuple[str, ...] = ()


def _walk(
    lines: list[str],
    indices: range,
    window_size: int,
    markers: MarkerSet,
) -> list[str]:
    picked: list[str] = []
    for examined, i in enumerate(indices):
        if len(picked) >= window_size or examined >= window_size * SCAN_FACTOR:
            break
        candidate = lines[i].strip()
        if not candidate or markers.is_marker(candidate):
            continue
        picked.append(candidate)
    return picked


def sample_before(
    lines: list[str],
    position: int,
    window_size: int = DEFAULT_WINDOW_SIZE,
    markers: MarkerSet | None = None,
) -> tuple[str, ...]:
    """Up to ``window_size`` trimmed lines above ``position``, in document order."""
    markers = markers or MarkerSet()
    if window_size <= 0:
        return ()
    picked = _walk(lines, range(position - 1, -1, -1), window_size, markers)
    return tuple(reversed(picked))


def sample_after(
    lines: list[str],
    position: int,
    window_size: int = DEFAULT_WINDOW_SIZE,
    markers: MarkerSet | None = None,
) -> tuple[str, ...]:
    """Up to ``window_size`` trimmed lines below ``position``, in document order."""
    markers = markers or MarkerSet()
    if window_size <= 0:
        return ()
    return tuple(_walk(lines, range(position + 1, len(lines)), window_size, markers))


def sample_context(
    lines: list[str],
    block: ProtectedBlock,
    window_size: int = DEFAULT_WINDOW_SIZE,
    markers: MarkerSet | None = None,
) -> ContextWindow:
    """Build the context window around a block of the derivative document."""
    return ContextWindow(
        before_lines=sample_before(lines, block.start_line, window_size, markers),
        after_lines=sample_after(lines, block.end_line, window_size, markers),
    )
