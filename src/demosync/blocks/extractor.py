"""Extract marker-delimited protected blocks from a document."""

from __future__ import annotations

from dataclasses import dataclass

from demosync.blocks import DEFAULT_END_MARKERS, DEFAULT_START_MARKERS


@dataclass(frozen=True)
class MarkerSet:
    """Start/end marker strings matched as substrings of a line."""

    start_markers: tuple[str, ...] = DEFAULT_START_MARKERS
    end_markers: tuple[str, ...] = DEFAULT_END_MARKERS

    def __post_init__(self) -> None:
        # Accept lists from YAML without making the instance mutable
        object.__setattr__(self, "start_markers", tuple(self.start_markers))
        object.__setattr__(self, "end_markers", tuple(self.end_markers))
        if not self.start_markers or not self.end_markers:
            raise ValueError("MarkerSet needs at least one start and one end marker")
        if any(not m for m in self.start_markers + self.end_markers):
            raise ValueError("Markers must be non-empty strings")

    def is_start(self, line: str) -> bool:
        return any(m in line for m in self.start_markers)

    def is_end(self, line: str) -> bool:
        return any(m in line for m in self.end_markers)

    def is_marker(self, line: str) -> bool:
        return self.is_start(line) or self.is_end(line)


@dataclass(frozen=True)
class ProtectedBlock:
    """A closed protected region, markers included.

    ``start_line`` and ``end_line`` are 0-indexed and inclusive.
    """

    start_line: int
    end_line: int
    content: tuple[str, ...]

    @property
    def line_count(self) -> int:
        return len(self.content)

    @property
    def text(self) -> str:
        return "\n".join(self.content)

    def preview(self, limit: int = 100) -> str:
        text = self.text
        return text if len(text) <= limit else text[:limit] + "..."

    def to_dict(self) -> dict:
        return {
            "start_line": self.start_line + 1,
            "end_line": self.end_line + 1,
            "lines": self.line_count,
        }


def split_lines(text: str) -> list[str]:
    """Split document text so that ``"\\n".join`` restores it exactly."""
    if not isinstance(text, str):
        raise TypeError(f"Expected document text (str), got {type(text).__name__}")
    return text.split("\n")


def extract_blocks(lines: list[str], markers: MarkerSet) -> list[ProtectedBlock]:
    """Scan a document once and return every closed protected block.

    A start marker seen while a block is open is kept as ordinary content
    (blocks do not nest). An end marker outside a block is ignored, and a
    block still open at the end of the document is dropped; both cases are
    reported by ``demosync.lint.blocks.check_block_balance`` instead.

    Args:
        lines: Document lines.
        markers: Marker strings to look for.

    Returns:
        Blocks in document order.
    """
    blocks: list[ProtectedBlock] = []
    in_block = False
    block_start = -1
    current: list[str] = []

    for i, line in enumerate(lines):
        if not in_block and markers.is_start(line):
            in_block = True
            block_start = i
            current = [line]
        elif in_block:
            current.append(line)
            if markers.is_end(line):
                blocks.append(ProtectedBlock(block_start, i, tuple(current)))
                in_block = False
                current = []

    return blocks


def has_protected_blocks(text: str, markers: MarkerSet) -> bool:
    """Return True if any start marker occurs in the text."""
    return any(m in text for m in markers.start_markers)


def count_markers(lines: list[str], markers: MarkerSet) -> tuple[int, int]:
    """Count lines carrying a start marker and lines carrying an end marker."""
    starts = sum(1 for line in lines if markers.is_start(line))
    ends = sum(1 for line in lines if markers.is_end(line))
    return starts, ends
