"""Tests for protected block extraction."""

import pytest

from demosync.blocks.extractor import (
    MarkerSet,
    ProtectedBlock,
    count_markers,
    extract_blocks,
    has_protected_blocks,
    split_lines,
)


class TestMarkerSet:
    def test_defaults_cover_comment_styles(self):
        m = MarkerSet()
        assert m.is_start("  // INTENTIONAL-START")
        assert m.is_start("<!-- INTENTIONAL-START -->")
        assert m.is_start("      {/* INTENTIONAL-START */}")
        assert m.is_end("{/* INTENTIONAL-END */}")
        assert not m.is_start("// INTENTIONAL-END")

    def test_lists_become_tuples(self):
        m = MarkerSet(["// A"], ["// B"])
        assert m.start_markers == ("// A",)
        assert hash(m)

    def test_empty_sets_rejected(self):
        with pytest.raises(ValueError):
            MarkerSet((), ("// END",))
        with pytest.raises(ValueError):
            MarkerSet(("",), ("// END",))


class TestExtractBlocks:
    def test_single_block_inclusive(self, markers):
        lines = ["a", "// START", "P", "// END", "b"]
        blocks = extract_blocks(lines, markers)
        assert blocks == [ProtectedBlock(1, 3, ("// START", "P", "// END"))]

    def test_multiple_blocks_in_order(self, markers):
        lines = ["// START", "x", "// END", "mid", "  // START", "y", "  // END"]
        blocks = extract_blocks(lines, markers)
        assert [(b.start_line, b.end_line) for b in blocks] == [(0, 2), (4, 6)]
        assert blocks[1].content[0] == "  // START"

    def test_content_is_verbatim(self, markers):
        lines = ["// START", "\t  indented  ", "", "// END"]
        (block,) = extract_blocks(lines, markers)
        assert block.content == ("// START", "\t  indented  ", "", "// END")

    def test_unclosed_trailing_block_discarded(self, markers):
        lines = ["// START", "x", "// END", "// START", "dangling"]
        blocks = extract_blocks(lines, markers)
        assert len(blocks) == 1
        assert blocks[0].end_line == 2

    def test_stray_end_marker_ignored(self, markers):
        lines = ["// END", "a", "// START", "b", "// END"]
        blocks = extract_blocks(lines, markers)
        assert [(b.start_line, b.end_line) for b in blocks] == [(2, 4)]

    def test_nested_start_absorbed_as_content(self, markers):
        """Nesting is not supported: the inner start is plain content."""
        lines = ["// START", "outer", "// START", "inner", "// END", "tail", "// END"]
        blocks = extract_blocks(lines, markers)
        assert len(blocks) == 1
        assert blocks[0].start_line == 0
        assert blocks[0].end_line == 4
        assert "// START" in blocks[0].content[1:]

    def test_start_and_end_on_one_line_opens_block(self, markers):
        lines = ["// START // END", "x", "// END", "y"]
        (block,) = extract_blocks(lines, markers)
        assert (block.start_line, block.end_line) == (0, 2)

    def test_no_blocks(self, markers):
        assert extract_blocks(["a", "b"], markers) == []


class TestProtectedBlock:
    def test_preview_truncates(self):
        block = ProtectedBlock(0, 1, ("// START " + "x" * 200, "// END"))
        preview = block.preview(100)
        assert len(preview) == 103
        assert preview.endswith("...")

    def test_to_dict_is_one_indexed(self):
        assert ProtectedBlock(4, 6, ("a", "b", "c")).to_dict() == {
            "start_line": 5, "end_line": 7, "lines": 3,
        }


class TestHelpers:
    def test_split_lines_roundtrip(self):
        text = "a\r\nb\n\nc\n"
        assert "\n".join(split_lines(text)) == text

    def test_split_lines_rejects_bytes(self):
        with pytest.raises(TypeError):
            split_lines(b"a\nb")

    def test_has_protected_blocks(self, markers):
        assert has_protected_blocks("x\n// START\n", markers)
        assert not has_protected_blocks("x\n// END\n", markers)

    def test_count_markers(self, markers):
        assert count_markers(["// START", "// START", "// END"], markers) == (2, 1)
