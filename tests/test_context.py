"""Tests for context window sampling."""

from demosync.blocks.context import ContextWindow, sample_after, sample_before, sample_context
from demosync.blocks.extractor import extract_blocks


class TestSampleBefore:
    def test_document_order_and_trimmed(self, markers):
        lines = ["  one", "two  ", "\tthree", "// START"]
        assert sample_before(lines, 3, 3, markers) == ("one", "two", "three")

    def test_window_limit(self, markers):
        lines = ["a", "b", "c", "d", "// START"]
        assert sample_before(lines, 4, 2, markers) == ("c", "d")

    def test_blank_lines_do_not_count(self, markers):
        lines = ["a", "", "b", "   ", "c", "", "// START"]
        assert sample_before(lines, 6, 3, markers) == ("a", "b", "c")

    def test_marker_lines_excluded(self, markers):
        lines = ["a", "// START", "x", "// END", "b", "// START"]
        before = sample_before(lines, 5, 3, markers)
        assert before == ("a", "x", "b")
        assert all("// START" not in line and "// END" not in line for line in before)

    def test_hard_outer_bound(self, markers):
        # Window 2 may examine at most 6 lines
        lines = ["far"] + [""] * 6 + ["near", "// START"]
        assert sample_before(lines, 8, 2, markers) == ("near",)

    def test_top_of_document(self, markers):
        assert sample_before(["// START", "x", "// END"], 0, 3, markers) == ()

    def test_zero_window(self, markers):
        assert sample_before(["a", "// START"], 1, 0, markers) == ()


class TestSampleAfter:
    def test_forward_walk(self, markers):
        lines = ["// END", "", "c", "d", "e", "f"]
        assert sample_after(lines, 0, 3, markers) == ("c", "d", "e")

    def test_end_of_document(self, markers):
        assert sample_after(["x", "// END"], 1, 3, markers) == ()


class TestSampleContext:
    def test_window_around_block(self, markers):
        lines = ["a", "b", "// START", "P", "// END", "c", "d"]
        (block,) = extract_blocks(lines, markers)
        window = sample_context(lines, block, 3, markers)
        assert window == ContextWindow(("a", "b"), ("c", "d"))

    def test_block_content_never_sampled_as_marker(self, markers):
        lines = ["x", "  // START demo", "P", "  // END demo", "y"]
        (block,) = extract_blocks(lines, markers)
        window = sample_context(lines, block, 3, markers)
        assert window.before_lines == ("x",)
        assert window.after_lines == ("y",)
