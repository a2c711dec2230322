"""Shared test fixtures for demosync."""

from pathlib import Path

import pytest

from demosync.blocks.extractor import MarkerSet
from demosync.config import default_config

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def markers():
    """Short markers used by the hand-written line examples."""
    return MarkerSet(("// START",), ("// END",))


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def write_tree():
    """Write {relative_path: text} under a root directory."""
    def _write(root: Path, files: dict[str, str]) -> Path:
        for rel, text in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text)
        return root
    return _write
