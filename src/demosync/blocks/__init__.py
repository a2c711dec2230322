"""Protected-block preservation for derivative files.

Protected regions in a derivative (demo) file are demarcated:
    // INTENTIONAL-START
    ...demo-only code...
    // INTENTIONAL-END

When the upstream file changes, the upstream content is adopted everywhere
except inside these regions, which are carried over verbatim and re-anchored
next to the lines that surrounded them in the derivative.
"""

# Marker defaults used by the extractor, the merge and the block linter
DEFAULT_START_MARKERS = (
    "// INTENTIONAL-START",
    "<!-- INTENTIONAL-START -->",
    "/* INTENTIONAL-START */",
)
DEFAULT_END_MARKERS = (
    "// INTENTIONAL-END",
    "<!-- INTENTIONAL-END -->",
    "/* INTENTIONAL-END */",
)

DEFAULT_WINDOW_SIZE = 3
DEFAULT_LOOKAHEAD = 20

UNANCHORED_WARNING = (
    "// SYNC-WARNING: protected block from lines {start}-{end} "
    "could not be re-anchored"
)
