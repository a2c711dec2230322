"""Protected block listing CLI command."""

import argparse
from pathlib import Path

from demosync.cli.sync import resolve_config
from demosync.config import get_marker_set, get_merge_options


def cmd_blocks(args: argparse.Namespace) -> int:
    from demosync.blocks.context import sample_context
    from demosync.blocks.extractor import extract_blocks
    from demosync.errors import SyncIOError
    from demosync.lint.blocks import check_block_balance
    from demosync.sync import read_text

    config = resolve_config(args)
    markers = get_marker_set(config)
    window_size = get_merge_options(config)["window_size"]

    try:
        lines = read_text(Path(args.file)).split("\n")
    except SyncIOError as e:
        print(f"ERROR: {e}")
        return 1

    blocks = extract_blocks(lines, markers)
    print(f"\n  {args.file}")
    print(f"  {'─' * 50}")
    for n, block in enumerate(blocks, start=1):
        window = sample_context(lines, block, window_size, markers)
        print(f"  #{n}  lines {block.start_line + 1}-{block.end_line + 1} ({block.line_count} lines)")
        print(f"      before: {list(window.before_lines)}")
        print(f"      after:  {list(window.after_lines)}")
    print(f"\n  {len(blocks)} block(s)")

    issues = check_block_balance(lines, markers, args.file)
    for issue in issues:
        print(f"  ERROR: {issue}")
    return 1 if issues else 0
