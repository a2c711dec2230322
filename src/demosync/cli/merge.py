"""Single-file merge CLI command."""

import argparse
import sys
from pathlib import Path

from demosync.cli.sync import resolve_config
from demosync.config import get_marker_set, get_merge_options


def cmd_merge(args: argparse.Namespace) -> int:
    from demosync.blocks.merge import merge
    from demosync.errors import SyncIOError
    from demosync.sync import read_text, write_text

    config = resolve_config(args)
    options = get_merge_options(config)
    if args.window is not None:
        options["window_size"] = args.window
    if args.lookahead is not None:
        options["lookahead"] = args.lookahead

    try:
        source = read_text(Path(args.source))
        derivative = read_text(Path(args.derivative))
    except SyncIOError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    result = merge(source, derivative, get_marker_set(config), **options)

    if args.output:
        try:
            write_text(Path(args.output), result.text)
        except SyncIOError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        print(f"  Merged {args.source} -> {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(result.text)

    print(f"  Blocks preserved: {result.blocks_preserved}", file=sys.stderr)
    for w in result.warnings:
        print(f"  WARNING: {w.message}", file=sys.stderr)

    if args.strict and result.warnings:
        return 1
    return 0
