"""Unified CLI for demosync.

Usage:
    demosync sync [--main P] [--demo P] [--base REF] [--compare-trees] [--dry-run] [--output-dir D]
    demosync validate [--demo P] [--json] [--output FILE]
    demosync merge <source> <derivative> [--output FILE] [--window N] [--lookahead N] [--strict]
    demosync blocks <file>
"""

import argparse
import logging
import sys

from demosync import __version__
from demosync.cli.blocks import cmd_blocks
from demosync.cli.merge import cmd_merge
from demosync.cli.sync import cmd_sync
from demosync.cli.validate import cmd_validate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="demosync",
        description="Sync main-app changes into demo-app, preserving protected blocks",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to sync-config.yml (default: <main>/.github/sync-config.yml)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log every file action",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    # sync
    sy = sub.add_parser("sync", help="Apply upstream changes to the demo checkout")
    sy.add_argument("--main", default=None, help="Main app checkout")
    sy.add_argument("--demo", default=None, help="Demo app checkout")
    sy.add_argument(
        "--base", default=None,
        help="Revision to diff against (default: advanced.diff_base)",
    )
    sy.add_argument(
        "--compare-trees", action="store_true",
        help="Compare working trees instead of git revisions",
    )
    sy.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )
    sy.add_argument(
        "--output-dir", default=None,
        help="Where to write sync-results.json and pr-description.md",
    )

    # validate
    val = sub.add_parser("validate", help="Validate the demo checkout")
    val.add_argument("--demo", default=None, help="Demo app checkout")
    val.add_argument(
        "--json", action="store_true",
        help="Output machine-readable JSON",
    )
    val.add_argument(
        "--output", default=None,
        help="Write validation-results.json to this path",
    )

    # merge
    mg = sub.add_parser("merge", help="Smart-merge a single file")
    mg.add_argument("source", help="Updated upstream file")
    mg.add_argument("derivative", help="Demo file with protected blocks")
    mg.add_argument(
        "--output", default=None,
        help="Write the result here (default: stdout)",
    )
    mg.add_argument("--window", type=int, default=None, help="Context lines per side")
    mg.add_argument("--lookahead", type=int, default=None, help="After-context search range")
    mg.add_argument(
        "--strict", action="store_true",
        help="Exit 1 if any block could not be re-anchored",
    )

    # blocks
    bl = sub.add_parser("blocks", help="List protected blocks in a file")
    bl.add_argument("file")

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    dispatch = {
        "sync": cmd_sync,
        "validate": cmd_validate,
        "merge": cmd_merge,
        "blocks": cmd_blocks,
    }

    handler = dispatch.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
