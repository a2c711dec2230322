"""Validate CLI command."""

import argparse
import json
from pathlib import Path

from demosync.cli.sync import resolve_config
from demosync.paths import demo_app_dir


def cmd_validate(args: argparse.Namespace) -> int:
    from demosync.lint.validator import validate_tree

    demo_root = Path(args.demo) if args.demo else demo_app_dir()
    config = resolve_config(args)
    report = validate_tree(demo_root, config)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(report.summary())

    if args.output:
        report.write_json(args.output)
        if not args.json:
            print(f"\nResults written to {args.output}")

    return 0 if report.passed else 1
