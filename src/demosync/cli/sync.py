"""Sync CLI command."""

import argparse
from pathlib import Path

from demosync.config import load_config
from demosync.paths import config_path, demo_app_dir, main_app_dir, output_dir


def resolve_config(args: argparse.Namespace, main_root: Path | None = None) -> dict:
    """Load the config named by --config, else the one inside the main checkout."""
    if getattr(args, "config", None):
        return load_config(args.config)
    if main_root is not None:
        return load_config(main_root / ".github" / "sync-config.yml")
    return load_config(config_path())


def cmd_sync(args: argparse.Namespace) -> int:
    from demosync.changes.detect import compare_trees
    from demosync.errors import SyncError, ValidationFailed
    from demosync.report import render_pr_description, write_outputs
    from demosync.sync import SyncResult, sync

    main_root = Path(args.main) if args.main else main_app_dir()
    demo_root = Path(args.demo) if args.demo else demo_app_dir()
    out_dir = Path(args.output_dir) if args.output_dir else output_dir()

    config = resolve_config(args, main_root)
    if args.base:
        config.setdefault("advanced", {})["diff_base"] = args.base

    changes = None
    if args.compare_trees:
        source_dir = config.get("advanced", {}).get("source_dir", "src")
        changes = compare_trees(main_root, demo_root, source_dir)

    try:
        result = sync(main_root, demo_root, config, changes=changes, dry_run=args.dry_run)
    except ValidationFailed as e:
        result = e.result or SyncResult()
        print(result.summary())
        print(f"\nERROR: {e}")
        for err in e.errors:
            print(f"  - {err}")
        write_outputs(result, out_dir, render_pr_description(result), error=str(e))
        return 1
    except SyncError as e:
        print(f"ERROR: {e}")
        write_outputs(SyncResult(dry_run=args.dry_run), out_dir, error=str(e))
        return 1

    description = render_pr_description(result)
    written = write_outputs(result, out_dir, description)

    print(result.summary())
    print(f"\n  Results:     {written['results']}")
    if "description" in written:
        print(f"  PR body:     {written['description']}")

    return 0 if result.passed else 1
