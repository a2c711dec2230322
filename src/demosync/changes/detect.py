"""Detect which upstream files were added, modified or deleted."""

from __future__ import annotations

import filecmp
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from demosync.errors import SyncError


@dataclass
class ChangeSet:
    """Paths relative to the repository root, grouped by change type."""

    added: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.modified) + len(self.deleted)

    def to_dict(self) -> dict:
        return {
            "added": list(self.added),
            "modified": list(self.modified),
            "deleted": list(self.deleted),
        }


def _run_git(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    """Run a git command and return the result."""
    return subprocess.run(
        ["git"] + args,
        cwd=cwd,
        capture_output=True,
        text=True,
    )


def parse_name_status(output: str) -> ChangeSet:
    """Parse ``git diff --name-status`` output.

    Renames count as a deletion of the old path plus an addition of the new
    one; copies count as an addition.
    """
    changes = ChangeSet()
    for line in output.splitlines():
        if not line.strip():
            continue
        status, *paths = line.split("\t")
        code = status[:1]
        if code == "A":
            changes.added.append(paths[0])
        elif code == "M":
            changes.modified.append(paths[0])
        elif code == "D":
            changes.deleted.append(paths[0])
        elif code == "R" and len(paths) == 2:
            changes.deleted.append(paths[0])
            changes.added.append(paths[1])
        elif code == "C" and len(paths) == 2:
            changes.added.append(paths[1])
    return changes


def detect_changes(
    main_path: Path | str,
    base: str = "HEAD~1",
    head: str = "HEAD",
    source_dir: str = "src",
) -> ChangeSet:
    """Diff two commits of the upstream checkout.

    Args:
        main_path: Upstream repository root.
        base: Older revision.
        head: Newer revision.
        source_dir: Limit the diff to this directory.

    Returns:
        ChangeSet of paths relative to ``main_path``.

    Raises:
        SyncError: If git fails.
    """
    try:
        result = _run_git(
            ["diff", base, head, "--name-status", "--", source_dir],
            Path(main_path),
        )
    except OSError as e:
        raise SyncError(f"could not run git in {main_path}: {e}") from e
    if result.returncode != 0:
        raise SyncError(
            f"git diff {base} {head} failed in {main_path}: {result.stderr.strip()}"
        )
    return parse_name_status(result.stdout)


def _list_files(root: Path) -> set[str]:
    if not root.is_dir():
        return set()
    return {
        p.relative_to(root).as_posix()
        for p in root.rglob("*")
        if p.is_file()
    }


def compare_trees(
    main_path: Path | str,
    demo_path: Path | str,
    source_dir: str = "src",
) -> ChangeSet:
    """Compare two working trees instead of two commits.

    Files only upstream are added, files whose bytes differ are modified,
    files only in the derivative are deleted.
    """
    main_root = Path(main_path)
    demo_root = Path(demo_path)
    main_files = _list_files(main_root / source_dir)
    demo_files = _list_files(demo_root / source_dir)

    base = Path(source_dir).as_posix()
    prefix = "" if base == "." else base + "/"

    changes = ChangeSet()
    for rel in sorted(main_files - demo_files):
        changes.added.append(prefix + rel)
    for rel in sorted(main_files & demo_files):
        if not filecmp.cmp(main_root / source_dir / rel, demo_root / source_dir / rel, shallow=False):
            changes.modified.append(prefix + rel)
    for rel in sorted(demo_files - main_files):
        changes.deleted.append(prefix + rel)
    return changes
