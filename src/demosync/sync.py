"""Sync upstream changes into the derivative checkout.

The sync process:
1. Detect added/modified/deleted upstream files (git diff or tree compare)
2. Drop files matching ignore patterns
3. Scan derivative copies of modified files for demo-only code
4. Apply: copy added files, smart-merge or copy modified files, delete
   removed files
5. Validate what was written (block balance, imports)

Preserves all protected blocks in smart-merged files.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from demosync.blocks.extractor import has_protected_blocks
from demosync.blocks.merge import merge
from demosync.changes.detect import ChangeSet, detect_changes
from demosync.changes.patterns import (
    SMART_MERGE,
    classify,
    detect_demo_patterns,
    matches_any,
)
from demosync.config import (
    default_config,
    get_advanced,
    get_auto_detect_patterns,
    get_marker_set,
    get_merge_options,
    get_patterns,
    get_validation,
)
from demosync.errors import SyncIOError, ValidationFailed
from demosync.lint.blocks import check_block_balance
from demosync.lint.report import MALFORMED_BLOCK, Issue, ValidationReport
from demosync.lint.syntax import SCRIPT_EXTENSIONS, check_imports

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Everything a sync run did, for the CLI and the report writer."""

    changes: ChangeSet = field(default_factory=ChangeSet)
    log: list[dict] = field(default_factory=list)
    detected: list[dict] = field(default_factory=list)
    preserved: list[dict] = field(default_factory=list)
    conflicts: list[dict] = field(default_factory=list)
    merge_warnings: list[dict] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)
    validation: ValidationReport | None = None
    dry_run: bool = False

    @property
    def files_changed(self) -> int:
        return self.changes.total

    @property
    def preserved_blocks(self) -> int:
        return sum(p["blocks"] for p in self.preserved)

    @property
    def passed(self) -> bool:
        # Malformed derivatives always fail a run; other validation errors
        # only when fail_on_error raises
        return not self.errors and not self.conflicts

    def summary(self) -> str:
        lines = ["Demo Sync Results", "─" * 40]
        lines.append(f"  Added:     {len(self.changes.added)}")
        lines.append(f"  Modified:  {len(self.changes.modified)}")
        lines.append(f"  Deleted:   {len(self.changes.deleted)}")
        lines.append(
            f"  Preserved: {self.preserved_blocks} block(s) in {len(self.preserved)} file(s)"
        )
        if self.merge_warnings:
            lines.append(f"\n  Unanchored blocks ({len(self.merge_warnings)}):")
            for w in self.merge_warnings:
                lines.append(f"    - {w['file']}:{w['start_line']}-{w['end_line']}")
        if self.conflicts:
            lines.append(f"\n  Conflicts ({len(self.conflicts)}):")
            for c in self.conflicts:
                lines.append(f"    - {c['file']}: {c['reason']}")
        if self.errors:
            lines.append(f"\n  Errors ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"    - {e['path']}: {e['error']}")
        if self.validation is not None:
            lines.append(
                f"\n  Validation: {len(self.validation.errors)} error(s), "
                f"{len(self.validation.warnings)} warning(s)"
            )
        if self.dry_run:
            lines.append("\n[DRY RUN] No files were modified.")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "success": self.passed,
            "dry_run": self.dry_run,
            "changes": self.changes.to_dict(),
            "preserved": self.preserved,
            "conflicts": self.conflicts,
            "merge_warnings": self.merge_warnings,
            "detected": self.detected,
            "sync_log": self.log,
            "errors": self.errors,
            "validation": self.validation.to_dict() if self.validation else None,
        }


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SyncIOError(path, str(e)) from e


def write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise SyncIOError(path, str(e)) from e


def copy_file(rel: str, main_path: Path, demo_path: Path, dry_run: bool = False) -> str | None:
    """Copy an upstream file over its derivative.

    Returns:
        The copied text, or None for binary files (copied but not validated).
    """
    src = main_path / rel
    try:
        text: str | None = src.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        text = None
    except OSError as e:
        raise SyncIOError(src, str(e)) from e
    if not dry_run:
        dest = demo_path / rel
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dest)
        except OSError as e:
            raise SyncIOError(dest, str(e)) from e
    return text


def delete_file(rel: str, demo_path: Path, dry_run: bool = False) -> bool:
    """Remove a derivative file. Returns False if it was already gone."""
    target = demo_path / rel
    if not target.exists():
        return False
    if not dry_run:
        try:
            target.unlink()
        except OSError as e:
            raise SyncIOError(target, str(e)) from e
    return True


def smart_merge_file(
    rel: str,
    main_path: Path,
    demo_path: Path,
    config: dict,
    dry_run: bool = False,
) -> dict:
    """Merge one upstream file into its derivative, keeping protected blocks.

    Returns:
        Dict with keys: action, text, blocks, warnings, issues. ``action`` is
        ``smart_merge``, ``smart_merge_no_blocks``, ``copied`` (no derivative
        yet) or ``conflict`` (derivative has malformed blocks and is left as is).
    """
    markers = get_marker_set(config)
    source = read_text(main_path / rel)
    demo_file = demo_path / rel

    if not demo_file.exists():
        text = copy_file(rel, main_path, demo_path, dry_run)
        return {"action": "copied", "text": text, "blocks": 0, "warnings": [], "issues": []}

    derivative = read_text(demo_file)
    issues = check_block_balance(derivative.split("\n"), markers, rel)
    if issues:
        return {"action": "conflict", "text": derivative, "blocks": 0, "warnings": [], "issues": issues}

    result = merge(source, derivative, markers, **get_merge_options(config))
    if not dry_run:
        write_text(demo_file, result.text)

    action = "smart_merge" if result.blocks_preserved else "smart_merge_no_blocks"
    return {
        "action": action,
        "text": result.text,
        "blocks": result.blocks_preserved,
        "warnings": [w.to_dict() for w in result.warnings],
        "issues": [],
    }


def filter_ignored(result: SyncResult, patterns: list[str]) -> None:
    """Drop ignored paths from ``result.changes`` in place, logging each."""
    def keep(files: list[str]) -> list[str]:
        kept = []
        for f in files:
            hit = matches_any(f, patterns)
            if hit:
                logger.info("ignoring %s (matched %s)", f, hit)
                result.log.append({"action": "ignored", "file": f, "reason": f"Matched pattern: {hit}"})
            else:
                kept.append(f)
        return kept

    changes = result.changes
    changes.added = keep(changes.added)
    changes.modified = keep(changes.modified)
    changes.deleted = keep(changes.deleted)


def sync(
    main_path: Path | str,
    demo_path: Path | str,
    config: dict | None = None,
    changes: ChangeSet | None = None,
    dry_run: bool = False,
) -> SyncResult:
    """Carry upstream changes into the derivative checkout.

    Args:
        main_path: Upstream repository root.
        demo_path: Derivative repository root.
        config: Sync config. Defaults to the built-in configuration.
        changes: Precomputed change set. Detected with git when omitted.
        dry_run: Compute everything but write nothing.

    Returns:
        SyncResult describing every action taken.

    Raises:
        SyncError: If change detection fails.
        ValidationFailed: If validation finds errors and ``fail_on_error`` is set.
    """
    config = config or default_config()
    main_root = Path(main_path)
    demo_root = Path(demo_path)
    advanced = get_advanced(config)
    patterns = get_patterns(config)
    markers = get_marker_set(config)

    if changes is None:
        changes = detect_changes(
            main_root,
            base=advanced.get("diff_base", "HEAD~1"),
            source_dir=advanced.get("source_dir", "src"),
        )
    result = SyncResult(changes=changes, dry_run=dry_run)
    logger.info(
        "detected %d added, %d modified, %d deleted",
        len(changes.added), len(changes.modified), len(changes.deleted),
    )

    filter_ignored(result, patterns["ignore"])

    auto_detect = get_auto_detect_patterns(config)
    for rel in changes.modified:
        demo_file = demo_root / rel
        if not demo_file.is_file():
            continue
        try:
            content = read_text(demo_file)
        except SyncIOError as e:
            result.errors.append({"path": str(e.path), "error": e.reason})
            continue
        found = detect_demo_patterns(content, auto_detect)
        has_blocks = has_protected_blocks(content, markers)
        if found or has_blocks:
            logger.info("demo-specific code in %s", rel)
            result.detected.append({
                "file": rel,
                "patterns": [{"category": c, "pattern": p} for c, p in found],
                "protected_blocks": has_blocks,
            })

    outputs: dict[str, str | None] = {}

    for rel in changes.added:
        try:
            outputs[rel] = copy_file(rel, main_root, demo_root, dry_run)
            result.log.append({"action": "added", "file": rel})
        except SyncIOError as e:
            result.errors.append({"path": str(e.path), "error": e.reason})

    for rel in changes.modified:
        try:
            if classify(rel, patterns) == SMART_MERGE:
                merged = smart_merge_file(rel, main_root, demo_root, config, dry_run)
                _record_merge(result, rel, merged)
                if merged["action"] != "conflict":
                    outputs[rel] = merged["text"]
            else:
                outputs[rel] = copy_file(rel, main_root, demo_root, dry_run)
                result.log.append({"action": "full_copy", "file": rel})
        except SyncIOError as e:
            result.errors.append({"path": str(e.path), "error": e.reason})

    if advanced.get("sync_deletions", True):
        for rel in changes.deleted:
            try:
                if delete_file(rel, demo_root, dry_run):
                    result.log.append({"action": "deleted", "file": rel})
            except SyncIOError as e:
                result.errors.append({"path": str(e.path), "error": e.reason})

    result.validation = _validate_outputs(result, outputs, config)

    if result.validation.errors and get_validation(config).get("fail_on_error"):
        raise ValidationFailed([str(e) for e in result.validation.errors], result)

    return result


def _record_merge(result: SyncResult, rel: str, merged: dict) -> None:
    action = merged["action"]
    logger.info("%s: %s", action, rel)
    entry = {"action": action, "file": rel}
    if action == "smart_merge":
        entry["blocks_preserved"] = merged["blocks"]
        result.preserved.append({"file": rel, "blocks": merged["blocks"]})
    elif action == "conflict":
        for issue in merged["issues"]:
            result.conflicts.append({"file": rel, "line": issue.line, "reason": issue.message})
    result.log.append(entry)
    for w in merged["warnings"]:
        result.merge_warnings.append({"file": rel, **w})


def _validate_outputs(
    result: SyncResult,
    outputs: dict[str, str | None],
    config: dict,
) -> ValidationReport:
    """Check what the sync produced, from memory so dry runs are covered too."""
    opts = get_validation(config)
    markers = get_marker_set(config)
    preserved = {p["file"] for p in result.preserved}
    texts = {rel: text for rel, text in outputs.items() if text is not None}
    report = ValidationReport(files_checked=len(texts))

    for rel, text in sorted(texts.items()):
        if opts.get("validate_protected_blocks", True) and rel in preserved:
            report.errors.extend(check_block_balance(text.split("\n"), markers, rel))
        if opts.get("check_imports", True) and Path(rel).suffix in SCRIPT_EXTENSIONS:
            errors, warnings = check_imports(rel, text)
            report.errors.extend(errors)
            report.warnings.extend(warnings)

    # Derivatives skipped for malformed blocks are hard errors
    report.files_checked += len({c["file"] for c in result.conflicts})
    report.errors.extend(
        Issue(c["file"], MALFORMED_BLOCK, c["reason"], c["line"]) for c in result.conflicts
    )

    return report
