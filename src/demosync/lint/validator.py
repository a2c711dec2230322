"""Validate the derivative tree after (or before) a sync."""

from __future__ import annotations

import logging
from pathlib import Path

from demosync.config import default_config, get_marker_set, get_validation
from demosync.lint.blocks import check_block_balance
from demosync.lint.report import FILE_SIZE, READ_ERROR, Issue, ValidationReport
from demosync.lint.syntax import (
    SCRIPT_EXTENSIONS,
    SOURCE_EXTENSIONS,
    check_css,
    check_html,
    check_imports,
    check_javascript,
)

logger = logging.getLogger(__name__)


def source_files(root: Path) -> list[Path]:
    """All checkable source files under ``root``, sorted."""
    if not root.is_dir():
        return []
    return sorted(
        p for p in root.rglob("*")
        if p.is_file() and p.suffix in SOURCE_EXTENSIONS
    )


def validate_file(
    path: Path,
    config: dict,
    display: str | None = None,
) -> ValidationReport:
    """Run every enabled check on one file.

    Args:
        path: File on disk.
        config: Sync config (see ``demosync.config``).
        display: Name used in issues. Defaults to ``path``.

    Returns:
        ValidationReport for this file alone.
    """
    name = display or str(path)
    opts = get_validation(config)
    report = ValidationReport(files_checked=1)

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        report.errors.append(Issue(name, READ_ERROR, f"Failed to read file: {e}"))
        return report

    max_size = opts.get("max_file_size")
    if max_size:
        size = len(content.encode("utf-8"))
        if size > max_size:
            report.warnings.append(Issue(
                name, FILE_SIZE, f"File size {size} bytes exceeds limit {max_size}",
            ))

    if opts.get("validate_protected_blocks", True):
        report.errors.extend(
            check_block_balance(content.split("\n"), get_marker_set(config), name)
        )

    suffix = path.suffix
    if opts.get("check_imports", True) and suffix in SCRIPT_EXTENSIONS:
        errors, warnings = check_imports(name, content)
        report.errors.extend(errors)
        report.warnings.extend(warnings)

    if opts.get("syntax_check", True):
        if suffix in (".js", ".jsx"):
            report.warnings.extend(check_javascript(name, content))
        elif suffix == ".html":
            report.warnings.extend(check_html(name, content))
        elif suffix in (".css", ".scss"):
            errors, warnings = check_css(name, content)
            report.errors.extend(errors)
            report.warnings.extend(warnings)

    return report


def validate_tree(
    demo_path: Path | str,
    config: dict | None = None,
    source_dir: str | None = None,
) -> ValidationReport:
    """Validate every source file of the derivative checkout.

    Args:
        demo_path: Derivative repository root.
        config: Sync config. Defaults to the built-in configuration.
        source_dir: Subdirectory to scan. Defaults to ``advanced.source_dir``.

    Returns:
        Combined ValidationReport; paths are relative to ``demo_path``.
    """
    config = config or default_config()
    root = Path(demo_path)
    scan_dir = source_dir or config.get("advanced", {}).get("source_dir", "src")

    report = ValidationReport()
    for path in source_files(root / scan_dir):
        rel = path.relative_to(root).as_posix()
        logger.debug("validating %s", rel)
        report.extend(validate_file(path, config, rel))
    return report
