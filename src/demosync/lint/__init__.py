"""Post-sync checks on the derivative tree.

Block balance is the only check that guards the merge itself; the import and
syntax checks are quick heuristics (regexes and bracket counts), not parsers.
"""

from demosync.lint.blocks import check_block_balance
from demosync.lint.report import Issue, ValidationReport
from demosync.lint.validator import validate_file, validate_tree

__all__ = [
    "Issue",
    "ValidationReport",
    "check_block_balance",
    "validate_file",
    "validate_tree",
]
