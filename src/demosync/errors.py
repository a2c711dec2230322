"""Exception types raised by demosync."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from demosync.sync import SyncResult


class SyncError(RuntimeError):
    """Base class for sync failures that should stop a run."""


class SyncIOError(SyncError):
    """A file could not be read or written. Carries the offending path."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to access {self.path}: {reason}")


class ValidationFailed(SyncError):
    """Post-sync validation found errors and ``fail_on_error`` is set."""

    def __init__(self, errors: list[str], result: SyncResult | None = None) -> None:
        self.errors = errors
        self.result = result
        super().__init__(f"Validation failed with {len(errors)} error(s)")
