"""Validation issue and report types."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

# Issue types
MALFORMED_BLOCK = "protected_block"
READ_ERROR = "read_error"
FILE_SIZE = "file_size"
IMPORT = "import"
SYNTAX = "syntax"
BEST_PRACTICE = "best_practice"
DEBUG_CODE = "debug_code"


@dataclass(frozen=True)
class Issue:
    file: str
    type: str
    message: str
    line: int | None = None

    def __str__(self) -> str:
        loc = f":{self.line}" if self.line else ""
        return f"{self.file}{loc} - {self.message}"

    def to_dict(self) -> dict:
        d = {"file": self.file, "type": self.type, "message": self.message}
        if self.line is not None:
            d["line"] = self.line
        return d


@dataclass
class ValidationReport:
    """Result of a validation run over one or more files."""

    errors: list[Issue] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)
    files_checked: int = 0

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    def extend(self, other: ValidationReport) -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.files_checked += other.files_checked

    def summary(self) -> str:
        lines = [f"Sync Validation: {self.files_checked} files checked"]
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  {w}")
        if self.passed and not self.warnings:
            lines.append("All checks passed.")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "success": self.passed,
            "summary": {
                "files_checked": self.files_checked,
                "errors": len(self.errors),
                "warnings": len(self.warnings),
            },
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }

    def write_json(self, path: Path | str) -> None:
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")
