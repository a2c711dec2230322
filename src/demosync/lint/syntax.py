"""Heuristic import and syntax checks for web source files."""

from __future__ import annotations

import re

from demosync.lint.report import BEST_PRACTICE, DEBUG_CODE, IMPORT, SYNTAX, Issue

SCRIPT_EXTENSIONS = {".js", ".jsx", ".ts", ".tsx"}
SOURCE_EXTENSIONS = SCRIPT_EXTENSIONS | {".html", ".css", ".scss"}

_DEEP_RELATIVE = re.compile(r"from\s+['\"](\.\./){4,}")
_MAIN_APP_IMPORT = re.compile(r"from\s+['\"].*/main-app/")
_IMPORT_TYPO = re.compile(r"improt|imoprt|form\s+['\"]")
_VAR_DECL = re.compile(r"^\s*var\s+")
_CONSOLE = re.compile(r"console\.(log|debug|info)")
_OPEN_TAG = re.compile(r"<(\w+)[^>]*>")
_CLOSE_TAG = re.compile(r"</(\w+)>")
_CSS_PROPERTY = re.compile(r":\s*.+[^;{}\s]$")

_VOID_TAGS = {"img", "br", "hr", "input", "meta", "link"}
_BRACKETS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = set(_BRACKETS.values())


def check_imports(file: str, content: str) -> tuple[list[Issue], list[Issue]]:
    """Flag suspicious import lines in script files.

    Returns:
        (errors, warnings)
    """
    errors: list[Issue] = []
    warnings: list[Issue] = []
    for i, raw in enumerate(content.split("\n"), start=1):
        line = raw.strip()
        if _DEEP_RELATIVE.search(line):
            warnings.append(Issue(file, IMPORT, "Import path goes up too many levels (>= 4 levels)", i))
        if _MAIN_APP_IMPORT.search(line):
            errors.append(Issue(
                file, IMPORT,
                "Import references main-app path (should be relative or demo-specific)", i,
            ))
        if _IMPORT_TYPO.search(line) and "//" not in line:
            warnings.append(Issue(file, IMPORT, "Possible typo in import statement", i))
    return errors, warnings


def check_brackets(file: str, content: str) -> list[Issue]:
    """Stack-based bracket check; stops at the first mismatch.

    String and comment contents are not skipped.
    """
    stack: list[str] = []
    for ch in content:
        if ch in _BRACKETS:
            stack.append(ch)
        elif ch in _CLOSERS:
            if not stack:
                return [Issue(file, SYNTAX, f"Unmatched closing bracket '{ch}'")]
            last = stack.pop()
            if _BRACKETS[last] != ch:
                return [Issue(file, SYNTAX, f"Mismatched brackets: '{last}' and '{ch}'")]
    if stack:
        return [Issue(file, SYNTAX, f"{len(stack)} unclosed bracket(s)")]
    return []


def check_javascript(file: str, content: str) -> list[Issue]:
    """Bracket balance plus ``var`` and console statements. All warnings."""
    warnings = check_brackets(file, content)
    for i, line in enumerate(content.split("\n"), start=1):
        if "//" in line:
            continue
        if _VAR_DECL.match(line):
            warnings.append(Issue(file, BEST_PRACTICE, "Use let/const instead of var", i))
        if _CONSOLE.search(line):
            warnings.append(Issue(file, DEBUG_CODE, "Console statement detected (might be debug code)", i))
    return warnings


def check_html(file: str, content: str) -> list[Issue]:
    opened = [t.lower() for t in _OPEN_TAG.findall(content) if t.lower() not in _VOID_TAGS]
    closed = _CLOSE_TAG.findall(content)
    if len(opened) != len(closed):
        return [Issue(
            file, SYNTAX,
            f"Potential unclosed HTML tags ({len(opened)} open vs {len(closed)} close)",
        )]
    return []


def check_css(file: str, content: str) -> tuple[list[Issue], list[Issue]]:
    """Brace balance (error) and missing semicolons (warning).

    Returns:
        (errors, warnings)
    """
    errors: list[Issue] = []
    warnings: list[Issue] = []
    opening, closing = content.count("{"), content.count("}")
    if opening != closing:
        errors.append(Issue(file, SYNTAX, f"Unmatched braces ({opening} open vs {closing} close)"))
    for i, raw in enumerate(content.split("\n"), start=1):
        line = raw.strip()
        if _CSS_PROPERTY.search(line) and "//" not in line:
            warnings.append(Issue(file, SYNTAX, "CSS property might be missing semicolon", i))
    return errors, warnings
