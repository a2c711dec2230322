"""Render the pull-request body and machine-readable outputs of a sync run."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

from demosync.sync import SyncResult

RESULTS_FILE = "sync-results.json"
DESCRIPTION_FILE = "pr-description.md"


def _bullets(items: list[str], empty: str = "_None_") -> str:
    if not items:
        return empty
    return "\n".join(f"- `{item}`" for item in items)


def render_pr_description(
    result: SyncResult,
    env: Mapping[str, str] | None = None,
) -> str:
    """Build the Markdown PR body for a sync run.

    Args:
        result: Completed sync result.
        env: Environment used for the References section. Defaults to
            ``os.environ`` (GitHub Actions variables).
    """
    env = os.environ if env is None else env
    changes = result.changes

    lines = [
        "## Automated Demo Sync",
        "",
        "This PR synchronizes changes from `main-app` to `demo-app`, "
        "preserving protected blocks in the demo code.",
        "",
        "### Summary",
        f"- **Added**: {len(changes.added)} files",
        f"- **Modified**: {len(changes.modified)} files",
        f"- **Deleted**: {len(changes.deleted)} files",
        f"- **Protected Blocks Preserved**: {result.preserved_blocks} blocks "
        f"in {len(result.preserved)} files",
        "",
        "### Detailed Changes",
        "",
        "#### Added Files",
        _bullets(changes.added),
        "",
        "#### Modified Files",
        _bullets(changes.modified),
        "",
        "#### Deleted Files",
        _bullets(changes.deleted),
        "",
        "### Protected Code Blocks",
    ]
    if result.preserved:
        lines.extend(
            f"- `{p['file']}` ({p['blocks']} blocks preserved)" for p in result.preserved
        )
    else:
        lines.append("_No protected blocks in modified files_")

    if result.merge_warnings:
        lines += [
            "",
            "### Blocks Needing Review",
            "These blocks lost their surrounding context upstream and were "
            "appended at the end of the file:",
        ]
        lines.extend(
            f"- `{w['file']}` lines {w['start_line']}-{w['end_line']}"
            for w in result.merge_warnings
        )

    if result.conflicts:
        lines += ["", "### Skipped (malformed protected blocks)"]
        lines.extend(
            f"- `{c['file']}` line {c['line']}: {c['reason']}" for c in result.conflicts
        )

    lines += ["", "### Validation Results"]
    if result.validation is not None:
        v = result.validation
        lines += [
            f"- **Errors**: {len(v.errors)}",
            f"- **Warnings**: {len(v.warnings)}",
        ]
        if v.errors:
            lines += ["", "**Errors:**"]
            lines.extend(f"- {e}" for e in v.errors)
        if v.warnings:
            lines += ["", "**Warnings:**"]
            lines.extend(f"- {w}" for w in v.warnings)
    else:
        lines.append("_Validation skipped_")

    lines += [
        "",
        "### Testing Recommendations",
        "1. **UI Review**: Check that demo-specific UI elements (disabled buttons, notices) are intact",
        "2. **Data Flow**: Verify mock data is still being used instead of real API calls",
        "3. **Functionality**: Ensure disabled features remain disabled",
        "4. **Styling**: Confirm visual appearance matches main-app",
        "",
        "### References",
        f"- Main app commit: `{env.get('GITHUB_SHA', 'unknown')}`",
        "- Sync config: `.github/sync-config.yml`",
    ]
    run_id = env.get("GITHUB_RUN_ID")
    if run_id:
        server = env.get("GITHUB_SERVER_URL", "https://github.com")
        repo = env.get("GITHUB_REPOSITORY", "")
        lines.append(f"- Workflow run: [#{run_id}]({server}/{repo}/actions/runs/{run_id})")

    lines += [
        "",
        "---",
        "_This PR was generated by the demo sync workflow. Review carefully before merging._",
        "",
    ]
    return "\n".join(lines)


def github_outputs(result: SyncResult) -> dict[str, str]:
    """Key/value pairs for ``$GITHUB_OUTPUT``."""
    v = result.validation
    has_errors = bool(result.errors) or bool(v and v.errors)
    has_warnings = bool(result.merge_warnings) or bool(v and v.warnings)
    return {
        "changes_made": str(result.files_changed > 0).lower(),
        "files_changed": str(result.files_changed),
        "has_errors": str(has_errors).lower(),
        "has_warnings": str(has_warnings).lower(),
        "unanchored_blocks": str(len(result.merge_warnings)),
    }


def write_outputs(
    result: SyncResult,
    output_dir: Path | str,
    description: str | None = None,
    error: str | None = None,
    env: Mapping[str, str] | None = None,
) -> dict[str, Path]:
    """Write sync-results.json, pr-description.md and GitHub step outputs.

    Returns:
        Mapping of output name to the path written.
    """
    env = os.environ if env is None else env
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written: dict[str, Path] = {}

    payload = result.to_dict()
    payload["pr_description"] = description
    payload["error"] = error
    if error:
        payload["success"] = False

    results_path = out / RESULTS_FILE
    with open(results_path, "w") as f:
        json.dump(payload, f, indent=2)
        f.write("\n")
    written["results"] = results_path

    if description:
        desc_path = out / DESCRIPTION_FILE
        desc_path.write_text(description)
        written["description"] = desc_path

    gh_output = env.get("GITHUB_OUTPUT")
    if gh_output:
        with open(gh_output, "a") as f:
            for key, value in github_outputs(result).items():
                f.write(f"{key}={value}\n")
        written["github_output"] = Path(gh_output)

    return written
