"""Path resolution for the two codebases and the sync config.

Uses environment variables when available, falls back to sibling checkouts.

Environment variables:
    DEMOSYNC_MAIN_APP_PATH: upstream checkout (default: ../main-app)
    DEMOSYNC_DEMO_APP_PATH: derivative checkout (default: ../demo-app)
    DEMOSYNC_CONFIG_PATH: sync config (default: <main>/.github/sync-config.yml)
    DEMOSYNC_OUTPUT_DIR: where result files are written (default: cwd)
"""

from __future__ import annotations

import os
from pathlib import Path

_DEFAULT_MAIN = "../main-app"
_DEFAULT_DEMO = "../demo-app"
_CONFIG_SUBPATH = Path(".github") / "sync-config.yml"


def main_app_dir() -> Path:
    """Return the upstream (main app) checkout."""
    return Path(os.environ.get("DEMOSYNC_MAIN_APP_PATH", _DEFAULT_MAIN))


def demo_app_dir() -> Path:
    """Return the derivative (demo app) checkout."""
    return Path(os.environ.get("DEMOSYNC_DEMO_APP_PATH", _DEFAULT_DEMO))


def config_path() -> Path:
    """Return the path to sync-config.yml."""
    env = os.environ.get("DEMOSYNC_CONFIG_PATH")
    if env:
        return Path(env)
    return main_app_dir() / _CONFIG_SUBPATH


def output_dir() -> Path:
    """Return the directory for sync-results.json and pr-description.md."""
    return Path(os.environ.get("DEMOSYNC_OUTPUT_DIR", "."))
