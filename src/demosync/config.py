"""Load and query sync-config.yml."""

from __future__ import annotations

import copy
import logging
from pathlib import Path

import yaml

from demosync.blocks import (
    DEFAULT_END_MARKERS,
    DEFAULT_LOOKAHEAD,
    DEFAULT_START_MARKERS,
    DEFAULT_WINDOW_SIZE,
    UNANCHORED_WARNING,
)
from demosync.blocks.extractor import MarkerSet
from demosync.paths import config_path as _default_config_path

logger = logging.getLogger(__name__)

_DEFAULTS: dict = {
    "ignore_patterns": [],
    "smart_merge_files": ["src/**/*.js", "src/**/*.jsx"],
    "full_copy_files": ["src/styles/**/*.css"],
    "protected_blocks": {
        "start_markers": list(DEFAULT_START_MARKERS),
        "end_markers": list(DEFAULT_END_MARKERS),
        "context_window": DEFAULT_WINDOW_SIZE,
        "lookahead": DEFAULT_LOOKAHEAD,
        "warning_marker": UNANCHORED_WARNING,
    },
    "auto_detect_patterns": {
        "disabled_buttons": ["disabled={true}"],
        "mock_data": ["mockData", "dummyData"],
    },
    "validation": {
        "check_imports": True,
        "validate_protected_blocks": True,
        "syntax_check": True,
        "max_file_size": 1048576,
        "fail_on_error": False,
    },
    "advanced": {
        "source_dir": "src",
        "diff_base": "HEAD~1",
        "sync_deletions": True,
    },
}


def default_config() -> dict:
    """Return a fresh copy of the built-in configuration."""
    return copy.deepcopy(_DEFAULTS)


def _deep_merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Path | str | None = None) -> dict:
    """Load sync-config.yml layered over the defaults.

    Args:
        path: Path to the config file. Defaults to
            ``<main-app>/.github/sync-config.yml``.

    Returns:
        Config dict with every default key present.

    Raises:
        ValueError: If the file is not a YAML mapping.
        yaml.YAMLError: If the YAML is malformed.
    """
    cfg_path = Path(path) if path else _default_config_path()
    if not cfg_path.is_file():
        logger.warning("Config %s not found, using defaults", cfg_path)
        return default_config()

    with open(cfg_path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return default_config()
    if not isinstance(data, dict):
        raise ValueError(f"sync config at {cfg_path} is not a YAML mapping")

    return _deep_merge(default_config(), data)


def get_marker_set(config: dict) -> MarkerSet:
    """Build the MarkerSet from the protected_blocks section."""
    section = config.get("protected_blocks", {})
    return MarkerSet(
        tuple(section.get("start_markers") or DEFAULT_START_MARKERS),
        tuple(section.get("end_markers") or DEFAULT_END_MARKERS),
    )


def get_merge_options(config: dict) -> dict:
    """Extract window size, lookahead and warning template for ``merge``."""
    section = config.get("protected_blocks", {})
    return {
        "window_size": int(section.get("context_window", DEFAULT_WINDOW_SIZE)),
        "lookahead": int(section.get("lookahead", DEFAULT_LOOKAHEAD)),
        "warning_template": section.get("warning_marker") or UNANCHORED_WARNING,
    }


def get_validation(config: dict) -> dict:
    """Extract validation section."""
    return config.get("validation", {})


def get_patterns(config: dict) -> dict[str, list[str]]:
    """Extract the three file classification pattern lists."""
    return {
        "ignore": list(config.get("ignore_patterns") or []),
        "smart_merge": list(config.get("smart_merge_files") or []),
        "full_copy": list(config.get("full_copy_files") or []),
    }


def get_auto_detect_patterns(config: dict) -> dict[str, list[str]]:
    """Extract demo-code detection patterns grouped by category."""
    return config.get("auto_detect_patterns") or {}


def get_advanced(config: dict) -> dict:
    """Extract advanced section."""
    return config.get("advanced", {})
