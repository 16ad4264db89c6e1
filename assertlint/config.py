"""Project-wide config (.assertlint/config.json)."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from assertlint.file_discovery import get_project_root, safe_write_text

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".assertlint"
CONFIG_FILE_NAME = "config.json"


@dataclass(frozen=True)
class ConfigKey:
    type: type
    default: object
    description: str


CONFIG_SCHEMA: dict[str, ConfigKey] = {
    "exclude": ConfigKey(list, [],
        "Path patterns to exclude from scanning"),
    "ignore": ConfigKey(list, [],
        "Finding ID patterns to suppress (fnmatch, e.g. float-compare::legacy/*)"),
    "enable": ConfigKey(list, [],
        "Checkers to enable in addition to the defaults"),
    "disable": ConfigKey(list, [],
        "Checkers to disable"),
    "test_files_only": ConfigKey(bool, True,
        "Only scan *_test.go files"),
    "jobs": ConfigKey(int, 0,
        "Parallel file workers (0 = one per CPU)"),
}


def config_path(root: Path | None = None) -> Path:
    """Return the config file location for a project root."""
    return (root or get_project_root()) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def default_config() -> dict[str, Any]:
    """Return a config dict with all keys set to their defaults."""
    return {k: copy.deepcopy(v.default) for k, v in CONFIG_SCHEMA.items()}


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config from disk, filling missing keys with defaults.

    A missing or unreadable file yields the defaults. Unknown keys are dropped
    and values of the wrong type fall back to the schema default.
    """
    p = path or config_path()
    config: dict[str, Any] = {}
    if p.exists():
        try:
            loaded = json.loads(p.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.debug("Ignoring unreadable config %s (%s)", p, exc)
            loaded = {}
        if isinstance(loaded, dict):
            config = loaded

    result = default_config()
    for key, schema in CONFIG_SCHEMA.items():
        if key not in config:
            continue
        value = config[key]
        # bool is an int subclass; keep "jobs": true out of the int slot.
        if isinstance(value, schema.type) and not (
            schema.type is int and isinstance(value, bool)
        ):
            result[key] = value
        else:
            logger.debug(
                "Config key %s has %s, expected %s; using default",
                key,
                type(value).__name__,
                schema.type.__name__,
            )
    return result


def save_config(config: dict, path: Path | None = None) -> None:
    """Save config to disk atomically."""
    p = path or config_path()
    safe_write_text(p, json.dumps(config, indent=2) + "\n")


def add_ignore_pattern(config: dict, pattern: str) -> None:
    """Append a pattern to the ignore list (deduplicates)."""
    ignores = config.setdefault("ignore", [])
    if pattern not in ignores:
        ignores.append(pattern)


def set_config_value(config: dict, key: str, raw: str) -> None:
    """Parse and set a config value from a raw string.

    Handles special cases:
    - "auto" → 0 for jobs
    - "true"/"false" for bools
    - list keys append (deduplicated)
    """
    if key not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config key: {key}")

    schema = CONFIG_SCHEMA[key]

    if schema.type is int:
        if raw.lower() == "auto":
            config[key] = 0
        else:
            value = int(raw)
            if value < 0:
                raise ValueError(f"Expected a non-negative integer for {key}, got: {raw}")
            config[key] = value
    elif schema.type is bool:
        if raw.lower() in ("true", "1", "yes"):
            config[key] = True
        elif raw.lower() in ("false", "0", "no"):
            config[key] = False
        else:
            raise ValueError(f"Expected true/false for {key}, got: {raw}")
    elif schema.type is list:
        config.setdefault(key, [])
        if raw not in config[key]:
            config[key].append(raw)
    else:
        config[key] = raw


def unset_config_value(config: dict, key: str) -> None:
    """Reset a config key to its default value."""
    if key not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config key: {key}")
    config[key] = copy.deepcopy(CONFIG_SCHEMA[key].default)
