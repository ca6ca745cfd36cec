"""Load and validate list-todo configuration (YAML)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from listtodo.graph import ACTIVE_STATUSES, DONE_STATUS, INACTIVE_STATUSES
from listtodo.render import OUTPUT_FORMATS
from listtodo.selection import normalize_selection_mode

CONFIG_FILENAME = ".list-todo.yaml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Default config values
DEFAULTS: dict[str, Any] = {
    "select": "all",
    "output_format": "json",
    "statuses": {
        "active": list(ACTIVE_STATUSES),
        "inactive": list(INACTIVE_STATUSES),
    },
    "random": {
        "eligible_types": ["task"],
    },
    "pretty": {
        "separator_width": 74,
    },
    "log_level": "WARNING",
}


class ConfigError(Exception):
    """Raised when config is invalid or missing."""


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base recursively. Override wins on conflicts."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _string_list(config: dict, section: str, key: str) -> list[str]:
    value = config.get(section, {}).get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{section}.{key}' must be a list of strings")
    return value


def _validate(config: dict) -> None:
    """Validate required fields in config."""
    try:
        config["select"] = normalize_selection_mode(str(config.get("select")))
    except ValueError as exc:
        raise ConfigError(f"'select': {exc}") from None

    if config.get("output_format") not in OUTPUT_FORMATS:
        raise ConfigError(
            f"'output_format' must be one of {list(OUTPUT_FORMATS)}, "
            f"got {config.get('output_format')!r}"
        )

    for section in ("statuses", "random", "pretty"):
        if not isinstance(config.get(section), dict):
            raise ConfigError(f"'{section}' must be a mapping")

    active = _string_list(config, "statuses", "active")
    inactive = _string_list(config, "statuses", "inactive")
    if DONE_STATUS not in inactive:
        raise ConfigError(f"'statuses.inactive' must include '{DONE_STATUS}'")
    overlap = set(active) & set(inactive)
    if overlap:
        raise ConfigError(f"Statuses both active and inactive: {sorted(overlap)}")

    _string_list(config, "random", "eligible_types")

    width = config["pretty"].get("separator_width")
    if not isinstance(width, int) or isinstance(width, bool) or width < 0:
        raise ConfigError("'pretty.separator_width' must be a non-negative integer")

    level = config.get("log_level")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(f"'log_level' must be one of {list(LOG_LEVELS)}")
    config["log_level"] = level.upper()


def load_config(config_path: Path | None = None, search_dir: Path | None = None) -> dict:
    """Load config and merge it with DEFAULTS.

    An explicit ``config_path`` must exist. Otherwise ``.list-todo.yaml`` in
    ``search_dir`` (cwd if None) is used when present, and plain DEFAULTS
    when not. Callers always get a full, validated config dict.
    """
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config not found: {path}")
    else:
        path = (Path(search_dir) if search_dir else Path.cwd()) / CONFIG_FILENAME
        if not path.exists():
            config = _deep_merge(DEFAULTS, {})
            _validate(config)
            return config

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config is not valid YAML: {path}: {exc}") from None

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(raw).__name__}")

    config = _deep_merge(DEFAULTS, raw)
    _validate(config)
    return config
