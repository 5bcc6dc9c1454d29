"""Environment variable mapping for sourcesecure configuration.

Each supported ``SOURCESECURE_*`` variable maps to one configuration
key. Values that cannot be parsed are ignored rather than rejected.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

ENV_CONFIG_PATH = "SOURCESECURE_CONFIG_PATH"
ENV_CONCURRENCY = "SOURCESECURE_CONCURRENCY"
ENV_MAX_FILE_SIZE = "SOURCESECURE_MAX_FILE_SIZE"
ENV_EXTENSIONS = "SOURCESECURE_EXTENSIONS"
ENV_FOLLOW_SYMLINKS = "SOURCESECURE_FOLLOW_SYMLINKS"
ENV_ARCHIVE_DEPTH = "SOURCESECURE_ARCHIVE_DEPTH"
ENV_ARCHIVE_MAX_SIZE = "SOURCESECURE_ARCHIVE_MAX_SIZE"
ENV_EXTERNAL_COMMAND = "SOURCESECURE_EXTERNAL_COMMAND"
ENV_EXTERNAL_ENABLED = "SOURCESECURE_EXTERNAL_ENABLED"
ENV_EXTERNAL_VERIFY = "SOURCESECURE_EXTERNAL_VERIFY"
ENV_AI_URL = "SOURCESECURE_AI_URL"
ENV_AI_MODEL = "SOURCESECURE_AI_MODEL"
ENV_HISTORY_DEPTH = "SOURCESECURE_HISTORY_DEPTH"
ENV_OUTPUT_FORMAT = "SOURCESECURE_OUTPUT_FORMAT"
ENV_LOG_LEVEL = "SOURCESECURE_LOG_LEVEL"


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on", "enabled")


def _parse_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def _parse_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _as_is(value: str) -> str:
    return value


def _lower(value: str) -> str:
    return value.lower()


# variable -> (section or None for top level, key, parser)
ENV_MAPPING: dict[str, tuple[str | None, str, Callable[[str], Any]]] = {
    ENV_CONCURRENCY: ("scan", "concurrency", _parse_int),
    ENV_MAX_FILE_SIZE: ("scan", "max_file_size", _as_is),
    ENV_EXTENSIONS: ("scan", "scan_extensions", _parse_list),
    ENV_FOLLOW_SYMLINKS: ("scan", "follow_symlinks", _parse_bool),
    ENV_ARCHIVE_DEPTH: ("archive", "max_depth", _parse_int),
    ENV_ARCHIVE_MAX_SIZE: ("archive", "max_extract_size", _as_is),
    ENV_EXTERNAL_COMMAND: ("external", "command", _as_is),
    ENV_EXTERNAL_ENABLED: ("external", "enabled", _parse_bool),
    ENV_EXTERNAL_VERIFY: ("external", "verify", _parse_bool),
    ENV_AI_URL: ("ai", "url", _as_is),
    ENV_AI_MODEL: ("ai", "model", _as_is),
    ENV_HISTORY_DEPTH: ("history", "depth", _parse_int),
    ENV_OUTPUT_FORMAT: ("output", "format", _lower),
    ENV_LOG_LEVEL: (None, "log_level", _lower),
}


def get_env_overrides() -> dict[str, Any]:
    """Read configuration overrides from the environment.

    Returns:
        A nested dictionary shaped like SourceSecureConfig, containing only
        the keys whose variables are set and parse.
    """
    overrides: dict[str, Any] = {}
    for variable, (section, key, parser) in ENV_MAPPING.items():
        if variable not in os.environ:
            continue
        value = parser(os.environ[variable])
        if value is None:
            continue
        if section is None:
            overrides[key] = value
        else:
            overrides.setdefault(section, {})[key] = value
    return overrides


def get_config_path_from_env() -> Path | None:
    """Return the config file named by SOURCESECURE_CONFIG_PATH, if it exists."""
    if ENV_CONFIG_PATH in os.environ:
        path = Path(os.environ[ENV_CONFIG_PATH])
        if path.exists():
            return path
    return None
