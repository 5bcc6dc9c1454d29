"""Configuration management for sourcesecure.

Configuration sources are layered, later ones overriding earlier ones:

1. Default values
2. Configuration file (explicit, or discovered from the target upwards)
3. Environment variables (``SOURCESECURE_*``)
4. CLI arguments

Example usage::

    from sourcesecure.config import load_config

    config = load_config(start_path=Path("repo"), cli_args={"concurrency": 10})
    scan_config = config.to_scan_config(Path("repo"))
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sourcesecure.config.env import ENV_CONFIG_PATH, get_config_path_from_env, get_env_overrides
from sourcesecure.config.loader import ConfigLoader
from sourcesecure.config.schema import (
    AIConfig,
    ArchiveConfig,
    ExternalConfig,
    HistoryConfig,
    OutputSettings,
    ScanSettings,
    SourceSecureConfig,
)
from sourcesecure.core.exceptions import ConfigError

__all__ = [
    "AIConfig",
    "ArchiveConfig",
    "ConfigLoader",
    "ENV_CONFIG_PATH",
    "ExternalConfig",
    "HistoryConfig",
    "OutputSettings",
    "ScanSettings",
    "SourceSecureConfig",
    "get_env_overrides",
    "load_config",
]

# Flat CLI argument name -> (section, key)
CLI_MAPPINGS: dict[str, tuple[str, str]] = {
    "concurrency": ("scan", "concurrency"),
    "max_file_size": ("scan", "max_file_size"),
    "follow_symlinks": ("scan", "follow_symlinks"),
    "extensions": ("scan", "scan_extensions"),
    "archive_depth": ("archive", "max_depth"),
    "no_archives": ("archive", "enabled"),
    "no_external": ("external", "enabled"),
    "verify": ("external", "verify"),
    "history_depth": ("history", "depth"),
    "ai_model": ("ai", "model"),
    "format": ("output", "format"),
    "output": ("output", "output_path"),
    "quiet": ("output", "quiet"),
    "verbose": ("output", "verbose"),
}

# Flags that switch a setting off when given
NEGATED_FLAGS = frozenset({"no_archives", "no_external"})


def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``; None values are skipped."""
    result = base.copy()
    for key, value in override.items():
        if value is None:
            continue
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def _normalize_cli_args(cli_args: dict[str, Any]) -> dict[str, Any]:
    """Convert flat CLI argument names into the nested config structure."""
    result: dict[str, Any] = {}
    for arg_name, value in cli_args.items():
        if value is None:
            continue
        if arg_name in NEGATED_FLAGS:
            if not value:
                continue
            value = False
        if arg_name in CLI_MAPPINGS:
            section, key = CLI_MAPPINGS[arg_name]
            result.setdefault(section, {})[key] = value
        else:
            result[arg_name] = value
    return result


def load_config(
    config_path: Path | str | None = None,
    cli_args: dict[str, Any] | None = None,
    start_path: Path | None = None,
    use_env: bool = True,
    use_file: bool = True,
) -> SourceSecureConfig:
    """Load configuration from every source, in priority order.

    Args:
        config_path: Explicit config file; discovery is used when omitted.
        cli_args: Flat CLI overrides (see CLI_MAPPINGS).
        start_path: Directory where config file discovery starts.
        use_env: Apply ``SOURCESECURE_*`` environment overrides.
        use_file: Load a config file at all.

    Returns:
        The merged, validated configuration.

    Raises:
        ConfigError: If a config file is invalid or the merged values do
            not validate.
    """
    config_dict = SourceSecureConfig.model_construct().model_dump()

    if use_file:
        loader = ConfigLoader()
        file_path = config_path or get_config_path_from_env() or loader.find_config_file(start_path)
        if file_path:
            config_dict = _merge_configs(config_dict, loader.load_data(file_path))

    if use_env:
        config_dict = _merge_configs(config_dict, get_env_overrides())

    if cli_args:
        config_dict = _merge_configs(config_dict, _normalize_cli_args(cli_args))

    try:
        return SourceSecureConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
