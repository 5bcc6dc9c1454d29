"""Configuration file loading and discovery.

This module handles finding and loading configuration files from project
and user directories, in YAML, TOML or JSON.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from sourcesecure.core.exceptions import ConfigError

if TYPE_CHECKING:
    from sourcesecure.config.schema import SourceSecureConfig

# Config file names to search for (in order of preference)
CONFIG_FILE_NAMES = [
    ".sourcesecure.yml",
    ".sourcesecure.yaml",
    ".sourcesecure.toml",
    "sourcesecure.config.json",
]


def user_config_dirs() -> list[Path]:
    return [Path.home() / ".config" / "sourcesecure"]


class ConfigLoader:
    """Find and parse configuration files.

    Args:
        search_paths: Extra directories searched after the standard ones.
    """

    def __init__(self, search_paths: list[Path] | None = None) -> None:
        self.search_paths = search_paths or []

    def find_config_file(self, start_path: Path | None = None) -> Path | None:
        """Find a configuration file by searching standard locations.

        Searches, in order: ``start_path`` (or the current directory) and
        each of its parents, the user config directory, then any extra
        search paths. The first matching file name wins.
        """
        start = Path(start_path).resolve() if start_path else Path.cwd()
        if start.is_file():
            start = start.parent

        search_dirs = [start, *start.parents, *user_config_dirs(), *self.search_paths]
        for search_dir in search_dirs:
            for config_name in CONFIG_FILE_NAMES:
                config_path = search_dir / config_name
                if config_path.is_file():
                    return config_path
        return None

    def load_data(self, path: Path | str) -> dict[str, Any]:
        """Read and parse a configuration file into a plain dictionary.

        Raises:
            ConfigError: If the file is missing, unreadable or malformed.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        if not path.is_file():
            raise ConfigError(f"Configuration path is not a file: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

        suffix = path.suffix.lower()
        if suffix in (".yml", ".yaml"):
            data = self._load_yaml(content, path)
        elif suffix == ".toml":
            data = self._load_toml(content, path)
        else:
            data = self._load_json(content, path)

        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping, got: {type(data).__name__}")
        return data

    def load(self, path: Path | str) -> SourceSecureConfig:
        """Load and validate a configuration file.

        Raises:
            ConfigError: If the file cannot be parsed or fails validation.
        """
        from pydantic import ValidationError

        from sourcesecure.config.schema import SourceSecureConfig

        data = self.load_data(path)
        try:
            return SourceSecureConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    def _load_yaml(self, content: str, path: Path) -> Any:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        return {} if data is None else data

    def _load_toml(self, content: str, path: Path) -> Any:
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    def _load_json(self, content: str, path: Path) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
