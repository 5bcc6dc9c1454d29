"""Configuration schema definitions using Pydantic Settings.

This module defines all configuration models for sourcesecure with
validation, defaults, and documentation.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sourcesecure.core.models import (
    DEFAULT_MAX_EXTRACT_SIZE,
    DEFAULT_MAX_FILE_SIZE,
    AISettings,
    ArchiveSettings,
    ExternalToolSettings,
    OutputFormat,
    ScanConfig,
)

_SIZE_MULTIPLIERS = {
    "B": 1,
    "K": 1024,
    "KB": 1024,
    "M": 1024 * 1024,
    "MB": 1024 * 1024,
    "G": 1024 * 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}


def parse_size(value: Any, default: int) -> int:
    """Parse a byte size such as ``10MB`` or ``512K``; integers pass through."""
    if value is None:
        return default
    if isinstance(value, str):
        text = value.strip().upper()
        for suffix, mult in sorted(_SIZE_MULTIPLIERS.items(), key=lambda x: -len(x[0])):
            if text.endswith(suffix):
                return int(float(text[: -len(suffix)]) * mult)
        return int(text)
    return int(value)


def _split_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ScanSettings(BaseModel):
    """Settings for file discovery and scanning."""

    ignore_dirs: list[str] = Field(
        default_factory=lambda: [".git", "node_modules", "dist", "build"],
        description="Entry names that are never scanned",
    )
    ignore_patterns: list[str] = Field(
        default_factory=lambda: [".env.example", "*.lock", "*.log", "package-lock.json", "yarn.lock", ".next"],
        description="Glob patterns (with *) matched on basenames, or path substrings",
    )
    scan_extensions: list[str] = Field(
        default_factory=lambda: list(ScanConfig.model_fields["scan_extensions"].default),
        description="Extension allow-list (empty = every non-binary file)",
    )
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        ge=0,
        description="Maximum file size in bytes to scan (0 for unlimited)",
    )
    concurrency: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum number of concurrent file scans",
    )
    follow_symlinks: bool = Field(
        default=False,
        description="Follow symlinked directories while walking",
    )

    @field_validator("max_file_size", mode="before")
    @classmethod
    def parse_file_size(cls, v: Any) -> int:
        return parse_size(v, DEFAULT_MAX_FILE_SIZE)

    @field_validator("ignore_dirs", "ignore_patterns", "scan_extensions", mode="before")
    @classmethod
    def parse_lists(cls, v: Any) -> list[str]:
        """Accept comma-separated strings as well as lists."""
        return _split_list(v)


class ArchiveConfig(BaseModel):
    """Settings for archive extraction."""

    enabled: bool = Field(default=True, description="Scan inside archives")
    max_depth: int = Field(default=3, ge=0, le=20, description="Maximum archive nesting depth")
    max_extract_size: int = Field(
        default=DEFAULT_MAX_EXTRACT_SIZE,
        ge=0,
        description="Maximum bytes extracted per top-level archive (0 for unlimited)",
    )
    timeout: float = Field(default=30.0, gt=0, description="Extraction timeout in seconds")

    @field_validator("max_extract_size", mode="before")
    @classmethod
    def parse_extract_size(cls, v: Any) -> int:
        return parse_size(v, DEFAULT_MAX_EXTRACT_SIZE)


class ExternalConfig(BaseModel):
    """Settings for the external secret scanner."""

    enabled: bool = Field(default=True, description="Run the external scanner when installed")
    command: str = Field(default="trufflehog", description="Command to run")
    fallback_commands: list[str] = Field(default_factory=list, description="Commands tried when the first fails")
    verify: bool = Field(default=False, description="Let the tool verify secrets against live services")
    timeout: float = Field(default=60.0, gt=0, description="Scan timeout in seconds")
    probe_timeout: float = Field(default=5.0, gt=0, description="Availability probe timeout in seconds")
    max_output: int = Field(default=10 * 1024 * 1024, gt=0, description="Maximum tool output in bytes")

    @field_validator("fallback_commands", mode="before")
    @classmethod
    def parse_fallbacks(cls, v: Any) -> list[str]:
        return _split_list(v)

    @field_validator("max_output", mode="before")
    @classmethod
    def parse_max_output(cls, v: Any) -> int:
        return parse_size(v, 10 * 1024 * 1024)


class AIConfig(BaseModel):
    """Settings for the optional language-model pass."""

    url: str = Field(default="http://localhost:11434/api/generate", description="Ollama generate endpoint")
    model: str = Field(default="llama2:7b", description="Model name")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")


class HistoryConfig(BaseModel):
    """Settings for the git history pass."""

    depth: int = Field(default=100, ge=1, description="Number of recent commits to scan")


class OutputSettings(BaseModel):
    """Settings for output formatting."""

    format: OutputFormat = Field(default=OutputFormat.TABLE, description="Output format")
    output_path: Path | None = Field(default=None, description="File to write output to (None for stdout)")
    quiet: bool = Field(default=False, description="Suppress non-essential output")
    verbose: bool = Field(default=False, description="Verbose output")

    @field_validator("format", mode="before")
    @classmethod
    def validate_format(cls, v: Any) -> OutputFormat:
        if v is None:
            return OutputFormat.TABLE
        if isinstance(v, OutputFormat):
            return v
        try:
            return OutputFormat(str(v).lower())
        except ValueError:
            valid = ", ".join(f.value for f in OutputFormat)
            raise ValueError(f"format must be one of: {valid}") from None


class SourceSecureConfig(BaseSettings):
    """Main configuration for sourcesecure.

    Can be loaded from environment variables, config files, or constructed
    programmatically.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOURCESECURE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    scan: ScanSettings = Field(default_factory=ScanSettings, description="Scan settings")
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig, description="Archive settings")
    external: ExternalConfig = Field(default_factory=ExternalConfig, description="External tool settings")
    ai: AIConfig = Field(default_factory=AIConfig, description="AI-assist settings")
    history: HistoryConfig = Field(default_factory=HistoryConfig, description="Git history settings")
    output: OutputSettings = Field(default_factory=OutputSettings, description="Output settings")
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> LogLevel:
        if v is None:
            return LogLevel.WARNING
        if isinstance(v, LogLevel):
            return v
        try:
            return LogLevel(str(v).lower())
        except ValueError:
            valid = ", ".join(level.value for level in LogLevel)
            raise ValueError(f"log_level must be one of: {valid}") from None

    def to_scan_config(
        self,
        target_path: Path | str,
        use_ai: bool = False,
        scan_history: bool = False,
        verbose: bool | None = None,
    ) -> ScanConfig:
        """Build the immutable ScanConfig for one scan of ``target_path``."""
        return ScanConfig(
            target_path=str(target_path),
            ignore_dirs=tuple(self.scan.ignore_dirs),
            ignore_patterns=tuple(self.scan.ignore_patterns),
            scan_extensions=tuple(self.scan.scan_extensions),
            use_ai=use_ai,
            scan_history=scan_history,
            history_depth=self.history.depth,
            verbose=self.output.verbose if verbose is None else verbose,
            follow_symlinks=self.scan.follow_symlinks,
            max_file_size=self.scan.max_file_size,
            concurrency=self.scan.concurrency,
            archive=ArchiveSettings(
                enabled=self.archive.enabled,
                max_depth=self.archive.max_depth,
                max_extract_size=self.archive.max_extract_size,
                timeout=self.archive.timeout,
            ),
            external=ExternalToolSettings(
                enabled=self.external.enabled,
                command=self.external.command,
                fallback_commands=tuple(self.external.fallback_commands),
                verify=self.external.verify,
                timeout=self.external.timeout,
                probe_timeout=self.external.probe_timeout,
                max_output=self.external.max_output,
            ),
            ai=AISettings(url=self.ai.url, model=self.ai.model, timeout=self.ai.timeout),
        )
