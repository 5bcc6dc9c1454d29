"""Core data models for sourcesecure.

This module defines the Pydantic models used throughout sourcesecure for
representing scan configuration, findings, and results.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

#: Maximum number of characters of a matched secret kept in a finding.
PREVIEW_LENGTH = 50

#: Default ceiling for a single scanned file (10 MiB).
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

#: Default ceiling for the bytes extracted from one archive tree (100 MiB).
DEFAULT_MAX_EXTRACT_SIZE = 100 * 1024 * 1024

_SEVERITY_RANK = {"low": 0, "medium": 1, "high": 2, "critical": 3}


class Severity(str, Enum):
    """Severity levels for findings.

    Severities are totally ordered: LOW < MEDIUM < HIGH < CRITICAL.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Numeric position of the severity, LOW being 0."""
        return _SEVERITY_RANK[self.value]

    @classmethod
    def parse(cls, value: str | Severity) -> Severity:
        """Parse a severity name in any case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown severity: {value!r}") from None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    TABLE = "table"


def truncate_preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """Shorten matched text to a preview.

    Text longer than ``length`` characters is cut and suffixed with ``...``.
    """
    if len(text) > length:
        return text[:length] + "..."
    return text


class Finding(BaseModel):
    """Represents a single detected secret occurrence.

    A Finding is created when a detector, an analysis pass or an external
    tool reports a candidate secret. Findings are values: only the merger
    touches them after creation, and only to attach verification details.
    """

    detector_name: str = Field(..., description="Name of the detector (the finding type)")
    file_path: str = Field(..., description="Path to the file, possibly '<archive> → <inner path>'")
    line: int = Field(default=0, ge=0, description="1-based line number, 0 when not line-addressable")
    match: str = Field(..., description="Preview of the matched text")
    severity: Severity = Field(default=Severity.MEDIUM, description="Severity level of the finding")
    source: str = Field(default="regex", description="Subsystem or tool that produced the finding")
    tool: str | None = Field(default=None, description="External tool name for tool-reported findings")
    verified: bool = Field(default=False, description="Liveness confirmed by a verifying external tool")
    verified_by: list[str] = Field(default_factory=list, description="Tools that corroborated the finding")
    decoded: str | None = Field(default=None, description="Decoded preview for encoded findings")
    commit: str | None = Field(default=None, description="Abbreviated commit id for history findings")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata about the finding")

    @property
    def fingerprint(self) -> str:
        """Identity of the secret occurrence, independent of its producer."""
        return f"{self.file_path}:{self.line}:{self.match}".lower()


class ArchiveSettings(BaseModel):
    """Bounds applied to archive extraction."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    max_depth: int = Field(default=3, ge=0)
    max_extract_size: int = Field(default=DEFAULT_MAX_EXTRACT_SIZE, ge=0)
    timeout: float = Field(default=30.0, gt=0)


class ExternalToolSettings(BaseModel):
    """How to invoke the external secret scanner."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    command: str = "trufflehog"
    fallback_commands: tuple[str, ...] = ()
    args: tuple[str, ...] = ("filesystem", "--json")
    verify: bool = False
    timeout: float = Field(default=60.0, gt=0)
    probe_timeout: float = Field(default=5.0, gt=0)
    max_output: int = Field(default=10 * 1024 * 1024, gt=0)


class AISettings(BaseModel):
    """Connection details for the local language-model collaborator."""

    model_config = ConfigDict(frozen=True)

    url: str = "http://localhost:11434/api/generate"
    model: str = "llama2:7b"
    timeout: float = Field(default=10.0, gt=0)
    max_chars: int = Field(default=1000, gt=0)


class ScanConfig(BaseModel):
    """Immutable configuration for a scan operation.

    Constructed once per invocation and shared read-only by every
    component of the pipeline.
    """

    model_config = ConfigDict(frozen=True)

    target_path: str = Field(..., description="Path to the directory or file to scan")
    ignore_dirs: tuple[str, ...] = Field(
        default=(".git", "node_modules", "dist", "build"),
        description="Entry names that are never scanned",
    )
    ignore_patterns: tuple[str, ...] = Field(
        default=(".env.example", "*.lock", "*.log", "package-lock.json", "yarn.lock", ".next"),
        description="Glob patterns (with *) or path substrings to skip",
    )
    scan_extensions: tuple[str, ...] = Field(
        default=(
            ".js", ".jsx", ".ts", ".tsx", ".json", ".env", ".config", ".conf",
            ".properties", ".html", ".htm", ".xml", ".py", ".rb", ".php", ".java",
            ".yml", ".yaml", ".toml", ".sh", ".bash", ".zsh", ".md", ".txt",
        ),
        description="Extension allow-list; empty means every non-binary file",
    )
    use_ai: bool = Field(default=False, description="Run the AI-assist pass on every file")
    scan_history: bool = Field(default=False, description="Also scan git history")
    history_depth: int = Field(default=100, gt=0, description="Number of commits to inspect")
    verbose: bool = Field(default=False, description="Verbose reporting")
    follow_symlinks: bool = Field(default=False, description="Follow symlinked directories")
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE, ge=0, description="Skip files larger than this (0 = no limit)"
    )
    concurrency: int = Field(default=50, gt=0, description="Maximum concurrent file scans")
    archive: ArchiveSettings = Field(default_factory=ArchiveSettings)
    external: ExternalToolSettings = Field(default_factory=ExternalToolSettings)
    ai: AISettings = Field(default_factory=AISettings)


class ScanResult(BaseModel):
    """Represents the complete result of a scan operation.

    Contains the merged findings from the tree scan, the separately
    reported history findings, statistics and timing information.
    """

    target_path: str = Field(..., description="The path that was scanned")
    findings: list[Finding] = Field(default_factory=list, description="Merged findings from the tree scan")
    history_findings: list[Finding] = Field(default_factory=list, description="Findings from git history")
    scan_duration: float = Field(default=0.0, description="Duration of the scan in seconds")
    stats: dict[str, Any] = Field(
        default_factory=dict,
        description="Statistics about the scan (files scanned, warnings, etc.)",
    )
