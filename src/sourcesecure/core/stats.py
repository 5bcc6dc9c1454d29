"""Scan statistics for sourcesecure.

A single ScanStats instance is shared by the components of one scan. All
of them run on the same event loop, so plain counters are sufficient.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sourcesecure.core.models import Finding


class SkipReason(str, Enum):
    """Reasons why a file may be skipped during scanning."""

    IGNORED = "ignored"
    EXTENSION = "extension"
    BINARY_FILE = "binary_file"
    TOO_LARGE = "too_large"
    READ_ERROR = "read_error"


@dataclass
class ScanStats:
    """Counters and warnings collected while scanning.

    Attributes:
        files_discovered: Files found by the walker after ignore rules.
        files_scanned: Files whose content was analysed.
        bytes_processed: Characters of decoded content analysed.
        archives_scanned: Archives successfully extracted and scanned.
        archives_failed: Archives that could not be extracted.
        external_findings: Findings reported by the external tool.
        skipped: Skipped-file counts keyed by reason.
        warnings: Human-readable degradation messages.
    """

    files_discovered: int = 0
    files_scanned: int = 0
    bytes_processed: int = 0
    archives_scanned: int = 0
    archives_failed: int = 0
    external_findings: int = 0
    skipped: Counter[str] = field(default_factory=Counter)
    warnings: list[str] = field(default_factory=list)

    def skip(self, reason: SkipReason) -> None:
        self.skipped[reason.value] += 1

    def warn(self, message: str, logger: logging.Logger | None = None) -> None:
        """Record a degradation and log it as a warning."""
        self.warnings.append(message)
        (logger or logging.getLogger(__name__)).warning(message)

    def to_dict(self, findings: list[Finding] | None = None) -> dict[str, Any]:
        """Convert to the plain dictionary stored on ScanResult.stats."""
        data: dict[str, Any] = {
            "files_discovered": self.files_discovered,
            "files_scanned": self.files_scanned,
            "bytes_processed": self.bytes_processed,
            "archives_scanned": self.archives_scanned,
            "archives_failed": self.archives_failed,
            "external_findings": self.external_findings,
            "skipped": dict(self.skipped),
            "warnings": list(self.warnings),
        }
        if findings is not None:
            data["findings_by_severity"] = dict(Counter(f.severity.value for f in findings))
        return data
