"""Detector for secrets that span several lines.

Two kinds of block are recognised: a start/end marker pair, reported once
per file when both markers occur, and a single bounded expression, reported
once per match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from sourcesecure.core.models import Finding, Severity, truncate_preview
from sourcesecure.detectors import BaseDetector


@dataclass(frozen=True)
class BlockPattern:
    """A multi-line detection rule.

    Exactly one of ``pattern`` or the ``start``/``end`` pair is set.
    """

    name: str
    severity: Severity
    start: str | None = None
    end: str | None = None
    pattern: str | None = None
    compiled: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.pattern is not None:
            if self.start is not None or self.end is not None:
                raise ValueError(f"Block '{self.name}' mixes a pattern with start/end markers")
            compiled = (re.compile(self.pattern),)
        elif self.start is not None and self.end is not None:
            compiled = (re.compile(self.start), re.compile(self.end))
        else:
            raise ValueError(f"Block '{self.name}' needs a pattern or both start and end markers")
        object.__setattr__(self, "compiled", compiled)

    @property
    def is_marker_pair(self) -> bool:
        return self.pattern is None


PRIVATE_KEY_BLOCK = BlockPattern(
    name="Private Key Block",
    severity=Severity.CRITICAL,
    start=r"-----BEGIN (?:[A-Z0-9]+ )*PRIVATE KEY(?: BLOCK)?-----",
    end=r"-----END (?:[A-Z0-9]+ )*PRIVATE KEY(?: BLOCK)?-----",
)

CERTIFICATE_BLOCK = BlockPattern(
    name="Certificate Block",
    severity=Severity.LOW,
    start=r"-----BEGIN CERTIFICATE-----",
    end=r"-----END CERTIFICATE-----",
)

SERVICE_ACCOUNT_JSON = BlockPattern(
    name="Google Service Account JSON",
    severity=Severity.CRITICAL,
    pattern=r"\{\s*\"type\"\s*:\s*\"service_account\"[\s\S]*?\"private_key\"\s*:\s*\"[^\"]+\"[^{}]*\}",
)

DEFAULT_BLOCK_PATTERNS = [PRIVATE_KEY_BLOCK, CERTIFICATE_BLOCK, SERVICE_ACCOUNT_JSON]


class MultilineDetector(BaseDetector):
    """Detector for private key blocks, certificates and credential JSON."""

    def __init__(self, blocks: list[BlockPattern] | None = None) -> None:
        self._blocks = list(blocks) if blocks is not None else list(DEFAULT_BLOCK_PATTERNS)

    @property
    def name(self) -> str:
        return "multiline"

    @property
    def blocks(self) -> list[BlockPattern]:
        return list(self._blocks)

    def detect(self, content: str, file_path: str = "") -> list[Finding]:
        findings: list[Finding] = []
        for block in self._blocks:
            if block.is_marker_pair:
                start_re, end_re = block.compiled
                start = start_re.search(content)
                if start is None or end_re.search(content) is None:
                    continue
                findings.append(self._finding(block, start.group(0), file_path))
            else:
                (pattern_re,) = block.compiled
                for m in pattern_re.finditer(content):
                    findings.append(self._finding(block, m.group(0), file_path))
        return findings

    def _finding(self, block: BlockPattern, text: str, file_path: str) -> Finding:
        return Finding(
            detector_name=block.name,
            file_path=file_path,
            line=0,
            match=truncate_preview(text),
            severity=block.severity,
            source=self.name,
        )
