"""Single-file scanning for sourcesecure.

The FileScanner reads one file off the event loop and runs every analysis
pass over its content: registry patterns, entropy, base64 decoding,
multi-line blocks and, when requested, the AI collaborator.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from sourcesecure.core.models import Finding
from sourcesecure.core.stats import ScanStats, SkipReason
from sourcesecure.detectors import BaseDetector, DetectorRegistry, default_registry
from sourcesecure.detectors.ai_detector import AIAssistant
from sourcesecure.detectors.base64_detector import Base64Detector
from sourcesecure.detectors.entropy_detector import EntropyDetector
from sourcesecure.detectors.multiline_detector import MultilineDetector
from sourcesecure.detectors.regex_detector import RegexDetector

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read a file as UTF-8, falling back to latin-1 for undecodable bytes."""
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.debug(f"UTF-8 decode failed for {path}, falling back to latin-1")
        return path.read_text(encoding="latin-1")


class FileScanner:
    """Run every analysis pass over a single file.

    Args:
        registry: Pattern registry shared by the regex and base64 passes.
        detectors: Override the synchronous passes (mainly for tests).
        ai: AI collaborator used when ``use_ai`` is requested.
        stats: Shared statistics; a private instance is used if omitted.
    """

    def __init__(
        self,
        registry: DetectorRegistry | None = None,
        detectors: list[BaseDetector] | None = None,
        ai: AIAssistant | None = None,
        stats: ScanStats | None = None,
    ):
        registry = registry if registry is not None else default_registry()
        self.detectors = (
            detectors
            if detectors is not None
            else [RegexDetector(registry), EntropyDetector(), Base64Detector(registry), MultilineDetector()]
        )
        self.ai = ai
        self.stats = stats if stats is not None else ScanStats()

    async def scan_file(self, path: Path, use_ai: bool = False, display_path: str | None = None) -> list[Finding]:
        """Scan one file.

        Args:
            path: File to read.
            use_ai: Also consult the AI collaborator.
            display_path: Path written on findings; defaults to ``str(path)``.

        Returns:
            All findings from all passes. An unreadable file yields [].
        """
        reported = display_path if display_path is not None else str(path)
        content = await self._read(path)
        if content is None:
            return []

        self.stats.files_scanned += 1
        self.stats.bytes_processed += len(content)

        findings = self.scan_content(content, reported)
        if use_ai and self.ai is not None:
            findings.extend(await self.ai.analyze(content, reported))
        return findings

    def scan_content(self, content: str, file_path: str = "") -> list[Finding]:
        """Run the synchronous passes over already-loaded content."""
        findings: list[Finding] = []
        for detector in self.detectors:
            try:
                findings.extend(detector.detect(content, file_path))
            except Exception as e:
                # remaining passes still run
                logger.error(f"Detector {detector.name} failed on {file_path}: {e}")
                self.stats.warnings.append(f"Detector {detector.name} failed on {file_path}: {e}")
        return findings

    async def _read(self, path: Path) -> str | None:
        try:
            return await asyncio.to_thread(read_text, path)
        except IsADirectoryError:
            return None
        except OSError as e:
            self.stats.skip(SkipReason.READ_ERROR)
            self.stats.warn(f"Could not read {path}: {e}", logger)
            return None
