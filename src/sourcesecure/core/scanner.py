"""Scan orchestration for sourcesecure.

The Scanner wires the components of one scan together:

1. the DirectoryWalker scans the tree (and archives inside it),
2. the external tool, when available, scans the same target,
3. the two result sets are merged,

while the git history pass, when requested, runs concurrently with the
tree scan and is reported separately.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from sourcesecure.core.exceptions import ScanError
from sourcesecure.core.file_scanner import FileScanner
from sourcesecure.core.merger import merge_findings
from sourcesecure.core.models import Finding, ScanConfig, ScanResult
from sourcesecure.core.stats import ScanStats
from sourcesecure.core.walker import DirectoryWalker
from sourcesecure.detectors import DetectorRegistry, default_registry
from sourcesecure.detectors.ai_detector import AIAssistant
from sourcesecure.scanners.external import ExternalScanner
from sourcesecure.scanners.git_history import GitHistoryScanner

logger = logging.getLogger(__name__)


class Scanner:
    """Run a complete scan for one configuration.

    Args:
        config: Immutable scan configuration.
        registry: Pattern registry; the built-in one by default.
        external: External scanner adapter; built from the config when
            omitted. Pass one explicitly to control the tool in tests.
        ai: AI collaborator used when ``config.use_ai`` is set.
    """

    def __init__(
        self,
        config: ScanConfig,
        registry: DetectorRegistry | None = None,
        external: ExternalScanner | None = None,
        ai: AIAssistant | None = None,
    ):
        self.config = config
        self.registry = registry if registry is not None else default_registry()
        self.stats = ScanStats()
        self.ai = ai if ai is not None else (AIAssistant(config.ai) if config.use_ai else None)
        self.file_scanner = FileScanner(self.registry, ai=self.ai, stats=self.stats)
        self.walker = DirectoryWalker(config, file_scanner=self.file_scanner, stats=self.stats)
        if external is not None:
            external.stats = self.stats
        elif config.external.enabled:
            external = ExternalScanner(config.external, stats=self.stats)
        self.external = external

    async def scan(self) -> ScanResult:
        """Execute the scan.

        Raises:
            ScanError: If the target path does not exist. Every other
                failure degrades to a warning recorded in the stats.
        """
        target = Path(self.config.target_path)
        if not target.exists():
            raise ScanError("Target path does not exist", path=str(target))

        start_time = time.time()
        logger.debug(f"Scanning {target}")

        if self.config.scan_history:
            findings, history_findings = await asyncio.gather(self._scan_tree(target), self._scan_history(target))
        else:
            findings, history_findings = await self._scan_tree(target), []

        scan_duration = time.time() - start_time
        logger.info(
            f"Scan complete: {self.stats.files_scanned} files scanned, "
            f"{len(findings)} findings, {len(history_findings)} history findings"
        )

        return ScanResult(
            target_path=str(target),
            findings=findings,
            history_findings=history_findings,
            scan_duration=scan_duration,
            stats=self.stats.to_dict(findings),
        )

    async def _scan_tree(self, target: Path) -> list[Finding]:
        internal = await self.walker.walk(target, use_ai=self.config.use_ai)
        if self.external is None:
            return merge_findings(internal, [])
        external = await self.external.scan(target)
        return merge_findings(internal, external)

    async def _scan_history(self, target: Path) -> list[Finding]:
        repo = target if target.is_dir() else target.parent
        history = GitHistoryScanner(repo, self.registry, depth=self.config.history_depth, stats=self.stats)
        return await history.scan()
