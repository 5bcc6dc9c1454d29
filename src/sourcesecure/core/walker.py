"""Directory walking for sourcesecure.

The DirectoryWalker discovers files under a root, applies ignore and
extension rules, and dispatches each file either to the FileScanner or,
for archives, to the ArchiveHandler. All per-file work for one walk is
launched together, bounded by a semaphore, and joined before the walk
returns.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from sourcesecure.core.file_filter import IgnoreRules, has_scannable_extension, is_binary_file, normalize_extensions
from sourcesecure.core.file_scanner import FileScanner
from sourcesecure.core.models import Finding, ScanConfig
from sourcesecure.core.stats import ScanStats, SkipReason
from sourcesecure.scanners.archive import ArchiveHandler, is_archive

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    FILE = "file"
    ARCHIVE = "archive"


@dataclass(frozen=True)
class WalkEntry:
    """A discovered file and how it will be scanned."""

    path: Path
    kind: EntryKind


@dataclass
class Discovery:
    """Result of discovering files below a root.

    Discovery runs in a worker thread, so skips and warnings are collected
    here and applied to the shared ScanStats back on the event loop.
    """

    entries: list[WalkEntry] = field(default_factory=list)
    skipped: list[SkipReason] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class DirectoryWalker:
    """Walk a tree and scan every eligible file.

    Args:
        config: Scan configuration (ignore rules, extensions, limits).
        file_scanner: Scanner for regular files.
        archive_handler: Handler for archives; built from the config when
            omitted and archive scanning is enabled.
        stats: Shared statistics.

    Example:
        >>> walker = DirectoryWalker(ScanConfig(target_path="."))
        >>> findings = asyncio.run(walker.walk(Path(".")))
    """

    def __init__(
        self,
        config: ScanConfig,
        file_scanner: FileScanner | None = None,
        archive_handler: ArchiveHandler | None = None,
        stats: ScanStats | None = None,
    ):
        self.config = config
        self.stats = stats if stats is not None else ScanStats()
        self.file_scanner = file_scanner if file_scanner is not None else FileScanner(stats=self.stats)
        if archive_handler is None and config.archive.enabled:
            archive_handler = ArchiveHandler(config.archive, stats=self.stats)
        if archive_handler is not None and archive_handler.walker is None:
            archive_handler.walker = self
        self.archive_handler = archive_handler
        self.ignore_rules = IgnoreRules(names=config.ignore_dirs, patterns=config.ignore_patterns)
        self.extensions = normalize_extensions(config.scan_extensions)
        self._semaphore = asyncio.Semaphore(config.concurrency)

    async def walk(self, root: Path, use_ai: bool = False, include_archives: bool = True) -> list[Finding]:
        """Scan every eligible file under ``root``.

        Args:
            root: Directory (or single file) to scan.
            use_ai: Pass through to the FileScanner.
            include_archives: Dispatch archives to the ArchiveHandler;
                when False archives are skipped.

        Returns:
            Findings from all files, once every file task has finished.
        """
        root = Path(root)
        if root.is_file():
            entries = [WalkEntry(root, EntryKind.ARCHIVE if is_archive(root) else EntryKind.FILE)]
        else:
            discovery = await asyncio.to_thread(self._discover_sync, root, include_archives)
            for reason in discovery.skipped:
                self.stats.skip(reason)
            for message in discovery.warnings:
                self.stats.warn(message, logger)
            entries = discovery.entries

        self.stats.files_discovered += len(entries)
        logger.debug(f"Discovered {len(entries)} files under {root}")

        tasks = [self._dispatch(entry, use_ai) for entry in entries]
        results = await asyncio.gather(*tasks)

        findings: list[Finding] = []
        for file_findings in results:
            findings.extend(file_findings)
        return findings

    async def _dispatch(self, entry: WalkEntry, use_ai: bool) -> list[Finding]:
        if entry.kind is EntryKind.ARCHIVE:
            if self.archive_handler is None:
                return []
            # archive scans start their own walk, so they must not hold a slot
            return await self.archive_handler.scan_archive(entry.path, use_ai=use_ai)
        async with self._semaphore:
            return await self.file_scanner.scan_file(entry.path, use_ai=use_ai)

    def _discover_sync(self, root: Path, include_archives: bool) -> Discovery:
        """Depth-first discovery of scannable files below ``root``."""
        discovery = Discovery()
        visited: set[tuple[int, int]] = set()
        stack = [root]

        while stack:
            directory = stack.pop()
            if self.config.follow_symlinks:
                try:
                    st = directory.stat()
                except OSError as e:
                    discovery.warnings.append(f"Cannot access directory {directory}: {e}")
                    continue
                key = (st.st_dev, st.st_ino)
                if key in visited:
                    logger.debug(f"Skipping already visited directory {directory}")
                    continue
                visited.add(key)

            try:
                with os.scandir(directory) as it:
                    children = sorted(it, key=lambda e: e.name)
            except OSError as e:
                discovery.warnings.append(f"Cannot read directory {directory}: {e}")
                continue

            subdirs: list[Path] = []
            for child in children:
                path = Path(child.path)
                relative = path.relative_to(root)
                rule = self.ignore_rules.match(relative)
                if rule is not None:
                    logger.debug(f"Ignoring {relative} (rule {rule!r})")
                    discovery.skipped.append(SkipReason.IGNORED)
                    continue
                try:
                    if child.is_dir(follow_symlinks=self.config.follow_symlinks):
                        subdirs.append(path)
                    elif child.is_file():
                        entry = self._classify(path, child.stat().st_size, include_archives, discovery)
                        if entry is not None:
                            discovery.entries.append(entry)
                except OSError as e:
                    discovery.warnings.append(f"Cannot access {path}: {e}")

            stack.extend(reversed(subdirs))

        return discovery

    def _classify(self, path: Path, size: int, include_archives: bool, discovery: Discovery) -> WalkEntry | None:
        if is_archive(path):
            if include_archives and self.archive_handler is not None:
                return WalkEntry(path, EntryKind.ARCHIVE)
            return None

        if not has_scannable_extension(path, self.extensions):
            discovery.skipped.append(SkipReason.EXTENSION)
            return None
        if self.config.max_file_size and size > self.config.max_file_size:
            logger.debug(f"Skipping {path}: {size} bytes exceeds max_file_size")
            discovery.skipped.append(SkipReason.TOO_LARGE)
            return None
        if not self.extensions and is_binary_file(path):
            discovery.skipped.append(SkipReason.BINARY_FILE)
            return None
        return WalkEntry(path, EntryKind.FILE)
