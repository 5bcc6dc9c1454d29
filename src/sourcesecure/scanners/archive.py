"""Archive extraction and scanning for sourcesecure.

Archives found in the tree are unpacked into a private scratch directory,
nested archives are unpacked in turn up to a maximum depth, and the result
is walked with the same rules as the surrounding tree. Every finding is
reported against ``"<archive> → <path inside archive>"``.

Extraction is bounded three ways: nesting depth, the cumulative number of
bytes written for one top-level archive, and wall-clock time.
"""

from __future__ import annotations

import asyncio
import bz2
import gzip
import logging
import lzma
import os
import secrets
import shutil
import stat
import tarfile
import tempfile
import time
import zipfile
import zlib
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, TYPE_CHECKING

from sourcesecure.core.exceptions import ArchiveError
from sourcesecure.core.models import ArchiveSettings, Finding
from sourcesecure.core.stats import ScanStats
from sourcesecure.scanners.external import terminate

if TYPE_CHECKING:
    from sourcesecure.core.walker import DirectoryWalker

logger = logging.getLogger(__name__)

ZIP_EXTENSIONS = (".zip", ".jar", ".war", ".ear")
TAR_EXTENSIONS = (".tar", ".tar.gz", ".tgz", ".tar.bz2", ".tbz2", ".tar.xz", ".txz")
SEVEN_ZIP_EXTENSIONS = (".7z", ".rar")
STREAM_EXTENSIONS = (".gz", ".bz2", ".xz")

# Longest first so that ".tar.gz" wins over ".gz"
ARCHIVE_EXTENSIONS = tuple(
    sorted(ZIP_EXTENSIONS + TAR_EXTENSIONS + SEVEN_ZIP_EXTENSIONS + STREAM_EXTENSIONS, key=len, reverse=True)
)

PATH_SEPARATOR = " → "
EXTRACTED_SUFFIX = ".extracted"
CHUNK_SIZE = 64 * 1024
SEVEN_ZIP_COMMAND = "7z"

_STREAM_OPENERS: dict[str, Callable[[str | os.PathLike], IO[bytes]]] = {
    ".gz": gzip.open,
    ".bz2": bz2.open,
    ".xz": lzma.open,
}


def archive_suffix(name: str) -> str | None:
    """Return the archive extension of ``name``, or None if it is not an archive."""
    lowered = name.lower()
    for ext in ARCHIVE_EXTENSIONS:
        if lowered.endswith(ext) and len(lowered) > len(ext):
            return ext
    return None


def is_archive(path: str | os.PathLike) -> bool:
    return archive_suffix(Path(path).name) is not None


@dataclass
class ExtractionBudget:
    """Byte and time allowance shared by one top-level archive and its nested archives."""

    limit: int
    deadline: float
    used: int = 0

    @classmethod
    def from_settings(cls, settings: ArchiveSettings) -> ExtractionBudget:
        return cls(limit=settings.max_extract_size, deadline=time.monotonic() + settings.timeout)

    @property
    def remaining_time(self) -> float:
        return max(0.0, self.deadline - time.monotonic())

    def check_time(self, archive: Path) -> None:
        if time.monotonic() > self.deadline:
            raise ArchiveError("Archive extraction timed out", archive_path=str(archive))

    def consume(self, count: int, archive: Path) -> None:
        self.used += count
        if self.limit and self.used > self.limit:
            raise ArchiveError(
                f"Extracted size exceeds limit of {self.limit} bytes",
                archive_path=str(archive),
                context={"extracted": self.used},
            )


@dataclass
class ArchiveJob:
    """One extraction step: an archive, where it goes, and how deep it sits."""

    archive_path: Path
    target_dir: Path
    depth: int
    budget: ExtractionBudget
    written: list[Path] = field(default_factory=list)


def safe_join(root: Path, member: str) -> Path:
    """Resolve an archive member name below ``root``.

    Raises:
        ArchiveError: If the member would land outside ``root``.
    """
    name = member.replace("\\", "/").lstrip("/")
    target = (root / name).resolve()
    resolved_root = root.resolve()
    if target != resolved_root and resolved_root not in target.parents:
        raise ArchiveError(f"Unsafe member path: {member}", context={"root": str(root)})
    return target


def _copy_stream(source: IO[bytes], destination: Path, job: ArchiveJob) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("wb") as out:
        while True:
            job.budget.check_time(job.archive_path)
            chunk = source.read(CHUNK_SIZE)
            if not chunk:
                break
            job.budget.consume(len(chunk), job.archive_path)
            out.write(chunk)
    job.written.append(destination)


def _extract_zip(job: ArchiveJob) -> None:
    try:
        with zipfile.ZipFile(job.archive_path) as zf:
            for info in zf.infolist():
                target = safe_join(job.target_dir, info.filename)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                if stat.S_ISLNK(info.external_attr >> 16):
                    logger.debug(f"Skipping symlink {info.filename} in {job.archive_path}")
                    continue
                with zf.open(info) as source:
                    _copy_stream(source, target, job)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, RuntimeError, NotImplementedError, zlib.error) as e:
        raise ArchiveError(f"Cannot read zip archive: {e}", archive_path=str(job.archive_path)) from e


def _extract_tar(job: ArchiveJob) -> None:
    try:
        with tarfile.open(job.archive_path, "r:*") as tf:
            for member in tf:
                target = safe_join(job.target_dir, member.name)
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                if not member.isfile():
                    logger.debug(f"Skipping non-regular member {member.name} in {job.archive_path}")
                    continue
                source = tf.extractfile(member)
                if source is None:
                    continue
                with source:
                    _copy_stream(source, target, job)
    except (tarfile.TarError, EOFError, zlib.error) as e:
        raise ArchiveError(f"Cannot read tar archive: {e}", archive_path=str(job.archive_path)) from e


def _extract_stream(job: ArchiveJob, suffix: str) -> None:
    stem = job.archive_path.name[: -len(suffix)] or f"{job.archive_path.name}.out"
    opener = _STREAM_OPENERS[suffix]
    try:
        with opener(job.archive_path) as source:
            _copy_stream(source, job.target_dir / stem, job)
    except (OSError, EOFError, lzma.LZMAError, zlib.error) as e:
        raise ArchiveError(f"Cannot decompress {suffix} stream: {e}", archive_path=str(job.archive_path)) from e


class ArchiveHandler:
    """Extract archives within bounds and scan their contents.

    Args:
        settings: Depth, size and time bounds.
        walker: Walker used to scan extracted trees; its ignore and
            extension rules apply inside archives too.
        stats: Shared statistics.
    """

    def __init__(
        self,
        settings: ArchiveSettings | None = None,
        walker: DirectoryWalker | None = None,
        stats: ScanStats | None = None,
    ):
        self.settings = settings or ArchiveSettings()
        self.walker = walker
        self.stats = stats if stats is not None else ScanStats()

    async def extract(
        self,
        archive_path: Path,
        target_dir: Path,
        depth: int = 0,
        budget: ExtractionBudget | None = None,
    ) -> int:
        """Extract ``archive_path`` into ``target_dir`` along with nested archives.

        Args:
            archive_path: Archive to extract.
            target_dir: Directory that receives the contents.
            depth: Nesting level of this archive; 0 for a top-level archive.
            budget: Allowance shared with enclosing archives; a fresh one
                is created from the settings when omitted.

        Returns:
            Number of bytes written, nested archives included. 0 when the
            depth limit stopped extraction.

        Raises:
            ArchiveError: On unsupported or corrupt archives, unsafe paths,
                or when the size or time allowance runs out.
        """
        if depth >= self.settings.max_depth:
            self.stats.warn(
                f"Maximum archive depth ({self.settings.max_depth}) reached, not extracting {archive_path}", logger
            )
            return 0

        suffix = archive_suffix(archive_path.name)
        if suffix is None:
            raise ArchiveError("Unsupported archive format", archive_path=str(archive_path))

        budget = budget or ExtractionBudget.from_settings(self.settings)
        job = ArchiveJob(archive_path=archive_path, target_dir=target_dir, depth=depth, budget=budget)
        target_dir.mkdir(parents=True, exist_ok=True)
        before = budget.used

        logger.debug(f"Extracting {archive_path} (depth {depth}) into {target_dir}")
        if suffix in ZIP_EXTENSIONS:
            await asyncio.to_thread(_extract_zip, job)
        elif suffix in TAR_EXTENSIONS:
            await asyncio.to_thread(_extract_tar, job)
        elif suffix in SEVEN_ZIP_EXTENSIONS:
            await self._extract_with_7z(job)
        else:
            await asyncio.to_thread(_extract_stream, job, suffix)

        for nested in [p for p in job.written if is_archive(p)]:
            nested_dir = nested.with_name(nested.name + EXTRACTED_SUFFIX)
            try:
                await self.extract(nested, nested_dir, depth + 1, budget)
            except (ArchiveError, OSError) as e:
                self.stats.warn(f"Failed to extract nested archive {nested}: {e}", logger)
                await asyncio.to_thread(shutil.rmtree, nested_dir, True)

        return budget.used - before

    async def scan_archive(self, archive_path: Path, use_ai: bool = False, display_path: str | None = None) -> list[Finding]:
        """Extract an archive into scratch space and scan everything in it.

        The scratch directory is removed on every exit path. Any failure
        is logged and yields no findings.
        """
        if self.walker is None:
            raise ArchiveError("No walker configured for archive scanning", archive_path=str(archive_path))

        reported = display_path if display_path is not None else str(archive_path)
        scratch = Path(
            tempfile.mkdtemp(prefix=f"sourcesecure-{int(time.time() * 1000)}-{secrets.token_hex(4)}-")
        )
        try:
            await self.extract(archive_path, scratch)
            findings = await self.walker.walk(scratch, use_ai=use_ai, include_archives=False)
        except Exception as e:
            self.stats.archives_failed += 1
            self.stats.warn(f"Failed to scan archive {reported}: {e}", logger)
            return []
        finally:
            await self._cleanup(scratch)

        self.stats.archives_scanned += 1
        return [self._relocate(f, scratch, reported) for f in findings]

    def _relocate(self, finding: Finding, scratch: Path, reported: str) -> Finding:
        try:
            inner = Path(finding.file_path).relative_to(scratch).as_posix()
        except ValueError:
            inner = finding.file_path
        return finding.model_copy(update={"file_path": f"{reported}{PATH_SEPARATOR}{inner}"})

    async def _cleanup(self, scratch: Path) -> None:
        try:
            await asyncio.to_thread(shutil.rmtree, scratch)
        except OSError as e:
            self.stats.warn(f"Could not remove scratch directory {scratch}: {e}", logger)

    async def _extract_with_7z(self, job: ArchiveJob) -> None:
        listing = await self._run_7z(["l", "-slt", str(job.archive_path)], job)
        declared = sum(
            int(line.split("=", 1)[1].strip() or 0)
            for line in listing.splitlines()
            if line.startswith("Size = ")
        )
        if job.budget.limit and job.budget.used + declared > job.budget.limit:
            raise ArchiveError(
                f"Extracted size exceeds limit of {job.budget.limit} bytes",
                archive_path=str(job.archive_path),
                context={"declared": declared},
            )

        await self._run_7z(["x", "-y", f"-o{job.target_dir}", str(job.archive_path)], job)

        def _collect() -> list[tuple[Path, int]]:
            collected = []
            for dirpath, _dirnames, filenames in os.walk(job.target_dir):
                for filename in filenames:
                    path = Path(dirpath) / filename
                    if path.is_symlink():
                        path.unlink()
                        continue
                    collected.append((path, path.stat().st_size))
            return collected

        for path, size in await asyncio.to_thread(_collect):
            job.budget.consume(size, job.archive_path)
            job.written.append(path)

    async def _run_7z(self, args: list[str], job: ArchiveJob) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                SEVEN_ZIP_COMMAND,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ArchiveError(
                f"'{SEVEN_ZIP_COMMAND}' is required for {job.archive_path.suffix} archives",
                archive_path=str(job.archive_path),
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=job.budget.remaining_time)
        except asyncio.TimeoutError as e:
            await terminate(process)
            raise ArchiveError("Archive extraction timed out", archive_path=str(job.archive_path)) from e

        if process.returncode != 0:
            raise ArchiveError(
                f"{SEVEN_ZIP_COMMAND} failed: {stderr.decode('utf-8', errors='replace').strip()}",
                archive_path=str(job.archive_path),
            )
        return stdout.decode("utf-8", errors="replace")
