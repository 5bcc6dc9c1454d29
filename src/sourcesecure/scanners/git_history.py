"""Git history scanner for sourcesecure.

Secrets removed from the working tree often survive in history. This
scanner walks the most recent commits of a repository and applies the
pattern registry to each commit's diff. Only registry patterns run here;
the entropy, base64 and multi-line passes are limited to the tree scan.
"""

from __future__ import annotations

import asyncio
import bisect
import logging
import re
from pathlib import Path

from sourcesecure.core.exceptions import ScanError
from sourcesecure.core.models import Finding, truncate_preview
from sourcesecure.core.stats import ScanStats
from sourcesecure.detectors import DetectorRegistry, default_registry

logger = logging.getLogger(__name__)

DIFF_HEADER = re.compile(r"^diff --git a/(.+) b/(.+)$", re.MULTILINE)
SHORT_HASH_LENGTH = 8


def file_sections(diff: str) -> tuple[list[int], list[str]]:
    """Index the ``diff --git`` headers of a diff.

    Returns:
        Parallel lists of header offsets and the post-image file path of
        each header, in order.
    """
    offsets: list[int] = []
    paths: list[str] = []
    for m in DIFF_HEADER.finditer(diff):
        offsets.append(m.start())
        paths.append(m.group(2))
    return offsets, paths


class GitHistoryScanner:
    """Scan recent commits of a git repository with the pattern registry.

    Args:
        repo_path: Repository working directory.
        registry: Patterns to apply; the built-in registry by default.
        depth: Number of most recent commits to inspect.
        stats: Shared statistics.

    Example:
        >>> scanner = GitHistoryScanner(Path("."), depth=50)
        >>> findings = asyncio.run(scanner.scan())
    """

    def __init__(
        self,
        repo_path: Path,
        registry: DetectorRegistry | None = None,
        depth: int = 100,
        stats: ScanStats | None = None,
    ):
        self.repo_path = Path(repo_path)
        self.registry = registry if registry is not None else default_registry()
        self.depth = depth
        self.stats = stats if stats is not None else ScanStats()

    @property
    def scanner_type(self) -> str:
        return "git_history"

    async def _run_git_command(self, args: list[str], check: bool = True) -> tuple[int, str, str]:
        """Run a git command in the repository.

        Raises:
            ScanError: If git is missing, or ``check`` is set and the
                command exits non-zero.
        """
        cmd = ["git", *args]
        logger.debug(f"Running git command: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.repo_path,
            )
        except FileNotFoundError as e:
            raise ScanError("Git is not installed or not in PATH", context={"command": " ".join(cmd)}) from e
        except NotADirectoryError as e:
            raise ScanError("Repository path is not a directory", path=str(self.repo_path)) from e

        stdout, stderr = await process.communicate()
        stdout_str = stdout.decode("utf-8", errors="replace")
        stderr_str = stderr.decode("utf-8", errors="replace")

        if check and process.returncode != 0:
            raise ScanError(
                f"Git command failed: {' '.join(cmd)}",
                context={"stderr": stderr_str.strip(), "returncode": process.returncode},
            )
        return process.returncode or 0, stdout_str, stderr_str

    async def get_commits(self) -> list[str]:
        """Return full hashes of the most recent ``depth`` commits, newest first."""
        _, stdout, _ = await self._run_git_command(["log", "--pretty=format:%H", "-n", str(self.depth)])
        return [line.strip() for line in stdout.splitlines() if line.strip()]

    def scan_diff(self, diff: str, commit: str) -> list[Finding]:
        """Apply the registry to one commit's diff text."""
        offsets, paths = file_sections(diff)
        short = commit[:SHORT_HASH_LENGTH]
        findings: list[Finding] = []

        for m in self.registry.iter_matches(diff):
            index = bisect.bisect_right(offsets, m.offset) - 1
            file_path = paths[index] if index >= 0 else ""
            findings.append(
                Finding(
                    detector_name=m.pattern.name,
                    file_path=file_path,
                    line=0,
                    match=truncate_preview(m.text),
                    severity=m.pattern.severity,
                    source=self.scanner_type,
                    commit=short,
                )
            )
        return findings

    async def scan(self) -> list[Finding]:
        """Scan history. Any git failure yields [] and a warning."""
        try:
            commits = await self.get_commits()
        except ScanError as e:
            logger.debug(f"git log failed: {e}")
            self.stats.warn("Unable to scan git history (not a git repository or no commits)", logger)
            return []

        findings: list[Finding] = []
        for commit in commits:
            try:
                _, diff, _ = await self._run_git_command(["show", commit, "--format=", "--text"])
            except ScanError as e:
                logger.debug(f"Skipping commit {commit[:SHORT_HASH_LENGTH]}: {e}")
                continue
            findings.extend(self.scan_diff(diff, commit))

        logger.debug(f"Scanned {len(commits)} commits, {len(findings)} history findings")
        return findings
