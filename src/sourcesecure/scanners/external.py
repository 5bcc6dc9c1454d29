"""Adapter for an external secret scanner (TruffleHog).

The external tool is optional. When it is installed it is run once over
the whole target, its JSON-lines output is parsed record by record and
each record becomes a Finding. A missing tool, a timeout, oversized output
or a non-zero exit all degrade to "no external findings".
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from sourcesecure.core.exceptions import ExternalToolError
from sourcesecure.core.models import ExternalToolSettings, Finding, Severity, truncate_preview
from sourcesecure.core.stats import ScanStats

logger = logging.getLogger(__name__)

WINDOWS_FALLBACK_COMMAND = "C:/trufflehog/trufflehog.exe"
READ_CHUNK = 64 * 1024


@dataclass(frozen=True)
class ExternalRecord:
    """A well-formed secret record from the tool's output."""

    detector_name: str
    raw: str
    file_path: str
    line: int
    verified: bool
    raw_v2: str | None = None


@dataclass(frozen=True)
class MalformedLine:
    """An output line that could not be turned into a record."""

    text: str
    reason: str


ParsedLine = Union[ExternalRecord, MalformedLine]


def _filesystem_metadata(data: dict[str, Any]) -> dict[str, Any]:
    meta = data.get("SourceMetadata") or {}
    inner = meta.get("Data") if isinstance(meta, dict) else None
    fs = inner.get("Filesystem") if isinstance(inner, dict) else None
    return fs if isinstance(fs, dict) else {}


def parse_line(text: str) -> ParsedLine:
    """Parse one line of JSON-lines output into a record or a MalformedLine."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return MalformedLine(text, f"invalid JSON: {e.msg}")
    if not isinstance(data, dict):
        return MalformedLine(text, "not a JSON object")

    raw = data.get("Raw")
    if not raw or not isinstance(raw, str):
        return MalformedLine(text, "missing Raw")

    fs = _filesystem_metadata(data)
    try:
        line = int(fs.get("line") or 0)
    except (TypeError, ValueError):
        line = 0

    raw_v2 = data.get("RawV2")
    return ExternalRecord(
        detector_name=str(data.get("DetectorName") or "Unknown"),
        raw=raw,
        file_path=str(fs.get("file") or ""),
        line=max(line, 0),
        verified=bool(data.get("Verified")),
        raw_v2=raw_v2 if isinstance(raw_v2, str) and raw_v2 else None,
    )


def parse_output(output: str) -> list[ParsedLine]:
    return [parse_line(line) for line in output.splitlines() if line.strip()]


def record_to_finding(record: ExternalRecord, tool: str) -> Finding:
    return Finding(
        detector_name=record.detector_name,
        file_path=record.file_path,
        line=record.line,
        match=truncate_preview(record.raw),
        severity=Severity.CRITICAL if record.verified else Severity.HIGH,
        source=tool,
        tool=tool,
        verified=record.verified,
    )


async def terminate(process: asyncio.subprocess.Process) -> None:
    """Kill ``process`` if it is still running, then reap it."""
    if process.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
    await process.wait()


class ExternalScanner:
    """Run an external secret scanner and convert its records to findings.

    Args:
        settings: Command, fallbacks, arguments and limits.
        stats: Shared statistics.
    """

    tool_name = "trufflehog"

    def __init__(self, settings: ExternalToolSettings | None = None, stats: ScanStats | None = None):
        self.settings = settings or ExternalToolSettings()
        self.stats = stats if stats is not None else ScanStats()
        self._command: str | None = None
        self._probed = False

    @property
    def candidates(self) -> list[str]:
        commands = [self.settings.command, *self.settings.fallback_commands]
        if sys.platform == "win32" and WINDOWS_FALLBACK_COMMAND not in commands:
            commands.append(WINDOWS_FALLBACK_COMMAND)
        return commands

    async def probe(self) -> str | None:
        """Find a working command by running ``<command> --version``.

        Returns:
            The first command that answers, or None when the tool is absent.
        """
        if self._probed:
            return self._command
        self._probed = True

        for command in self.candidates:
            try:
                await self._run([command, "--version"], self.settings.probe_timeout)
            except ExternalToolError as e:
                logger.debug(f"{command} not usable: {e}")
                continue
            logger.debug(f"Using external scanner: {command}")
            self._command = command
            return command

        logger.info(f"{self.tool_name} not found, continuing with built-in detectors only")
        return None

    def build_args(self, target: Path) -> list[str]:
        args = list(self.settings.args)
        if not self.settings.verify and "--no-verification" not in args:
            args.append("--no-verification")
        return [*args, str(target)]

    async def scan(self, target: Path) -> list[Finding]:
        """Run the tool over ``target`` and return its findings."""
        command = await self.probe()
        if command is None:
            return []

        try:
            output = await self._run([command, *self.build_args(target)], self.settings.timeout)
        except ExternalToolError as e:
            self.stats.warn(f"{self.tool_name} scan failed: {e}", logger)
            return []

        findings: list[Finding] = []
        for parsed in parse_output(output):
            if isinstance(parsed, MalformedLine):
                logger.debug(f"Dropping {self.tool_name} output line ({parsed.reason})")
                continue
            findings.append(record_to_finding(parsed, self.tool_name))

        self.stats.external_findings += len(findings)
        logger.debug(f"{self.tool_name} reported {len(findings)} findings")
        return findings

    async def _run(self, argv: list[str], timeout: float) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise ExternalToolError(f"Cannot start: {e}", command=argv[0]) from e

        try:
            output = await asyncio.wait_for(self._read_capped(process), timeout=timeout)
            await asyncio.wait_for(process.wait(), timeout=timeout)
        except asyncio.TimeoutError as e:
            await terminate(process)
            raise ExternalToolError(f"Timed out after {timeout}s", command=argv[0]) from e
        except ExternalToolError:
            await terminate(process)
            raise

        if process.returncode != 0:
            raise ExternalToolError(f"Exited with status {process.returncode}", command=argv[0])
        return output.decode("utf-8", errors="replace")

    async def _read_capped(self, process: asyncio.subprocess.Process) -> bytes:
        assert process.stdout is not None
        chunks: list[bytes] = []
        total = 0
        while True:
            chunk = await process.stdout.read(READ_CHUNK)
            if not chunk:
                break
            total += len(chunk)
            if total > self.settings.max_output:
                raise ExternalToolError(
                    f"Output exceeds {self.settings.max_output} bytes", command=self.settings.command
                )
            chunks.append(chunk)
        return b"".join(chunks)
