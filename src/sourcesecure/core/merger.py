"""Reconciliation of built-in and external findings.

Findings that two independent sources agree on are reported once, with
the corroborating tool recorded on the built-in finding. Findings only
the external tool saw are appended unchanged.
"""

from __future__ import annotations

import logging

from sourcesecure.core.models import Finding, Severity

logger = logging.getLogger(__name__)

#: Characters of the external match that must occur in the internal match.
MATCH_PREFIX_LENGTH = 20


def _corroborates(existing: Finding, external: Finding) -> bool:
    return (
        existing.file_path == external.file_path
        and existing.line == external.line
        and external.match.lower()[:MATCH_PREFIX_LENGTH] in existing.match.lower()
    )


def merge_findings(internal: list[Finding], external: list[Finding]) -> list[Finding]:
    """Merge external tool findings into the built-in findings.

    Args:
        internal: Findings from the built-in passes.
        external: Findings reported by external tools.

    Returns:
        A new list: the internal findings (copied, possibly annotated with
        ``verified_by`` and a severity upgrade) followed by every external
        finding whose fingerprint was not already present. The inputs are
        left untouched.
    """
    merged = [f.model_copy(deep=True) for f in internal]
    seen = {f.fingerprint for f in merged}
    duplicates = 0

    for finding in external:
        tool = finding.tool or finding.source
        fingerprint = finding.fingerprint
        if fingerprint not in seen:
            merged.append(finding.model_copy(update={"source": tool, "tool": tool}))
            seen.add(fingerprint)
            continue

        existing = next((f for f in merged if _corroborates(f, finding)), None)
        if existing is None:
            continue
        duplicates += 1
        if tool not in existing.verified_by:
            existing.verified_by.append(tool)
        if finding.verified:
            existing.verified = True
            if existing.severity < Severity.CRITICAL:
                existing.severity = Severity.CRITICAL

    if external:
        logger.debug(f"Merged {len(external)} external findings ({duplicates} corroborated existing findings)")
    return merged
