"""Detector for secrets hidden inside base64-encoded text.

Long base64 runs are decoded once and the decoded text is run through the
pattern registry. Nested encodings are not followed.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re

from sourcesecure.core.models import Finding, truncate_preview
from sourcesecure.detectors import BaseDetector, DetectorRegistry, default_registry

logger = logging.getLogger(__name__)

BASE64_CANDIDATE = re.compile(r"[A-Za-z0-9+/]{40,}={0,2}")


def decode_base64(candidate: str) -> str | None:
    """Decode a base64 candidate to UTF-8 text.

    Missing padding is restored before decoding. Returns None when the
    candidate is not valid base64 or the bytes are not valid UTF-8.
    """
    stripped = candidate.rstrip("=")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        raw = base64.b64decode(padded, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None


class Base64Detector(BaseDetector):
    """Detector that decodes base64 runs and re-applies the registry.

    Each pattern that matches the decoded text yields one finding named
    ``"Base64 Encoded <pattern name>"`` at the pattern's severity.
    """

    def __init__(self, registry: DetectorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()

    @property
    def name(self) -> str:
        return "base64"

    def detect(self, content: str, file_path: str = "") -> list[Finding]:
        findings: list[Finding] = []

        for candidate in BASE64_CANDIDATE.finditer(content):
            encoded = candidate.group(0)
            decoded = decode_base64(encoded)
            if not decoded:
                continue

            seen: set[str] = set()
            for m in self._registry.iter_matches(decoded):
                if m.pattern.name in seen:
                    continue
                seen.add(m.pattern.name)
                findings.append(
                    Finding(
                        detector_name=f"Base64 Encoded {m.pattern.name}",
                        file_path=file_path,
                        line=0,
                        match=truncate_preview(encoded),
                        decoded=truncate_preview(decoded),
                        severity=m.pattern.severity,
                        source=self.name,
                    )
                )

        if findings:
            logger.debug(f"Base64Detector: {len(findings)} encoded secrets in {file_path or '<content>'}")
        return findings
