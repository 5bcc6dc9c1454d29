"""Entropy-based detector for secrets.

This module provides a detector that uses Shannon entropy to flag
random-looking tokens that no specific pattern recognises, such as
hand-rolled API keys or generated passwords.
"""

from __future__ import annotations

import logging
import math
import re
import time
from collections import Counter

from sourcesecure.core.models import Finding, Severity, truncate_preview
from sourcesecure.detectors import BaseDetector

logger = logging.getLogger(__name__)

DEFAULT_ENTROPY_THRESHOLD = 4.5  # bits per character
MIN_STRING_LENGTH = 20

# Candidate tokens: identifier-like runs of 20 to 128 characters
TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]{20,128}")

# Strings that are never reported, whatever their entropy
FALSE_POSITIVE_PATTERNS = [
    re.compile(r"^[0-9]+$"),
    re.compile(r"^[A-F0-9]+$", re.IGNORECASE),
    re.compile(r"\.(jpg|jpeg|png|gif|svg|ico|woff|ttf|eot)$", re.IGNORECASE),
    re.compile(r"^(true|false|null|undefined)$", re.IGNORECASE),
    re.compile(r"^https?://", re.IGNORECASE),
    re.compile(r"^[a-z]+(-[a-z]+)*$", re.IGNORECASE),
]


def calculate_shannon_entropy(data: str) -> float:
    """Calculate Shannon entropy of a string.

    Shannon entropy measures the unpredictability of a string. Higher values
    indicate more randomness, which is characteristic of secrets.

    Args:
        data: The string to calculate entropy for.

    Returns:
        The Shannon entropy value in bits per character (0.0 for "").
    """
    if not data:
        return 0.0

    length = len(data)
    entropy = 0.0
    for count in Counter(data).values():
        probability = count / length
        entropy -= probability * math.log2(probability)
    return entropy


def is_false_positive(data: str) -> bool:
    """Return True if ``data`` matches one of the exclusion patterns."""
    return any(pattern.search(data) for pattern in FALSE_POSITIVE_PATTERNS)


def is_high_entropy(
    data: str,
    min_length: int = MIN_STRING_LENGTH,
    min_entropy: float = DEFAULT_ENTROPY_THRESHOLD,
) -> bool:
    """Decide whether ``data`` looks like a random secret.

    Strings shorter than ``min_length`` and strings matching an exclusion
    pattern are rejected before entropy is considered.
    """
    if len(data) < min_length:
        return False
    if is_false_positive(data):
        return False
    return calculate_shannon_entropy(data) >= min_entropy


class EntropyDetector(BaseDetector):
    """Detector that reports high-entropy tokens as LOW severity findings.

    Entropy findings are not line-addressable and carry line 0.
    """

    def __init__(
        self,
        entropy_threshold: float = DEFAULT_ENTROPY_THRESHOLD,
        min_string_length: int = MIN_STRING_LENGTH,
    ) -> None:
        self._entropy_threshold = entropy_threshold
        self._min_string_length = min_string_length

    @property
    def name(self) -> str:
        return "entropy"

    @property
    def entropy_threshold(self) -> float:
        return self._entropy_threshold

    @property
    def min_string_length(self) -> int:
        return self._min_string_length

    def detect(self, content: str, file_path: str = "") -> list[Finding]:
        start_time = time.perf_counter()
        findings: list[Finding] = []

        for match in TOKEN_PATTERN.finditer(content):
            token = match.group(0)
            if not is_high_entropy(token, self._min_string_length, self._entropy_threshold):
                continue
            findings.append(
                Finding(
                    detector_name="High Entropy String",
                    file_path=file_path,
                    line=0,
                    match=truncate_preview(token),
                    severity=Severity.LOW,
                    source=self.name,
                    metadata={"entropy": round(calculate_shannon_entropy(token), 3)},
                )
            )

        elapsed = time.perf_counter() - start_time
        logger.debug(
            f"EntropyDetector: {len(findings)} high-entropy strings in {file_path or '<content>'} ({elapsed:.3f}s)"
        )
        return findings
