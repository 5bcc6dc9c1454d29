"""Detector classes for sourcesecure.

This module provides the base interface for analysis passes that turn file
content into findings, and the registry of named detection patterns that
those passes (and the git history scanner) share.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from functools import lru_cache
from typing import NamedTuple

from sourcesecure.core.models import Finding
from sourcesecure.detectors.patterns import Pattern

#: Characters on each side of a match searched for a pattern's context.
CONTEXT_WINDOW = 50


class BaseDetector(ABC):
    """Abstract base class for all content analysis passes.

    Subclasses must implement the `name` property and `detect` method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name of this detector (e.g. 'regex', 'entropy')."""

    @abstractmethod
    def detect(self, content: str, file_path: str = "") -> list[Finding]:
        """Detect secrets in the given content.

        Args:
            content: The file content to analyze.
            file_path: The path reported on each Finding.

        Returns:
            A list of Finding objects for each detected item.
        """


class RegistryMatch(NamedTuple):
    """A single accepted pattern match."""

    pattern: Pattern
    text: str
    offset: int


def line_number_at(content: str, offset: int) -> int:
    """Return the 1-based line containing ``offset``."""
    return content.count("\n", 0, offset) + 1


def context_window(content: str, start: int, end: int, window: int = CONTEXT_WINDOW) -> str:
    """Return the text surrounding ``content[start:end]``, clamped to the content."""
    return content[max(0, start - window) : min(len(content), end + window)]


class DetectorRegistry:
    """Ordered, read-only collection of detection patterns.

    The registry is built once and shared by every scanner. Pattern names
    are unique; iteration follows registration order.
    """

    def __init__(self, patterns: Iterable[Pattern] = ()) -> None:
        self._patterns: dict[str, Pattern] = {}
        for pattern in patterns:
            if pattern.name in self._patterns:
                raise ValueError(f"Pattern '{pattern.name}' is already registered")
            self._patterns[pattern.name] = pattern

    def get(self, name: str) -> Pattern:
        """Retrieve a pattern by name.

        Raises:
            KeyError: If no pattern with the given name is registered.
        """
        if name not in self._patterns:
            raise KeyError(f"Pattern '{name}' is not registered")
        return self._patterns[name]

    def get_all(self) -> list[Pattern]:
        return list(self._patterns.values())

    def list_names(self) -> list[str]:
        return list(self._patterns.keys())

    def match(self, content: str) -> list[RegistryMatch]:
        """Run every pattern over ``content``.

        Matches of a pattern that declares a context are kept only when the
        context expression occurs within CONTEXT_WINDOW characters of the
        match on either side.

        Returns:
            Accepted matches, grouped by pattern in registry order.
        """
        return list(self.iter_matches(content))

    def iter_matches(self, content: str) -> Iterator[RegistryMatch]:
        for pattern in self._patterns.values():
            for m in pattern.compiled.finditer(content):
                text = m.group(0)
                if not text:
                    continue
                if pattern.compiled_context is not None:
                    window = context_window(content, m.start(), m.end())
                    if not pattern.compiled_context.search(window):
                        continue
                yield RegistryMatch(pattern, text, m.start())

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns.values())

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, name: object) -> bool:
        return name in self._patterns


@lru_cache(maxsize=1)
def default_registry() -> DetectorRegistry:
    """Return the registry of built-in patterns, built once per process."""
    from sourcesecure.detectors.patterns.api_keys import API_KEY_PATTERNS
    from sourcesecure.detectors.patterns.cloud import CLOUD_PATTERNS
    from sourcesecure.detectors.patterns.credentials import CREDENTIAL_PATTERNS
    from sourcesecure.detectors.patterns.generic import GENERIC_PATTERNS
    from sourcesecure.detectors.patterns.private_keys import PRIVATE_KEY_PATTERNS

    return DetectorRegistry(
        [
            *CLOUD_PATTERNS,
            *API_KEY_PATTERNS,
            *CREDENTIAL_PATTERNS,
            *PRIVATE_KEY_PATTERNS,
            *GENERIC_PATTERNS,
        ]
    )


__all__ = [
    "CONTEXT_WINDOW",
    "BaseDetector",
    "DetectorRegistry",
    "RegistryMatch",
    "context_window",
    "default_registry",
    "line_number_at",
]
