"""Pattern definitions for the detector registry.

This module provides the core data structure for defining detection
patterns used to identify API keys, credentials, private keys and other
secrets. A pattern is a named regular expression with a severity and,
optionally, a context expression that must appear close to a match for
the match to count.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from sourcesecure.core.models import Severity


class PatternCategory(str, Enum):
    """Categories for organizing detection patterns."""

    CLOUD = "cloud"
    API_KEYS = "api_keys"
    CREDENTIALS = "credentials"
    PRIVATE_KEYS = "private_keys"
    GENERIC = "generic"


@dataclass(frozen=True)
class Pattern:
    """A named detection rule.

    Attributes:
        name: Unique human-readable name, used as the finding type.
        regex: Regular expression for the secret itself.
        severity: Severity assigned to findings from this pattern.
        category: Category this pattern belongs to.
        context: Optional case-insensitive expression that must occur
            within the context window around a match.
        description: Human-readable description of what is detected.
    """

    name: str
    regex: str
    severity: Severity
    category: PatternCategory
    context: str | None = None
    description: str = ""
    compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)
    compiled_context: re.Pattern[str] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", re.compile(self.regex))
        object.__setattr__(
            self,
            "compiled_context",
            re.compile(self.context, re.IGNORECASE) if self.context else None,
        )

    @property
    def requires_context(self) -> bool:
        return self.compiled_context is not None

    def to_dict(self) -> dict:
        """Convert the pattern to a plain dictionary."""
        return {
            "name": self.name,
            "pattern": self.regex,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context,
            "description": self.description,
        }


__all__ = ["PatternCategory", "Pattern", "Severity"]
