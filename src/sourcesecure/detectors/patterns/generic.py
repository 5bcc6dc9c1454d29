"""Generic secret assignment patterns.

These match variable names such as ``api_key`` or ``password`` assigned a
literal value, whatever service the value belongs to.
"""

from sourcesecure.core.models import Severity
from sourcesecure.detectors.patterns import Pattern, PatternCategory

GENERIC_API_KEY = Pattern(
    name="Generic API Key",
    regex=r"(?i)(?:api[_\s-]?key|apikey)[_\s-]?['\"]?\s*[:=]\s*['\"][a-zA-Z0-9_-]{32,}['\"]?",
    severity=Severity.MEDIUM,
    category=PatternCategory.GENERIC,
    description="Quoted value assigned to an api_key variable",
)

GENERIC_SECRET = Pattern(
    name="Generic Secret",
    regex=r"(?i)(?:secret|client[_\s-]?secret)[_\s-]?['\"]?\s*[:=]\s*['\"][a-zA-Z0-9_-]{32,}['\"]?",
    severity=Severity.HIGH,
    category=PatternCategory.GENERIC,
    description="Quoted value assigned to a secret variable",
)

GENERIC_TOKEN = Pattern(
    name="Generic Token",
    regex=r"(?i)(?:auth[_\s-]?)?token[_\s-]?['\"]?\s*[:=]\s*['\"][a-zA-Z0-9_-]{32,}['\"]?",
    severity=Severity.MEDIUM,
    category=PatternCategory.GENERIC,
    description="Quoted value assigned to a token variable",
)

GENERIC_PASSWORD = Pattern(
    name="Generic Password",
    regex=r"(?i)(?:password|passwd|pwd)[_\s-]?['\"]?\s*[:=]\s*['\"][^'\"\n]{8,}['\"]?",
    severity=Severity.HIGH,
    category=PatternCategory.GENERIC,
    description="Quoted value assigned to a password variable",
)

BEARER_AUTHORIZATION = Pattern(
    name="Bearer Authorization",
    regex=r"(?i)authorization[_\s-]?['\"]?\s*[:=]\s*['\"]?Bearer\s+[a-zA-Z0-9_-]{20,}",
    severity=Severity.HIGH,
    category=PatternCategory.GENERIC,
    description="Bearer token in an Authorization header",
)

GENERIC_PATTERNS = [
    GENERIC_API_KEY,
    GENERIC_SECRET,
    GENERIC_TOKEN,
    GENERIC_PASSWORD,
    BEARER_AUTHORIZATION,
]

__all__ = [
    "GENERIC_PATTERNS",
    "GENERIC_API_KEY",
    "GENERIC_SECRET",
    "GENERIC_TOKEN",
    "GENERIC_PASSWORD",
    "BEARER_AUTHORIZATION",
]
