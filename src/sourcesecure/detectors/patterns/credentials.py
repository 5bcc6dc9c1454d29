"""Credential detection patterns.

Connection strings with embedded passwords and signed session tokens.
"""

from sourcesecure.core.models import Severity
from sourcesecure.detectors.patterns import Pattern, PatternCategory

POSTGRES_CONNECTION = Pattern(
    name="PostgreSQL Connection",
    regex=r"(?i)postgres(?:ql)?://[^:\s]+:[^@\s]+@[^/\s]+",
    severity=Severity.CRITICAL,
    category=PatternCategory.CREDENTIALS,
    description="PostgreSQL URL with embedded credentials",
)

MYSQL_CONNECTION = Pattern(
    name="MySQL Connection",
    regex=r"(?i)mysql://[^:\s]+:[^@\s]+@[^/\s]+",
    severity=Severity.CRITICAL,
    category=PatternCategory.CREDENTIALS,
    description="MySQL URL with embedded credentials",
)

MONGODB_CONNECTION = Pattern(
    name="MongoDB Connection",
    regex=r"(?i)mongodb(?:\+srv)?://[^:\s]+:[^@\s]+@[^/\s]+",
    severity=Severity.CRITICAL,
    category=PatternCategory.CREDENTIALS,
    description="MongoDB URL with embedded credentials",
)

REDIS_CONNECTION = Pattern(
    name="Redis Connection",
    regex=r"(?i)redis://(?::[^@\s]+@)?[^/\s]+",
    severity=Severity.HIGH,
    category=PatternCategory.CREDENTIALS,
    description="Redis URL, optionally with a password",
)

JWT_TOKEN = Pattern(
    name="JWT Token",
    regex=r"eyJ[A-Za-z0-9_-]{10,}\.eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}",
    severity=Severity.MEDIUM,
    category=PatternCategory.CREDENTIALS,
    description="JSON Web Token",
)

CREDENTIAL_PATTERNS = [
    POSTGRES_CONNECTION,
    MYSQL_CONNECTION,
    MONGODB_CONNECTION,
    REDIS_CONNECTION,
    JWT_TOKEN,
]

__all__ = [
    "CREDENTIAL_PATTERNS",
    "POSTGRES_CONNECTION",
    "MYSQL_CONNECTION",
    "MONGODB_CONNECTION",
    "REDIS_CONNECTION",
    "JWT_TOKEN",
]
