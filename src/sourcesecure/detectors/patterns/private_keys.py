"""Private key detection patterns.

Single-line PEM headers. Whole key blocks spanning several lines are
handled by the multi-line block detector.
"""

from sourcesecure.core.models import Severity
from sourcesecure.detectors.patterns import Pattern, PatternCategory

PRIVATE_KEY_HEADER = Pattern(
    name="RSA Private Key",
    regex=r"(?i)-----BEGIN\s*(?:RSA|OPENSSH|DSA|EC|PGP)?\s*PRIVATE KEY(?:\s*BLOCK)?-----",
    severity=Severity.CRITICAL,
    category=PatternCategory.PRIVATE_KEYS,
    description="PEM private key header (RSA, OpenSSH, DSA, EC, PGP or PKCS#8)",
)

SSH2_PRIVATE_KEY = Pattern(
    name="SSH Private Key",
    regex=r"(?i)-----BEGIN SSH2 ENCRYPTED PRIVATE KEY-----",
    severity=Severity.CRITICAL,
    category=PatternCategory.PRIVATE_KEYS,
    description="SSH2 encrypted private key header",
)

PEM_CERTIFICATE = Pattern(
    name="PEM Certificate",
    regex=r"(?i)-----BEGIN CERTIFICATE-----",
    severity=Severity.LOW,
    category=PatternCategory.PRIVATE_KEYS,
    description="PEM encoded certificate",
)

PRIVATE_KEY_PATTERNS = [
    PRIVATE_KEY_HEADER,
    SSH2_PRIVATE_KEY,
    PEM_CERTIFICATE,
]

__all__ = [
    "PRIVATE_KEY_PATTERNS",
    "PRIVATE_KEY_HEADER",
    "SSH2_PRIVATE_KEY",
    "PEM_CERTIFICATE",
]
