"""Reporting helpers shared by the output formats and the CLI.

Grouping of findings, remediation advice, and the exit-code contract: a
scan exits with 1 when any CRITICAL or HIGH finding is present in the
tree scan, 0 otherwise. History findings are reported but never affect
the exit code.
"""

from __future__ import annotations

from collections import defaultdict

from sourcesecure.core.models import Finding, Severity

EXIT_CLEAN = 0
EXIT_FINDINGS = 1

FAILING_SEVERITIES = frozenset({Severity.CRITICAL, Severity.HIGH})

SEVERITY_ORDER = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)

SEVERITY_REMEDIATION = {
    Severity.CRITICAL: "IMMEDIATE ACTION REQUIRED: Revoke this credential immediately and rotate to a new one.",
    Severity.HIGH: "HIGH RISK: This credential should be removed and stored in environment variables.",
    Severity.MEDIUM: "MEDIUM RISK: Consider moving to secure storage or using a secrets manager.",
    Severity.LOW: "LOW RISK: Review if this needs to be in the codebase.",
}

# First keyword found in the finding type wins
TOPIC_REMEDIATION: tuple[tuple[tuple[str, ...], str], ...] = (
    (("AWS",), "Use AWS Secrets Manager or IAM roles instead of hardcoded credentials."),
    (("Google", "GCP"), "Use Google Secret Manager or service account key files outside the repo."),
    (("GitHub",), "Revoke token at https://github.com/settings/tokens and use GitHub Secrets for Actions."),
    (
        ("Database", "Connection"),
        "Use connection strings from environment variables or config files outside the repo.",
    ),
    (("API Key",), "Store in .env file (git-ignored) or use a secrets management service."),
    (("Private Key",), "NEVER commit private keys. Store securely and reference via environment variables."),
    (("JWT",), "JWTs may contain sensitive data. Ensure they are not hardcoded and rotate regularly."),
)

BEST_PRACTICES = (
    "Never commit credentials to version control",
    "Use environment variables for sensitive configuration",
    "Implement secret scanning in your CI/CD pipeline",
    "Rotate any exposed credentials immediately",
    "Use secret management tools (e.g., HashiCorp Vault, AWS Secrets Manager)",
)


def group_by_severity(findings: list[Finding]) -> dict[Severity, list[Finding]]:
    """Group findings by severity; every severity is present, most severe first."""
    grouped: dict[Severity, list[Finding]] = {severity: [] for severity in SEVERITY_ORDER}
    for finding in findings:
        grouped[finding.severity].append(finding)
    return grouped


def group_by_file(findings: list[Finding]) -> dict[str, list[Finding]]:
    grouped: dict[str, list[Finding]] = defaultdict(list)
    for finding in findings:
        grouped[finding.file_path].append(finding)
    return dict(grouped)


def topic_remediation(finding: Finding) -> str | None:
    for keywords, advice in TOPIC_REMEDIATION:
        if any(keyword in finding.detector_name for keyword in keywords):
            return advice
    return None


def get_remediation(finding: Finding) -> list[str]:
    """Return remediation advice lines: severity advice, then a topic hint if any."""
    lines = [SEVERITY_REMEDIATION.get(finding.severity, SEVERITY_REMEDIATION[Severity.LOW])]
    topic = topic_remediation(finding)
    if topic:
        lines.append(topic)
    return lines


def exit_code_for(findings: list[Finding]) -> int:
    """Return 1 if any finding is CRITICAL or HIGH, else 0."""
    if any(f.severity in FAILING_SEVERITIES for f in findings):
        return EXIT_FINDINGS
    return EXIT_CLEAN
