"""Tests for detection of secrets inside base64 text."""

from __future__ import annotations

import base64

from sourcesecure.core.models import Severity
from sourcesecure.detectors.base64_detector import Base64Detector, decode_base64

FAKE_GITHUB_TOKEN = "ghp_" + "a1B2c3D4e5" * 3 + "f6G7h8"


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class TestDecodeBase64:
    """Tests for the single-candidate decoder."""

    def test_round_trip(self) -> None:
        assert decode_base64(_b64("hello world, this is plain text")) == "hello world, this is plain text"

    def test_missing_padding_restored(self) -> None:
        encoded = _b64("padding needed here!!").rstrip("=")
        assert decode_base64(encoded) == "padding needed here!!"

    def test_invalid_length(self) -> None:
        assert decode_base64("A" * 41) is None

    def test_non_utf8(self) -> None:
        encoded = base64.b64encode(bytes(range(128, 200))).decode("ascii")
        assert decode_base64(encoded) is None


class TestBase64Detector:
    """Tests for the Base64Detector pass."""

    def test_encoded_github_token(self) -> None:
        """A base64-encoded GitHub token is reported under its encoded name."""
        encoded = _b64(f"token={FAKE_GITHUB_TOKEN}")
        findings = Base64Detector().detect(f'blob = "{encoded}"\n', "deploy.yml")

        names = [f.detector_name for f in findings]
        assert "Base64 Encoded GitHub Personal Access Token" in names
        finding = findings[names.index("Base64 Encoded GitHub Personal Access Token")]
        assert finding.severity == Severity.CRITICAL
        assert finding.source == "base64"
        assert finding.line == 0
        assert finding.file_path == "deploy.yml"
        assert finding.decoded is not None
        assert finding.decoded.startswith("token=ghp_")

    def test_one_finding_per_pattern_per_candidate(self) -> None:
        encoded = _b64(f"{FAKE_GITHUB_TOKEN} and again {FAKE_GITHUB_TOKEN}")
        findings = Base64Detector().detect(encoded)
        github = [f for f in findings if f.detector_name == "Base64 Encoded GitHub Personal Access Token"]
        assert len(github) == 1

    def test_only_one_layer_decoded(self) -> None:
        twice = _b64(_b64(f"token={FAKE_GITHUB_TOKEN}"))
        assert Base64Detector().detect(twice) == []

    def test_harmless_base64_ignored(self) -> None:
        encoded = _b64("just some harmless configuration text here")
        assert Base64Detector().detect(encoded) == []

    def test_short_runs_ignored(self) -> None:
        assert Base64Detector().detect(_b64("short")) == []
