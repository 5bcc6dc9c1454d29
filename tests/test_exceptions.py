"""Tests for the sourcesecure exception hierarchy."""

from __future__ import annotations

import pytest

from sourcesecure.core.exceptions import (
    ArchiveError,
    ConfigError,
    ExternalToolError,
    OutputError,
    ScanError,
    SourceSecureError,
)


class TestHierarchy:
    """Every error can be caught as SourceSecureError."""

    @pytest.mark.parametrize(
        "error",
        [
            ScanError("scan"),
            ConfigError("config"),
            OutputError("output"),
            ArchiveError("archive"),
            ExternalToolError("tool"),
        ],
    )
    def test_subclasses(self, error: SourceSecureError) -> None:
        assert isinstance(error, SourceSecureError)
        with pytest.raises(SourceSecureError):
            raise error

    def test_hierarchy_members(self) -> None:
        names = {cls.__name__ for cls in SourceSecureError.__subclasses__()}
        assert names == {"ScanError", "ConfigError", "OutputError", "ArchiveError", "ExternalToolError"}


class TestContext:
    """Tests for context attributes and string rendering."""

    def test_plain_message(self) -> None:
        assert str(SourceSecureError("boom")) == "boom"

    def test_scan_error_path(self) -> None:
        error = ScanError("Target path does not exist", path="/nope")
        assert error.path == "/nope"
        assert str(error) == "Target path does not exist (path='/nope')"

    def test_config_error_key(self) -> None:
        error = ConfigError("bad", config_key="archive.max_depth")
        assert error.config_key == "archive.max_depth"
        assert "config_key='archive.max_depth'" in str(error)

    def test_archive_error_keeps_extra_context(self) -> None:
        error = ArchiveError("too big", archive_path="a.zip", context={"extracted": 5})
        assert error.archive_path == "a.zip"
        assert error.context == {"extracted": 5, "archive": "a.zip"}

    def test_external_tool_error_command(self) -> None:
        error = ExternalToolError("Timed out", command="trufflehog")
        assert error.command == "trufflehog"
        assert "trufflehog" in str(error)

    def test_output_error_path(self) -> None:
        error = OutputError("cannot write", output_path="/ro/out.json")
        assert error.output_path == "/ro/out.json"
