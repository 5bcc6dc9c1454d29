"""Custom exception hierarchy for sourcesecure.

This module defines the exception classes used throughout sourcesecure
for error handling and reporting. All exceptions inherit from the
base SourceSecureError class, allowing callers to catch all sourcesecure
errors with a single except clause.

Most failures inside a scan are degradations rather than errors: they are
caught at the component boundary, logged, and the scan carries on. These
exceptions cross component boundaries only where a caller must decide.
"""

from __future__ import annotations


class SourceSecureError(Exception):
    """Base exception for all sourcesecure errors.

    Attributes:
        message: Human-readable error message.
        context: Optional dictionary of additional context about the error.
    """

    def __init__(self, message: str, context: dict | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including context if present."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ScanError(SourceSecureError):
    """Raised when a scan operation cannot proceed.

    Used for a missing or inaccessible target and for failed git commands.

    Example:
        >>> raise ScanError("Target path does not exist", path="/nonexistent")
    """

    def __init__(self, message: str, path: str | None = None, context: dict | None = None):
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message, ctx)
        self.path = path


class ConfigError(SourceSecureError):
    """Raised when configuration is invalid or cannot be loaded.

    Example:
        >>> raise ConfigError("Invalid value", config_key="archive.max_depth")
    """

    def __init__(self, message: str, config_key: str | None = None, context: dict | None = None):
        ctx = context or {}
        if config_key:
            ctx["config_key"] = config_key
        super().__init__(message, ctx)
        self.config_key = config_key


class OutputError(SourceSecureError):
    """Raised when results cannot be formatted or written."""

    def __init__(self, message: str, output_path: str | None = None, context: dict | None = None):
        ctx = context or {}
        if output_path:
            ctx["output_path"] = output_path
        super().__init__(message, ctx)
        self.output_path = output_path


class ArchiveError(SourceSecureError):
    """Raised when an archive cannot be extracted within its bounds.

    Covers unsupported formats, corrupt archives, size-limit and timeout
    violations and unsafe member paths.
    """

    def __init__(self, message: str, archive_path: str | None = None, context: dict | None = None):
        ctx = context or {}
        if archive_path:
            ctx["archive"] = archive_path
        super().__init__(message, ctx)
        self.archive_path = archive_path


class ExternalToolError(SourceSecureError):
    """Raised when an external scanner cannot be run or times out."""

    def __init__(self, message: str, command: str | None = None, context: dict | None = None):
        ctx = context or {}
        if command:
            ctx["command"] = command
        super().__init__(message, ctx)
        self.command = command
