"""Command-line interface for sourcesecure."""

from sourcesecure.cli.main import app

__all__ = ["app"]
