"""Output formatter classes for sourcesecure.

This module provides the base output interface and the lookup of the
formatter for a requested output format.
"""

from abc import ABC, abstractmethod

from sourcesecure.core.models import OutputFormat, ScanResult


class BaseOutput(ABC):
    """Abstract base class for all output formatters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name of this output formatter (e.g. 'json', 'table')."""

    @abstractmethod
    def format(self, result: ScanResult) -> str:
        """Format a scan result for output.

        Args:
            result: The ScanResult to format.

        Returns:
            A formatted string representation of the scan result.
        """


def get_output(output_format: OutputFormat, verbose: bool = False, color: bool = True) -> BaseOutput:
    """Return the formatter for ``output_format``."""
    from sourcesecure.outputs.json_output import JsonOutput
    from sourcesecure.outputs.table_output import TableOutput

    if output_format == OutputFormat.JSON:
        return JsonOutput()
    return TableOutput(verbose=verbose, color=color)
