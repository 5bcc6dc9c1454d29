"""Command-line interface for sourcesecure.

This module provides the Typer-based CLI that scans a directory tree for
leaked secrets and reports the findings as a table or as JSON.
"""

import asyncio
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from sourcesecure import __version__
from sourcesecure.config import load_config
from sourcesecure.core.exceptions import (
    ConfigError,
    OutputError,
    ScanError,
    SourceSecureError,
)
from sourcesecure.core.logging import setup_logging
from sourcesecure.core.report import exit_code_for
from sourcesecure.core.scanner import Scanner
from sourcesecure.outputs import get_output

# Exit codes
EXIT_ERROR = 1

# Initialize Typer app and Rich consoles
app = typer.Typer(
    name="sourcesecure",
    help="sourcesecure - find leaked secrets in source trees, archives and git history.",
    add_completion=False,
)
console = Console()
error_console = Console(stderr=True)


def _display_error(error: Exception, title: str = "Error") -> None:
    """Display an error with rich formatting.

    Args:
        error: The exception to display.
        title: The title for the error panel.
    """
    if isinstance(error, ScanError):
        message = f"[bold red]Scan Error[/bold red]\n\n{escape(error.message)}"
        if error.path:
            message += f"\n\n[dim]Path:[/dim] {escape(error.path)}"
        error_console.print(Panel(message, title="[red]Scan Error[/red]", border_style="red"))
    elif isinstance(error, ConfigError):
        message = f"[bold red]Configuration Error[/bold red]\n\n{escape(error.message)}"
        if error.config_key:
            message += f"\n\n[dim]Config key:[/dim] {escape(error.config_key)}"
        error_console.print(Panel(message, title="[red]Config Error[/red]", border_style="red"))
    elif isinstance(error, OutputError):
        message = f"[bold red]Output Error[/bold red]\n\n{escape(error.message)}"
        if error.output_path:
            message += f"\n\n[dim]Output path:[/dim] {escape(error.output_path)}"
        error_console.print(Panel(message, title="[red]Output Error[/red]", border_style="red"))
    elif isinstance(error, SourceSecureError):
        message = f"[bold red]Error[/bold red]\n\n{escape(error.message)}"
        error_console.print(Panel(message, title=f"[red]{title}[/red]", border_style="red"))
    elif isinstance(error, PermissionError):
        error_console.print(
            Panel(
                f"[bold red]Permission Denied[/bold red]\n\n{escape(str(error))}",
                title="[red]Permission Error[/red]",
                border_style="red",
            )
        )
    else:
        error_console.print(
            Panel(
                f"[bold red]{title}[/bold red]\n\n{escape(str(error))}",
                title="[red]Error[/red]",
                border_style="red",
            )
        )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]sourcesecure[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


def _write_output(text: str, output: Path) -> None:
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Failed to write output file: {e}", output_path=str(output)) from e


@app.command()
def scan(
    path: Annotated[
        Path,
        typer.Argument(
            help="Directory or file to scan",
            resolve_path=True,
        ),
    ] = Path("."),
    history: Annotated[
        bool,
        typer.Option(
            "--history",
            help="Also scan recent git history",
        ),
    ] = False,
    ai: Annotated[
        bool,
        typer.Option(
            "--ai",
            help="Ask a local language model to review each file",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show details and remediation for each finding",
        ),
    ] = False,
    format: Annotated[
        Optional[str],
        typer.Option(
            "--format",
            "-f",
            help="Output format (table or json)",
            case_sensitive=False,
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write output to file instead of stdout",
        ),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (YAML, TOML or JSON)",
        ),
    ] = None,
    no_external: Annotated[
        bool,
        typer.Option(
            "--no-external",
            help="Do not run the external secret scanner",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress the report on stdout (the exit code still reflects findings)",
        ),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """Scan a directory tree for leaked secrets.

    Exit codes:
        0: No critical or high severity findings
        1: At least one critical or high severity finding, or an error
    """
    cli_args: dict[str, Any] = {
        "format": format,
        "output": output,
        "no_external": no_external,
        "verbose": verbose or None,
        "quiet": quiet or None,
    }

    try:
        settings = load_config(config_path=config, cli_args=cli_args, start_path=path)
    except ConfigError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None

    if not quiet:
        setup_logging(verbose=verbose, level_name=settings.log_level.value)

    scan_config = settings.to_scan_config(path, use_ai=ai, scan_history=history)
    output_path = settings.output.output_path

    if verbose and not quiet:
        error_console.print(f"[dim]Scanning:[/dim] {escape(str(path))}")
        error_console.print(f"[dim]Format:[/dim] {settings.output.format.value}")

    try:
        result = asyncio.run(Scanner(scan_config).scan())
    except SourceSecureError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None
    except KeyboardInterrupt:
        if not quiet:
            error_console.print("\n[yellow]Scan interrupted by user[/yellow]")
        raise typer.Exit(code=EXIT_ERROR) from None

    color = output_path is None and console.is_terminal
    formatter = get_output(settings.output.format, verbose=scan_config.verbose, color=color)
    formatted_output = formatter.format(result)

    if output_path is not None:
        try:
            _write_output(formatted_output, Path(output_path))
        except OutputError as e:
            _display_error(e)
            raise typer.Exit(code=EXIT_ERROR) from None
        if not quiet:
            error_console.print(f"[green]Output written to:[/green] {escape(str(output_path))}")
    elif not quiet:
        typer.echo(formatted_output)

    raise typer.Exit(code=exit_code_for(result.findings))


if __name__ == "__main__":
    app()
