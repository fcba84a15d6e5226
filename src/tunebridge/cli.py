"""
tunebridge CLI - Main entry point using Typer.

This module configures the main Typer application, registers the catalog
commands and command groups, and defines global options like --version and
--verbose.
"""

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.traceback import install

from .commands import backend, catalog, config
from .core.config import get_settings
from .core.logging_util import setup_logging

# Install a rich traceback handler for readable exceptions
install(show_locals=False)

console = Console()

app = typer.Typer(
    name="tb",
    help="tunebridge - search, browse and stream from a local music catalog backend.",
    epilog="Use `tb [COMMAND] --help` for more info on a specific command.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,  # Disable Typer's default handler to use Rich's
)

app.command("search")(catalog.search)
app.command("playlists")(catalog.playlists)
app.command("playlist")(catalog.playlist)
app.command("url")(catalog.url)

app.add_typer(
    backend.app,
    name="backend",
    help="Inspect, start and sign in to the catalog backend.",
)
app.add_typer(
    config.app,
    name="config",
    help="Show and change adapter settings.",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,  # Use None as the default for a pure flag
        "--version",
        "-v",
        help="Show the application version and exit.",
        is_eager=True,  # Process this before any command
    ),
    verbose: bool = typer.Option(None, "--verbose", help="Enable DEBUG-level logging."),
    quiet: bool = typer.Option(
        None, "--quiet", help="Reduce logging to warnings and errors."
    ),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Emit logs as JSON lines (stderr)."
    ),
):
    """
    tunebridge CLI - a terminal host for the catalog backend adapter.
    """
    if version:
        from . import __version__

        console.print(f"tunebridge v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        log_file = get_settings().resolved_log_file()
    except ValidationError:
        raise typer.Exit(1)
    # Only log next to the backend once its directory exists
    if log_file is not None and not log_file.parent.is_dir():
        log_file = None

    # Configure logging once, early
    setup_logging(
        json_logs=json_logs,
        verbose=bool(verbose),
        quiet=bool(quiet),
        log_file=log_file,
    )
    if verbose:
        console.print("[yellow]Verbose logging enabled.[/yellow]")


def cli():
    """Main entry point for the console script defined in pyproject.toml."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user.[/yellow]")
        raise SystemExit(130)


if __name__ == "__main__":
    cli()
