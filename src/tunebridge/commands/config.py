"""
Configuration commands for tunebridge (`tb config`).

Shows the effective settings and manages the backend directory, the one
setting an installation has to provide.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..core.config import (
    create_default_settings,
    get_settings,
    reset_settings,
    save_settings,
)

console = Console()
app = typer.Typer(
    no_args_is_help=True,
    help="Show and change adapter settings.",
)


@app.command("path")
def config_path(
    backend_path: Optional[Path] = typer.Option(
        None,
        "--backend",
        help="Directory containing the backend's launch script (main.py).",
    ),
    reset: bool = typer.Option(False, "--reset", help="Reset settings to their default values."),
):
    """
    View or update the backend directory.

    Running the command with no options will display the current path.
    """
    if reset:
        console.print("[yellow]Resetting settings to default...[/yellow]")
        reset_settings()
        save_settings(create_default_settings())
        console.print("[green]Settings reset and saved.[/green]")
        return

    settings = get_settings()
    if backend_path:
        settings.backend_path = Path(str(backend_path)).expanduser().resolve()
        script = settings.backend_path / settings.launch_script
        console.print(f"Backend path set to: [blue]{settings.backend_path}[/blue]")
        if not script.is_file():
            console.print(f"[yellow]Warning:[/yellow] {script} does not exist yet.")
        save_settings(settings)
        console.print("[green]Settings saved.[/green]")
    else:
        console.print("[bold]Current Paths:[/bold]")
        console.print(f"  Backend:  [blue]{settings.backend_path or 'Not Set'}[/blue]")
        console.print(f"  Log file: [blue]{settings.resolved_log_file() or 'Not Set'}[/blue]")


@app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON to stdout"),
):
    """Display the effective configuration."""
    settings = get_settings()
    log_file = settings.resolved_log_file()
    data = {
        "backend": {
            "path": str(settings.backend_path) if settings.backend_path else None,
            "command": settings.launch_command(),
            "settle_delay": settings.settle_delay,
            "startup_retries": settings.startup_retries,
        },
        "server": {
            "url": settings.base_url,
            "timeout": settings.request_timeout,
        },
        "log_file": str(log_file) if log_file else None,
    }

    if json_output:
        typer.echo(json.dumps(data))
        return

    console.print("[bold]Current Configuration[/bold]")
    console.print("\n[bold]Backend:[/bold]")
    console.print(f"  Path:          [blue]{data['backend']['path'] or 'Not Set'}[/blue]")
    console.print(f"  Command:       {' '.join(data['backend']['command'])}")
    console.print(f"  Settle delay:  {settings.settle_delay:g}s")
    console.print("\n[bold]Server:[/bold]")
    console.print(f"  URL:           {settings.base_url}")
    console.print(f"  Timeout:       {settings.request_timeout:g}s")
    console.print(f"\nLog file: {data['log_file'] or '-'}")
