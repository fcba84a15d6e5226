"""
Backend commands for tunebridge (`tb backend`).

Quick checks and lifecycle actions for the local catalog backend.
"""

import json

import typer
from rich.console import Console

from ..core.config import get_settings
from ..core.errors import NotAuthenticated, TunebridgeError
from ..plugins.online_source import create_plugin

console = Console()
app = typer.Typer(no_args_is_help=True, help="Inspect and control the catalog backend.")


@app.command("status")
def backend_status(
    json_out: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
):
    """Report backend path, launch script presence, liveness and sign-in state.

    Does not start the backend.
    """
    settings = get_settings()
    with create_plugin(settings) as plugin:
        supervisor = plugin.gateway.supervisor
        client = plugin.gateway.client
        artifact = supervisor.launch_artifact
        alive = client.is_server_alive()
        authenticated = client.is_authenticated() if alive else False

    report = {
        "backend_path": str(settings.backend_path) if settings.backend_path else None,
        "launch_script": {"path": str(artifact) if artifact else None, "ok": bool(artifact and artifact.is_file())},
        "server": {"url": settings.base_url, "alive": alive},
        "authenticated": authenticated,
    }
    if json_out:
        typer.echo(json.dumps(report))
    else:
        console.print(f"Backend path:  [blue]{report['backend_path'] or '-'}[/blue]")
        console.print(f"Launch script: {'OK' if report['launch_script']['ok'] else 'MISSING'}")
        console.print(f"Server:        {settings.base_url} {'[green]UP[/green]' if alive else '[red]DOWN[/red]'}")
        console.print(f"Signed in:     {'yes' if authenticated else 'no'}")
    if not alive:
        raise typer.Exit(3)


@app.command("start")
def backend_start():
    """Start the backend if needed and leave it running."""
    with create_plugin() as plugin:
        supervisor = plugin.gateway.supervisor
        try:
            supervisor.ensure_running()
        except TunebridgeError as e:
            console.print(f"[red]Backend start failed:[/red] {e}")
            raise typer.Exit(1)
        started = supervisor.owns_process
        # Keep the process alive past this command
        supervisor.release()
    if started:
        console.print("[green]Backend started.[/green]")
    else:
        console.print("[green]Backend already running.[/green]")


@app.command("auth")
def backend_auth():
    """Check sign-in state; opens the backend's config page once when signed out."""
    with create_plugin() as plugin:
        gateway = plugin.gateway
        try:
            if not gateway.check_auth_and_maybe_prompt():
                raise NotAuthenticated(f"Not signed in. Finish setup at {gateway.config_url}")
        except NotAuthenticated as e:
            console.print(f"[yellow]{e}[/yellow]")
            raise typer.Exit(2)
        except TunebridgeError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
    console.print("[green]Signed in.[/green]")
