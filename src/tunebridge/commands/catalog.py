"""
Catalog commands for tunebridge (`tb search`, `tb playlists`, `tb playlist`, `tb url`).

Each command plays the host's role: it loads the online source plugin, runs
one entry point and renders whatever the plugin fed into its sinks. The
functions are registered as top-level commands by `tunebridge.cli`.
"""

import json

import typer
from rich.console import Console
from rich.table import Table

from ..core.capabilities import ListSink
from ..plugins.online_source import create_plugin

console = Console()


def _fmt_duration(seconds: float) -> str:
    s = int(seconds)
    return f"{s // 60}:{s % 60:02d}" if s else ""


def _print_tracks(tracks, json_output: bool) -> None:
    if json_output:
        rows = [
            {
                "id": t.track_id,
                "title": t.title,
                "artist": t.artist,
                "album": t.album,
                "duration": t.duration,
                "thumbnail": t.thumbnail,
                "isVideo": t.is_video,
            }
            for t in tracks
        ]
        typer.echo(json.dumps(rows, ensure_ascii=False))
        return
    if not tracks:
        console.print("[yellow]No tracks found.[/yellow]")
        return
    table = Table(show_header=True, header_style="bold")
    for col in ("id", "title", "artist", "album", "time"):
        table.add_column(col)
    for t in tracks:
        title = f"{t.title} [dim](video)[/dim]" if t.is_video else t.title
        table.add_row(t.track_id, title, t.artist, t.album, _fmt_duration(t.duration))
    console.print(table)


def search(
    query: str = typer.Argument(..., help="Free text to search for"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Search the catalog for tracks."""
    sink = ListSink()
    with create_plugin() as plugin:
        ok = plugin.on_search(query, sink)
    if not ok:
        raise typer.Exit(1)
    _print_tracks(sink.items, json_output)


def playlists(
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """List the signed-in account's playlists."""
    with create_plugin() as plugin:
        ok = plugin.get_folder("playlists", ListSink())
        items = plugin.gateway.playlists()
    if not ok:
        raise typer.Exit(1)
    if json_output:
        rows = [
            {"id": p.playlist_id, "title": p.title, "count": p.count, "thumbnail": p.thumbnail}
            for p in items
        ]
        typer.echo(json.dumps(rows, ensure_ascii=False))
        return
    if not items:
        console.print("[yellow]No playlists found.[/yellow]")
        return
    table = Table(show_header=True, header_style="bold")
    for col in ("id", "title", "tracks"):
        table.add_column(col)
    for p in items:
        table.add_row(p.playlist_id, p.title, str(p.count))
    console.print(table)


def playlist(
    playlist_id: str = typer.Argument(..., help="Playlist id (see `tb playlists`)"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """List the tracks of one playlist."""
    sink = ListSink()
    with create_plugin() as plugin:
        ok = plugin.get_folder(playlist_id, sink)
    if not ok:
        raise typer.Exit(1)
    _print_tracks(sink.items, json_output)


def url(
    track_id: str = typer.Argument(..., help="Track id from a search or playlist"),
):
    """Resolve a playable stream URL for a track."""
    with create_plugin() as plugin:
        ok, stream_url, _error = plugin.get_stream_url(track_id)
    if not ok:
        raise typer.Exit(1)
    typer.echo(stream_url)
