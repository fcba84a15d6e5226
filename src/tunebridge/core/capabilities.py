"""
Collaborator interfaces consumed by the core, with default implementations.

The supervisor and gateway never touch platform facilities directly: process
launching and browser opening arrive as injected objects, so tests can swap in
fakes. The facade additionally talks to result sinks, a transient notifier and
a user-facing error alert.
"""

from __future__ import annotations

import logging
import os
import subprocess
import webbrowser
from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from rich.console import Console
from rich.status import Status

from .models import Track

logger = logging.getLogger(__name__)


@runtime_checkable
class ProcessHandle(Protocol):
    def poll(self) -> Optional[int]: ...

    def terminate(self) -> None: ...

    def kill(self) -> None: ...

    def wait(self, timeout: Optional[float] = None) -> int: ...


class ProcessLauncher(Protocol):
    def launch(self, command: Sequence[str], cwd: Path) -> ProcessHandle:
        """Start `command` detached in `cwd`, without a console. Raises OSError."""
        ...


class BrowserOpener(Protocol):
    def open(self, url: str) -> None: ...


class TrackSink(Protocol):
    def add(self, track: Track) -> None: ...


class FolderSink(Protocol):
    def add(self, folder_id: str, title: str) -> None: ...


class Notifier(Protocol):
    def show(self, message: str) -> None: ...

    def hide(self) -> None: ...


class ErrorAlert(Protocol):
    def alert(self, message: str) -> None: ...


def _is_windows() -> bool:
    return os.name == "nt"


class SubprocessLauncher:
    """Launch the backend as a background process with no console window."""

    def launch(self, command: Sequence[str], cwd: Path) -> subprocess.Popen:
        kwargs: dict = {}
        if _is_windows():
            kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0) | getattr(
                subprocess, "DETACHED_PROCESS", 0
            )
        else:
            # Own session so host signals (Ctrl+C) don't reach the backend
            kwargs["start_new_session"] = True
        logger.debug("Launching %s in %s", list(command), cwd)
        return subprocess.Popen(
            list(command),
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **kwargs,
        )


class WebBrowserOpener:
    def open(self, url: str) -> None:
        if not webbrowser.open(url, new=2, autoraise=True):
            logger.warning("No browser available to open %s", url)


class ListSink:
    """Collects whatever is added, in order."""

    def __init__(self) -> None:
        self.items: list = []

    def add(self, *item) -> None:
        self.items.append(item[0] if len(item) == 1 else item)


class ConsoleNotifier:
    """Spinner on the console while a long call blocks."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)
        self._status: Optional[Status] = None

    def show(self, message: str) -> None:
        self.hide()
        self._status = self.console.status(message)
        self._status.start()

    def hide(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None


class NullNotifier:
    def show(self, message: str) -> None:
        pass

    def hide(self) -> None:
        pass


class ConsoleAlert:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)

    def alert(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")
