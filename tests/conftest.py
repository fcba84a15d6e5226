"""
Shared fakes: an in-memory requests session standing in for the backend,
a process launcher that never spawns anything, and a recording browser.
"""

import logging
import threading

import pytest
import requests

from tunebridge.core.catalog import CatalogGateway
from tunebridge.core.http import HttpClient
from tunebridge.core.supervisor import BackendSupervisor

BASE = "http://127.0.0.1:8000"
ALIVE_BODY = '{"status": "online", "service": "bridge"}'


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class FakeResponse:
    def __init__(self, body="", status_code=200, encoding="utf-8"):
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self.status_code = status_code
        self.encoding = encoding


class FakeSession:
    """Routes GET paths to canned bodies; `down=True` refuses every connection."""

    def __init__(self, routes=None, down=False):
        self.routes = {"/": ALIVE_BODY}
        self.routes.update(routes or {})
        self.down = down
        self.headers = {}
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url, timeout=None):
        path = url[len(BASE):]
        with self._lock:
            self.calls.append(path)
        if self.down:
            raise requests.ConnectionError("Connection refused")
        route = self.routes.get(path)
        if route is None:
            return FakeResponse('{"detail":"Not Found"}', 404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            return route
        if callable(route):
            return route()
        return FakeResponse(route)

    def close(self):
        self.closed = True

    def paths(self, prefix):
        return [p for p in self.calls if p.startswith(prefix)]


class FakeProcess:
    def __init__(self):
        self.returncode = None
        self.terminated = False
        self.killed = False

    def poll(self):
        return self.returncode

    def terminate(self):
        self.terminated = True
        self.returncode = -15

    def kill(self):
        self.killed = True
        self.returncode = -9

    def wait(self, timeout=None):
        return self.returncode


class FakeLauncher:
    """Records launches; `on_launch` runs inside launch (e.g. to bring the backend up)."""

    def __init__(self, on_launch=None, error=None):
        self.on_launch = on_launch
        self.error = error
        self.launches = []
        self.processes = []
        self._lock = threading.Lock()

    def launch(self, command, cwd):
        with self._lock:
            self.launches.append((list(command), cwd))
        if self.error is not None:
            raise self.error
        if self.on_launch is not None:
            self.on_launch()
        proc = FakeProcess()
        self.processes.append(proc)
        return proc


class FakeBrowser:
    def __init__(self):
        self.opened = []

    def open(self, url):
        self.opened.append(url)


class FakeNotifier:
    def __init__(self):
        self.events = []

    def show(self, message):
        self.events.append(("show", message))

    def hide(self):
        self.events.append(("hide", None))


class FakeAlert:
    def __init__(self):
        self.messages = []

    def alert(self, message):
        self.messages.append(message)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return HttpClient(BASE, timeout=5, session=session)


@pytest.fixture
def backend_dir(tmp_path):
    d = tmp_path / "bridge"
    d.mkdir()
    (d / "main.py").write_text("# backend entry point\n", encoding="utf-8")
    return d


@pytest.fixture
def launcher(session):
    # Launching brings the fake backend up
    return FakeLauncher(on_launch=lambda: setattr(session, "down", False))


@pytest.fixture
def supervisor(client, backend_dir, launcher):
    return BackendSupervisor(
        client,
        backend_dir,
        ["python3", "main.py"],
        launcher=launcher,
        settle_delay=4.0,
        sleep=lambda s: None,
    )


@pytest.fixture
def browser():
    return FakeBrowser()


@pytest.fixture
def gateway(client, supervisor, browser):
    return CatalogGateway(client, supervisor, browser=browser)
