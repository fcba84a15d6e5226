"""
Backend process supervision.

`BackendSupervisor.ensure_running()` is called before every catalog operation.
It keeps one piece of process-wide knowledge (is the backend believed to be
running?) and, when it is not, starts the backend from its configured
directory and waits for it to answer the liveness probe.

The whole check-and-launch sequence runs under a single lock. A caller that
had to wait for that lock while another caller's attempt was in progress takes
that attempt's outcome instead of launching a second process.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from .capabilities import ProcessHandle, ProcessLauncher, SubprocessLauncher
from .errors import BackendNotInstalled, BackendUnreachable, TunebridgeError
from .http import HttpClient
from .models import BackendState
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY = 4.0
TERMINATE_GRACE = 3.0


class BackendSupervisor:
    def __init__(
        self,
        client: HttpClient,
        backend_path: Optional[Path],
        command: Sequence[str],
        *,
        launcher: Optional[ProcessLauncher] = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        startup_retries: int = 0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.backend_path = Path(backend_path) if backend_path else None
        self.command = list(command)
        self.launcher = launcher or SubprocessLauncher()
        self.settle_delay = settle_delay
        self.startup_retries = startup_retries
        self._sleep = sleep

        self._lock = threading.Lock()
        self._state = BackendState.UNKNOWN
        self._proc: Optional[ProcessHandle] = None
        self._attempts = 0
        self._last_error: Optional[TunebridgeError] = None

    # ---- read-only views ----

    @property
    def state(self) -> BackendState:
        return self._state

    @property
    def owns_process(self) -> bool:
        return self._proc is not None

    @property
    def last_error(self) -> Optional[TunebridgeError]:
        return self._last_error

    @property
    def launch_artifact(self) -> Optional[Path]:
        if not self.backend_path or not self.command:
            return None
        return self.backend_path / self.command[-1]

    def command_line(self) -> str:
        return " ".join(self.command)

    # ---- lifecycle ----

    def ensure_running(self) -> None:
        """Make sure the backend answers, starting it if needed.

        Raises BackendNotInstalled or BackendUnreachable.
        """
        seen = self._attempts
        with self._lock:
            if self._attempts != seen:
                # Someone else finished an attempt while we waited on the lock
                if self._state is BackendState.RUNNING:
                    return
                if self._last_error is not None:
                    raise self._last_error

            if self._state is BackendState.RUNNING and self.client.is_server_alive():
                logger.debug("ensure_running: backend already running")
                return

            try:
                self._start()
            except TunebridgeError as e:
                self._state = BackendState.FAILED
                self._last_error = e
                logger.error("%s", e)
                raise
            else:
                self._state = BackendState.RUNNING
                self._last_error = None
            finally:
                self._attempts += 1

    def _start(self) -> None:
        logger.info("ensure_running: backend not running, checking...")
        if self.client.is_server_alive():
            # Started outside the adapter; use it but don't take ownership
            logger.info("ensure_running: found an externally started backend")
            return

        self._state = BackendState.STARTING
        artifact = self.launch_artifact
        if artifact is None:
            raise BackendNotInstalled("Backend path is not configured (set TB_BACKEND_PATH).")
        if not artifact.is_file():
            raise BackendNotInstalled(f"Backend not installed at: {artifact}")

        self._reap()
        cmd = self.command_line()
        logger.info("ensure_running: starting backend: %s (cwd=%s)", cmd, self.backend_path)
        try:
            self._proc = self.launcher.launch(self.command, self.backend_path)
        except OSError as e:
            raise BackendUnreachable(
                f"Failed to start backend process `{cmd}`. Error code: {e.errno}"
            ) from e

        logger.info("ensure_running: process started, waiting %.1f seconds...", self.settle_delay)
        self._sleep(self.settle_delay)
        if not self._wait_ready():
            raise BackendUnreachable(f"Backend process `{cmd}` started but server not responding")
        logger.info("ensure_running: backend started successfully")

    def _wait_ready(self) -> bool:
        if self.startup_retries <= 0:
            return self.client.is_server_alive()

        def _probe() -> bool:
            if not self.client.is_server_alive():
                raise BackendUnreachable("liveness probe failed")
            return True

        try:
            return retry_with_backoff(
                _probe,
                retries=self.startup_retries,
                base=0.5,
                cap=self.settle_delay or 0.5,
                jitter=0.0,
                retry_on=(BackendUnreachable,),
                sleep=self._sleep,
            )
        except BackendUnreachable:
            return False

    def _reap(self) -> None:
        """Drop a previously launched process before relaunching."""
        proc, self._proc = self._proc, None
        if proc is not None and proc.poll() is None:
            logger.warning("Terminating unresponsive backend process before relaunch")
            self._terminate(proc)

    def _terminate(self, proc: ProcessHandle) -> None:
        try:
            proc.terminate()
            proc.wait(timeout=TERMINATE_GRACE)
        except Exception as e:
            logger.debug("terminate failed (%s); killing", e)
            try:
                proc.kill()
            except OSError:
                pass

    def release(self) -> None:
        """Forget the launched process so it outlives this supervisor."""
        with self._lock:
            self._proc = None

    def shutdown(self) -> None:
        """Terminate the backend only if this supervisor started it."""
        with self._lock:
            proc, self._proc = self._proc, None
            self._state = BackendState.UNKNOWN
        if proc is not None and proc.poll() is None:
            logger.info("Stopping backend process started by this session")
            self._terminate(proc)
