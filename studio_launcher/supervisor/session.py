"""Supervise one interactive dev session.

Spawn the studio dev server, give it time to start listening, open the
browser on it, then wait for it to exit. An interrupt at any point after
the spawn terminates the child and the session reports the termination
status instead.
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from types import FrameType

import structlog

from studio_launcher.core.config import STUDIO_URL, LauncherConfig, Settings, get_settings
from studio_launcher.core.errors import SessionInterrupted
from studio_launcher.supervisor.browser import BrowserOpener, WebBrowserOpener
from studio_launcher.supervisor.process import (
    ChildProcess,
    ProcessSpawner,
    SubprocessSpawner,
    exit_status,
    terminate_child,
)
from studio_launcher.supervisor.readiness import wait_for_server
from studio_launcher.utils.clock import Clock, SystemClock, utc_now

logger = structlog.get_logger(__name__)


INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass(frozen=True)
class SessionResult:
    pid: int
    exit_code: int
    interrupted: bool
    browser_opened: bool
    started_at: datetime
    finished_at: datetime

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


class DevSession:
    def __init__(
        self,
        config: LauncherConfig,
        spawner: ProcessSpawner,
        browser: BrowserOpener,
        clock: Clock,
        url: str = STUDIO_URL,
    ):
        self._config = config
        self._spawner = spawner
        self._browser = browser
        self._clock = clock
        self._url = url
        self._child: ChildProcess | None = None
        self._terminating = False

    @property
    def child(self) -> ChildProcess | None:
        return self._child

    def handle_interrupt(self, signum: int, frame: FrameType | None = None) -> None:
        """Signal handler: unwind whatever step the session is blocked in.

        Repeat interrupts while the child is already being terminated are
        logged and otherwise ignored.
        """
        if self._terminating:
            logger.info("interrupt_ignored", signal=int(signum), reason="already_terminating")
            return
        self._terminating = True
        raise SessionInterrupted(signum)

    @contextmanager
    def _interrupt_handlers(self) -> Iterator[None]:
        # signal.signal only works on the main thread; elsewhere KeyboardInterrupt
        # is the only interrupt path.
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        previous = {signum: signal.getsignal(signum) for signum in INTERRUPT_SIGNALS}
        for signum in previous:
            signal.signal(signum, self.handle_interrupt)
        try:
            yield
        finally:
            for signum, handler in previous.items():
                signal.signal(signum, handler)

    def run(self) -> SessionResult:
        """Run the session to completion. Raises ``SpawnError`` if the server cannot start."""
        started_at = utc_now()
        child = self._spawner.spawn(self._config.command, cwd=self._config.workdir)
        self._child = child
        log = logger.bind(pid=child.pid)

        browser_opened = False
        interrupted = False
        with self._interrupt_handlers():
            try:
                wait_for_server(self._config, self._url, child, self._clock)
                browser_opened = self._open_browser()
                returncode = exit_status(child.wait())
                log.info("dev_server_exited", exit_code=returncode)
            except (SessionInterrupted, KeyboardInterrupt) as exc:
                interrupted = True
                self._terminating = True
                log.info("session_interrupted", signal=int(getattr(exc, "signum", signal.SIGINT)))
                returncode = terminate_child(child, self._config.termination_grace_seconds)

        result = SessionResult(
            pid=child.pid,
            exit_code=returncode,
            interrupted=interrupted,
            browser_opened=browser_opened,
            started_at=started_at,
            finished_at=utc_now(),
        )
        log.info(
            "session_finished",
            exit_code=result.exit_code,
            interrupted=result.interrupted,
            duration_seconds=round(result.duration_seconds, 3),
        )
        return result

    def _open_browser(self) -> bool:
        if not self._config.open_browser:
            logger.info("browser_open_skipped", reason="disabled")
            return False
        return self._browser.open(self._url)


def run_session(
    settings: Settings | None = None,
    *,
    spawner: ProcessSpawner | None = None,
    browser: BrowserOpener | None = None,
    clock: Clock | None = None,
) -> SessionResult:
    """Run a dev session with production defaults for any seam not given."""
    settings = settings or get_settings()
    session = DevSession(
        config=settings.launcher,
        spawner=spawner or SubprocessSpawner(),
        browser=browser or WebBrowserOpener(),
        clock=clock or SystemClock(),
    )
    return session.run()
