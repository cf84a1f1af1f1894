"""Root conftest for tests."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable

import pytest
import structlog

from studio_launcher.core.config import get_settings

if os.getenv("APP_ENV", "").strip().lower() == "prod":
    raise RuntimeError("Refusing to run tests with APP_ENV=prod")

os.environ["APP_ENV"] = "test"


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    dir_marker_map = {
        "unit": pytest.mark.unit,
        "integration": pytest.mark.integration,
    }
    for item in items:
        test_path = str(item.fspath)
        for dir_name, marker in dir_marker_map.items():
            if f"/{dir_name}/" in test_path or f"\\{dir_name}\\" in test_path:
                item.add_marker(marker)
                break


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Strip launcher env vars from the developer's shell and reset the settings cache."""
    for key in list(os.environ):
        if key.startswith(("LAUNCHER_", "LOG_")) or key == "APP_LOG_LEVEL":
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # setup_logging binds the current (possibly capsys) stderr into the factory.
    structlog.reset_defaults()


# ── Process / browser / clock fakes ──────────────────────────────


class FakeChild:
    """Stands in for ``subprocess.Popen``.

    ``exited=False`` models a long-running server: ``wait()`` without a
    timeout still returns (there is nothing to block on), but ``on_wait``
    runs first so a test can deliver an interrupt while the session is
    parked in ``wait()``.
    """

    def __init__(
        self,
        pid: int = 4242,
        returncode: int = 0,
        exited: bool = True,
        on_wait: Callable[[], None] | None = None,
        terminate_returncode: int = -15,
        ignores_terminate: bool = False,
    ):
        self.pid = pid
        self.returncode: int | None = None
        self._final = returncode
        self._exited = exited
        self.on_wait = on_wait
        self.terminate_returncode = terminate_returncode
        self.ignores_terminate = ignores_terminate
        self.terminate_calls = 0
        self.kill_calls = 0
        self.wait_timeouts: list[float | None] = []

    def poll(self) -> int | None:
        if self._exited:
            self.returncode = self._final
        return self.returncode

    def wait(self, timeout: float | None = None) -> int:
        self.wait_timeouts.append(timeout)
        if self.on_wait is not None and not self._exited:
            hook, self.on_wait = self.on_wait, None
            hook()
        if not self._exited:
            if timeout is not None:
                raise subprocess.TimeoutExpired("fake-dev-server", timeout)
            self._exited = True
        self.returncode = self._final
        return self._final

    def terminate(self) -> None:
        self.terminate_calls += 1
        if not self.ignores_terminate:
            self._exited = True
            self._final = self.terminate_returncode

    def kill(self) -> None:
        self.kill_calls += 1
        self._exited = True
        self._final = -9


class FakeSpawner:
    def __init__(self, child: FakeChild):
        self.child = child
        self.calls: list[tuple[list[str], str | None]] = []

    def spawn(self, command, cwd=None):  # noqa: ANN001
        self.calls.append((list(command), cwd))
        return self.child


class FakeBrowser:
    def __init__(self, events: list[tuple], result: bool = True):
        self.events = events
        self.result = result
        self.urls: list[str] = []

    def open(self, url: str) -> bool:
        self.urls.append(url)
        self.events.append(("browser", url))
        return self.result


class FakeClock:
    def __init__(self, events: list[tuple]):
        self.events = events
        self.now = 0.0
        self.sleeps: list[float] = []
        self.on_sleep: Callable[[float], None] | None = None

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.events.append(("sleep", seconds))
        self.now += seconds
        if self.on_sleep is not None:
            self.on_sleep(seconds)

    def monotonic(self) -> float:
        return self.now


@pytest.fixture
def events() -> list[tuple]:
    """Ordered log of clock and browser calls shared by the fakes."""
    return []


@pytest.fixture
def make_child():
    """Factory for fake dev server processes."""
    return FakeChild


@pytest.fixture
def fake_child() -> FakeChild:
    return FakeChild()


@pytest.fixture
def fake_spawner(fake_child: FakeChild) -> FakeSpawner:
    return FakeSpawner(fake_child)


@pytest.fixture
def make_spawner():
    return FakeSpawner


@pytest.fixture
def fake_browser(events: list[tuple]) -> FakeBrowser:
    return FakeBrowser(events)


@pytest.fixture
def fake_clock(events: list[tuple]) -> FakeClock:
    return FakeClock(events)
