"""Clock utility for testability."""

import time
from datetime import UTC, datetime
from typing import Protocol


def utc_now() -> datetime:
    """Return current UTC time. Override in tests."""
    return datetime.now(UTC)


class Clock(Protocol):
    def sleep(self, seconds: float) -> None: ...

    def monotonic(self) -> float: ...


class SystemClock:
    """Real wall clock; tests inject a fake with the same two methods."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def monotonic(self) -> float:
        return time.monotonic()
