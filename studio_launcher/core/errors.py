"""Launcher error hierarchy."""

from typing import Any


class LauncherError(Exception):
    """Base exception for launcher errors."""

    code = "LAUNCHER_INTERNAL_ERROR"
    exit_code = 1

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(LauncherError):
    """Settings failed validation."""

    code = "LAUNCHER_INVALID_CONFIG"
    exit_code = 2


class SpawnError(LauncherError):
    """The dev server command could not be started."""

    code = "LAUNCHER_SPAWN_FAILED"
    exit_code = 127

    def __init__(
        self,
        message: str,
        command: list[str],
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details={**(details or {}), "command": command})
        self.command = command


class ReadinessTimeoutError(LauncherError):
    """The dev server never answered on its URL within the poll window.

    Only used for log context in poll mode; a slow server is not fatal
    to the session.
    """

    code = "LAUNCHER_SERVER_NOT_READY"
    exit_code = 1

    def __init__(
        self,
        message: str,
        url: str,
        timeout_seconds: float,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            details={**(details or {}), "url": url, "timeout_seconds": timeout_seconds},
        )
        self.url = url
        self.timeout_seconds = timeout_seconds


class SessionInterrupted(Exception):
    """Raised from the signal handler to unwind a running session."""

    def __init__(self, signum: int):
        self.signum = signum
        super().__init__(f"session interrupted by signal {signum}")


ERROR_EXIT_CODE_MAP: dict[type[LauncherError], int] = {
    ConfigurationError: 2,
    SpawnError: 127,
    ReadinessTimeoutError: 1,
}


def get_exit_code(error: LauncherError) -> int:
    """Get the process exit code for an error."""
    return ERROR_EXIT_CODE_MAP.get(type(error), 1)
