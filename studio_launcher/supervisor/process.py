"""Child process spawning and termination."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from typing import Protocol

import structlog

from studio_launcher.core.errors import SpawnError

logger = structlog.get_logger(__name__)

SIGNAL_EXIT_BASE = 128


class ChildProcess(Protocol):
    """The slice of ``subprocess.Popen`` the session relies on."""

    pid: int
    returncode: int | None

    def poll(self) -> int | None: ...

    def wait(self, timeout: float | None = None) -> int: ...

    def terminate(self) -> None: ...

    def kill(self) -> None: ...


class ProcessSpawner(Protocol):
    def spawn(self, command: Sequence[str], cwd: str | None = None) -> ChildProcess: ...


class SubprocessSpawner:
    """Start the dev server attached to the launcher's terminal."""

    def spawn(self, command: Sequence[str], cwd: str | None = None) -> ChildProcess:
        args = list(command)
        try:
            # stdout/stderr are inherited so the server's own diagnostics reach the user.
            process = subprocess.Popen(args, cwd=cwd)
        except (FileNotFoundError, PermissionError, NotADirectoryError) as exc:
            raise SpawnError(
                f"Could not start dev server: {exc}",
                command=args,
                details={"cwd": cwd, "error": exc.__class__.__name__},
            ) from exc

        logger.info("dev_server_spawned", pid=process.pid, command=" ".join(args), cwd=cwd)
        return process


def exit_status(returncode: int) -> int:
    """Map a Popen return code to a shell-style exit status.

    A child killed by signal N reports ``-N``; shells report ``128 + N``.
    """
    if returncode < 0:
        return SIGNAL_EXIT_BASE - returncode
    return returncode


def terminate_child(child: ChildProcess, grace_seconds: float) -> int:
    """Terminate ``child``, escalating to kill after ``grace_seconds``."""
    already_exited = child.poll()
    if already_exited is not None:
        logger.debug("dev_server_already_exited", pid=child.pid, returncode=already_exited)
        return exit_status(already_exited)

    logger.info("dev_server_terminating", pid=child.pid)
    child.terminate()
    try:
        returncode = child.wait(timeout=grace_seconds)
    except subprocess.TimeoutExpired:
        logger.warning("dev_server_kill", pid=child.pid, grace_seconds=grace_seconds)
        child.kill()
        returncode = child.wait()

    status = exit_status(returncode)
    logger.info("dev_server_terminated", pid=child.pid, exit_code=status)
    return status
