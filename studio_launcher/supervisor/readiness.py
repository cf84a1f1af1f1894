"""Waiting for the dev server before opening the browser.

The default is an unconditional fixed delay. ``poll`` mode instead probes
the studio URL over HTTP until anything answers, the child exits, or the
poll window closes. Neither mode ever fails the session: the browser is
opened afterwards either way.
"""

from __future__ import annotations

import httpx
import structlog
from tenacity import RetryCallState, Retrying, retry_if_exception_type, wait_fixed

from studio_launcher.core.config import LauncherConfig, ReadinessMode
from studio_launcher.core.errors import ReadinessTimeoutError
from studio_launcher.supervisor.process import ChildProcess
from studio_launcher.utils.clock import Clock

logger = structlog.get_logger(__name__)

PROBE_TIMEOUT_SECONDS = 2.0


class _ChildExited(Exception):
    def __init__(self, returncode: int):
        self.returncode = returncode
        super().__init__(f"dev server exited with {returncode}")


def wait_fixed_delay(clock: Clock, seconds: float) -> None:
    """Sleep for the fixed startup delay."""
    logger.info("waiting_for_dev_server", mode=ReadinessMode.DELAY.value, seconds=seconds)
    if seconds > 0:
        clock.sleep(seconds)


def wait_until_listening(
    url: str,
    child: ChildProcess,
    clock: Clock,
    timeout: float,
    interval: float,
    client: httpx.Client | None = None,
) -> bool:
    """Poll ``url`` until it answers. Returns whether the server came up."""
    logger.info(
        "waiting_for_dev_server",
        mode=ReadinessMode.POLL.value,
        url=url,
        timeout_seconds=timeout,
    )
    started = clock.monotonic()

    def _deadline_passed(retry_state: RetryCallState) -> bool:
        return clock.monotonic() - started >= timeout

    # Local probe: proxy env vars from the developer's shell must not apply.
    http = (
        client
        if client is not None
        else httpx.Client(timeout=PROBE_TIMEOUT_SECONDS, trust_env=False)
    )
    retrying = Retrying(
        stop=_deadline_passed,
        wait=wait_fixed(interval),
        retry=retry_if_exception_type(httpx.TransportError),
        sleep=clock.sleep,
        reraise=True,
    )
    try:
        for attempt in retrying:
            with attempt:
                returncode = child.poll()
                if returncode is not None:
                    raise _ChildExited(returncode)
                response = http.get(url)
    except _ChildExited as exc:
        logger.warning("dev_server_exited_before_ready", pid=child.pid, returncode=exc.returncode)
        return False
    except httpx.TransportError as exc:
        error = ReadinessTimeoutError(
            "Dev server did not answer before the poll window closed",
            url=url,
            timeout_seconds=timeout,
            details={"last_error": str(exc)},
        )
        logger.warning("dev_server_not_ready", code=error.code, **(error.details or {}))
        return False
    finally:
        if client is None:
            http.close()

    logger.info(
        "dev_server_ready",
        url=url,
        status_code=response.status_code,
        elapsed_seconds=round(clock.monotonic() - started, 3),
    )
    return True


def wait_for_server(config: LauncherConfig, url: str, child: ChildProcess, clock: Clock) -> None:
    """Wait using the configured readiness mode.

    The outcome of a poll is only logged; the session carries on to the
    browser step whether or not the server answered.
    """
    if config.readiness == ReadinessMode.POLL:
        wait_until_listening(
            url,
            child,
            clock,
            timeout=config.poll_timeout_seconds,
            interval=config.poll_interval_seconds,
        )
        return
    wait_fixed_delay(clock, config.startup_delay_seconds)
