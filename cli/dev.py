"""Studio dev session launcher.

Usage:
    uv run studio-dev                  # spawn the studio, wait, open the browser
    uv run studio-dev --no-browser     # supervise only
    uv run studio-dev --wait poll      # probe the studio URL instead of sleeping
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

import pydantic
import structlog

from studio_launcher.core.config import (
    STUDIO_URL,
    LauncherConfig,
    LogLevel,
    ReadinessMode,
    Settings,
    get_settings,
)
from studio_launcher.core.errors import ConfigurationError, LauncherError, get_exit_code
from studio_launcher.core.logging import setup_logging
from studio_launcher.supervisor.session import run_session

logger = structlog.get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studio-dev",
        description=f"Run the studio dev server and open {STUDIO_URL}.",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait before opening the browser (LAUNCHER_STARTUP_DELAY_SECONDS).",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open a browser tab.",
    )
    parser.add_argument(
        "--wait",
        choices=[mode.value for mode in ReadinessMode],
        default=None,
        help="How to wait for the server before opening the browser (LAUNCHER_READINESS).",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="Launcher log level (APP_LOG_LEVEL).",
    )
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Overlay command-line flags onto env-derived settings."""
    launcher_updates: dict[str, object] = {}
    if args.delay is not None:
        launcher_updates["startup_delay_seconds"] = args.delay
    if args.no_browser:
        launcher_updates["open_browser"] = False
    if args.wait is not None:
        launcher_updates["readiness"] = args.wait

    updates: dict[str, object] = {}
    if launcher_updates:
        merged = {**settings.launcher.model_dump(), **launcher_updates}
        updates["launcher"] = LauncherConfig.model_validate(merged)
    if args.log_level is not None:
        updates["app"] = settings.app.model_copy(update={"log_level": LogLevel(args.log_level)})
    return settings.model_copy(update=updates) if updates else settings


def _load_settings(args: argparse.Namespace) -> Settings:
    try:
        return _apply_overrides(get_settings(), args)
    except pydantic.ValidationError as exc:
        raise ConfigurationError(
            "Invalid launcher configuration",
            details={"errors": exc.errors(include_url=False)},
        ) from exc


def run(argv: Sequence[str] | None = None) -> int:
    """Run one dev session and return the launcher exit code."""
    args = _build_parser().parse_args(argv)

    try:
        settings = _load_settings(args)
    except ConfigurationError as exc:
        print(f"studio-dev: {exc.message}: {exc.details}", file=sys.stderr)
        return get_exit_code(exc)

    setup_logging(settings)
    logger.info(
        "session_starting",
        command=" ".join(settings.launcher.command),
        url=STUDIO_URL,
        readiness=settings.launcher.readiness.value,
    )

    try:
        result = run_session(settings)
    except LauncherError as exc:
        logger.error("session_failed", code=exc.code, error=exc.message, **(exc.details or {}))
        return get_exit_code(exc)

    return result.exit_code


def main() -> None:
    """Run the studio dev session."""
    sys.exit(run())


if __name__ == "__main__":
    main()
