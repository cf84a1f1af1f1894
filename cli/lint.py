"""Code quality commands (ruff over the launcher, cli and tests)."""

import subprocess
import sys

SOURCE_DIRS = ("studio_launcher/", "cli/", "tests/")


def _ruff(subcommand: str) -> int:
    return subprocess.run(
        [sys.executable, "-m", "ruff", subcommand, *SOURCE_DIRS],
        check=False,
    ).returncode


def main() -> None:
    """Lint."""
    sys.exit(_ruff("check"))


def format_code() -> None:
    """Format in place."""
    sys.exit(_ruff("format"))
