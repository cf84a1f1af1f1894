"""Test runner commands."""

import subprocess
import sys


def _pytest(*paths: str) -> int:
    return subprocess.run(
        [sys.executable, "-m", "pytest", *paths, "-v", "--tb=short"],
        check=False,
    ).returncode


def main() -> None:
    """Run unit tests."""
    sys.exit(_pytest("tests/unit"))


def test_integration() -> None:
    """Run integration tests (spawn real child processes)."""
    sys.exit(_pytest("tests/integration"))


def test_all() -> None:
    """Run all tests."""
    sys.exit(_pytest("tests/"))
