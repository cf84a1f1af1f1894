"""Unit tests for the lint/test command wrappers."""

import sys
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from cli import lint
from cli import test as test_cli


def _completed(returncode: int) -> SimpleNamespace:
    return SimpleNamespace(returncode=returncode)


@pytest.mark.parametrize(
    ("command", "ruff_args"),
    [(lint.main, ["check"]), (lint.format_code, ["format"])],
)
def test_lint_commands_run_ruff(command, ruff_args):
    with patch("cli.lint.subprocess.run", return_value=_completed(1)) as run:
        with pytest.raises(SystemExit) as exc_info:
            command()

    assert exc_info.value.code == 1
    args = run.call_args.args[0]
    assert args[:3] == [sys.executable, "-m", "ruff"]
    assert args[3:4] == ruff_args
    assert "studio_launcher/" in args


@pytest.mark.parametrize(
    ("command", "path"),
    [
        (test_cli.main, "tests/unit"),
        (test_cli.test_integration, "tests/integration"),
        (test_cli.test_all, "tests/"),
    ],
)
def test_test_commands_run_pytest(command, path):
    with patch("cli.test.subprocess.run", return_value=_completed(0)) as run:
        with pytest.raises(SystemExit) as exc_info:
            command()

    assert exc_info.value.code == 0
    args = run.call_args.args[0]
    assert args[:3] == [sys.executable, "-m", "pytest"]
    assert path in args
