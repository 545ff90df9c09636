# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the real subprocess runner. Uses the current Python interpreter as
the child program so nothing else needs to be installed.
"""

import json
import sys
from pathlib import Path

import pytest

from binship.errors import ProcessSpawnError
from binship.logging.logger import set_log_level
from binship.process.runner import ProcessResult, SubprocessRunner


def test_captures_output_and_exit_code() -> None:
    """capture=True returns stdout, stderr and the exit code."""
    result = SubprocessRunner().run(
        [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"],
        capture=True,
    )
    assert result.exit_code == 3
    assert not result.ok
    assert result.stdout.strip() == "out"
    assert result.stderr.strip() == "err"


def test_env_overrides_reach_the_child() -> None:
    """Environment overrides are visible to the child."""
    result = SubprocessRunner().run(
        [sys.executable, "-c", "import os; print(os.environ['GOOS'], os.environ['CGO_ENABLED'])"],
        env_overrides={"GOOS": "linux", "CGO_ENABLED": "0"},
        capture=True,
    )
    assert result.ok
    assert result.stdout.split() == ["linux", "0"]


def test_runs_in_requested_directory(tmp_path: Path) -> None:
    """The child runs in cwd."""
    result = SubprocessRunner().run(
        [sys.executable, "-c", "import os; print(os.getcwd())"],
        cwd=tmp_path,
        capture=True,
    )
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()


def test_missing_program_is_a_spawn_error(tmp_path: Path) -> None:
    """A program that cannot be started raises ProcessSpawnError."""
    with pytest.raises(ProcessSpawnError, match="Could not start"):
        SubprocessRunner().run([str(tmp_path / "no-such-toolchain"), "build"])


def test_result_command_line() -> None:
    """command_line joins the argument list."""
    result = ProcessResult(args=("npm", "publish", "--dry-run"), exit_code=0)
    assert result.ok
    assert result.command_line == "npm publish --dry-run"


def test_exit_is_logged_with_command_line(capsys: pytest.CaptureFixture[str]) -> None:
    """The debug log records the full command line and its exit status."""
    set_log_level("DEBUG")
    try:
        SubprocessRunner().run([sys.executable, "-c", "raise SystemExit(2)"], capture=True)
    finally:
        set_log_level("INFO")

    entries = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
    exited = [e for e in entries if e["msg"] == "Process exited"]
    assert len(exited) == 1
    assert exited[0]["command"] == f"{sys.executable} -c raise SystemExit(2)"
    assert exited[0]["exit_code"] == 2
