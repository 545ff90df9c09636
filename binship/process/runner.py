# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Child process execution seam.

Every external program the pipeline drives (the compiler, the registry
client) goes through a CommandRunner. The production implementation is a thin
wrapper over subprocess.run; tests substitute a recording fake. Either way the
caller gets a ProcessResult back instead of inspecting global process state.

Rules:
  - argument lists only, never shell=True
  - streams are inherited by default so compiler diagnostics and registry
    output show up live; capture=True collects them instead
  - a program that cannot be started at all raises ProcessSpawnError; a
    program that starts and exits nonzero is a normal result with ok=False
  - no timeout; a hung child blocks the caller
"""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence

from binship.errors import ProcessSpawnError
from binship.logging.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one child process. stdout/stderr are empty unless captured."""

    args: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


class CommandRunner(Protocol):
    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        env_overrides: Optional[Mapping[str, str]] = None,
        capture: bool = False,
    ) -> ProcessResult: ...


class SubprocessRunner:
    """CommandRunner backed by subprocess.run."""

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        env_overrides: Optional[Mapping[str, str]] = None,
        capture: bool = False,
    ) -> ProcessResult:
        env = None
        if env_overrides:
            env = {**os.environ, **env_overrides}

        logger.debug(
            "Spawning process",
            extra={
                "command": " ".join(args),
                "cwd": str(cwd) if cwd is not None else None,
                "env_overrides": dict(env_overrides or {}),
            },
        )

        try:
            completed = subprocess.run(
                list(args),
                cwd=str(cwd) if cwd is not None else None,
                env=env,
                capture_output=capture,
                text=True,
                check=False,
            )
        except OSError as err:
            raise ProcessSpawnError(f"Could not start '{args[0]}': {err}") from err

        result = ProcessResult(
            args=tuple(args),
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        logger.debug(
            "Process exited",
            extra={"command": result.command_line, "exit_code": result.exit_code},
        )
        return result
