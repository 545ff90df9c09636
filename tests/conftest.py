# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for binship tests.

The centrepiece is FakeRunner, a CommandRunner that records every call
instead of spawning a process. For `go build -o <path>` calls it writes a
small fake binary at <path>, so the orchestrator's "binary exists on
success" check passes without a Go toolchain. Failures and spawn errors are
injected with predicates over the recorded call.
"""

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

import pytest

from binship.catalog.targets import TARGETS
from binship.config.settings import Settings
from binship.errors import ProcessSpawnError
from binship.process.runner import ProcessResult

SCOPE = "@winner-fed/go-deploy"
START_VERSION = "1.2.3"


@dataclass(frozen=True)
class RecordedCall:
    args: tuple[str, ...]
    cwd: Optional[Path]
    env: dict[str, str] = field(default_factory=dict)

    @property
    def is_build(self) -> bool:
        return len(self.args) > 1 and self.args[1] == "build"

    @property
    def is_publish(self) -> bool:
        return len(self.args) > 1 and self.args[1] == "publish"


CallPredicate = Callable[[RecordedCall], bool]


class FakeRunner:
    """Recording CommandRunner. Thread-safe, since builds run in parallel."""

    def __init__(
        self,
        fail_when: Optional[CallPredicate] = None,
        spawn_error_when: Optional[CallPredicate] = None,
        write_outputs: bool = True,
    ) -> None:
        self.calls: list[RecordedCall] = []
        self._fail_when = fail_when
        self._spawn_error_when = spawn_error_when
        self._write_outputs = write_outputs
        self._lock = threading.Lock()

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        env_overrides: Optional[Mapping[str, str]] = None,
        capture: bool = False,
    ) -> ProcessResult:
        call = RecordedCall(tuple(args), cwd, dict(env_overrides or {}))
        with self._lock:
            self.calls.append(call)

        if self._spawn_error_when is not None and self._spawn_error_when(call):
            raise ProcessSpawnError(f"Could not start '{args[0]}': simulated")

        if self._fail_when is not None and self._fail_when(call):
            return ProcessResult(args=call.args, exit_code=1, stderr="simulated failure")

        if self._write_outputs and call.is_build and "-o" in call.args:
            out = Path(call.args[call.args.index("-o") + 1])
            out.write_bytes(b"\x7fELF fake binary for " + call.env.get("GOOS", "").encode())

        return ProcessResult(args=call.args, exit_code=0)

    @property
    def build_calls(self) -> list[RecordedCall]:
        return [c for c in self.calls if c.is_build]

    @property
    def publish_calls(self) -> list[RecordedCall]:
        return [c for c in self.calls if c.is_publish]


def _write_primary_manifest(project_dir: Path, version: str = START_VERSION) -> Path:
    data = {
        "name": SCOPE,
        "version": version,
        "description": "Deploy static sites over SSH",
        "main": "lib/index.js",
        "bin": {"go-deploy": "bin/go-deploy.js"},
        "optionalDependencies": {f"{SCOPE}-{t.slug}": f"^{version}" for t in TARGETS},
        "license": "MIT",
    }
    path = project_dir / "package.json"
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """
    A minimal front-end package checkout: primary manifest listing every
    platform package, the checked-in wrapper script under bin/, and a Go
    entry point.
    """
    root = tmp_path / "project"
    (root / "bin").mkdir(parents=True)
    (root / "bin" / "go-deploy.js").write_text("#!/usr/bin/env node\n", encoding="utf-8")
    (root / "main.go").write_text("package main\n\nfunc main() {}\n", encoding="utf-8")
    _write_primary_manifest(root)
    return root


@pytest.fixture()
def settings(project_dir: Path) -> Settings:
    return Settings.for_project(project_dir)


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def make_runner() -> type[FakeRunner]:
    """The FakeRunner class itself, for tests that inject failures."""
    return FakeRunner


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation, plus a couple of overrides."""
    config_file = tmp_path / "binship.yaml"
    config_file.write_text(
        'config_version: "1.0.0"\nbinary_name: "mytool"\nlog_level: "DEBUG"\n',
        encoding="utf-8",
    )
    return config_file
