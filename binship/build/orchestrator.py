# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Cross-compilation orchestrator.

Builds one self-contained executable per catalog target into

    bin/
    ├─ <wrapper script>          (checked in, never touched)
    ├─ darwin-x64/go-deploy
    ├─ darwin-arm64/go-deploy
    ├─ linux-x64/go-deploy
    ├─ linux-arm64/go-deploy
    └─ win32-x64/go-deploy.exe

The run is clean-room: every platform-scoped directory under bin/ is removed
first, so a stale binary can never be packaged and published by accident.

All targets build at once. Each build is a blocking child process, so a
thread per target is enough. The join waits for every build to terminate and
then fails as a whole if any of them failed. Binaries that did get written
stay on disk but are not reported, and the next run deletes them anyway.
"""

import shutil
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from binship.catalog.targets import TARGETS, Target, is_platform_slug
from binship.config.settings import Settings
from binship.errors import BinshipError, ToolchainError
from binship.logging.logger import get_logger
from binship.process.runner import CommandRunner

logger = get_logger(__name__)


class BuildStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class BuildArtifact:
    """One target's build outcome. output_path is absolute."""

    target: Target
    output_path: Path
    status: BuildStatus
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is BuildStatus.SUCCESS


def output_path(target: Target, settings: Settings) -> Path:
    """Where the toolchain must put the binary for this target."""
    binary = f"{settings.config.binary_name}{target.suffix}"
    return settings.bin_dir / target.slug / binary


def toolchain_env(target: Target) -> dict[str, str]:
    """Environment overrides selecting the target and disabling cgo (static binary)."""
    return {
        "GOOS": target.os,
        "GOARCH": target.arch,
        "CGO_ENABLED": "0",
    }


def clean_bin_directory(settings: Settings) -> list[Path]:
    """
    Remove every platform-scoped subdirectory of bin/.

    Anything that is not a '<platform>-<cpu>' directory (the wrapper script,
    a README) survives. Directories of targets no longer in the catalog are
    removed too, since is_platform_slug checks the vocabulary, not the catalog.

    Returns:
        The directories that were removed, sorted.
    """
    bin_dir = settings.bin_dir
    if not bin_dir.is_dir():
        return []

    removed: list[Path] = []
    for entry in sorted(bin_dir.iterdir()):
        if entry.is_dir() and not entry.is_symlink() and is_platform_slug(entry.name):
            shutil.rmtree(entry)
            removed.append(entry)
            logger.info("Removed stale build output", extra={"path": str(entry)})
    return removed


def build_target(target: Target, settings: Settings, runner: CommandRunner) -> BuildArtifact:
    """
    Compile one target. Never raises for a failed compile, only for a spawn error.

    A zero exit without a file at the expected path is treated as a failure:
    the toolchain contract says the binary exists on success.
    """
    out = output_path(target, settings)
    out.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Building target", extra={"target": f"{target.os}/{target.arch}", "output": str(out)})

    result = runner.run(
        [settings.config.toolchain, "build", "-o", str(out), settings.entry_file],
        cwd=settings.project_dir,
        env_overrides=toolchain_env(target),
    )

    if not result.ok:
        logger.error(
            "Build failed",
            extra={"target": target.slug, "exit_code": result.exit_code, "stderr": result.stderr},
        )
        return BuildArtifact(target, out, BuildStatus.FAILED, f"exit code {result.exit_code}")

    if not out.is_file():
        logger.error("Toolchain reported success but wrote no binary", extra={"target": target.slug, "output": str(out)})
        return BuildArtifact(target, out, BuildStatus.FAILED, "no binary at output path")

    logger.info("Build finished", extra={"target": target.slug, "output": str(out)})
    return BuildArtifact(target, out, BuildStatus.SUCCESS)


def build_all(
    settings: Settings,
    runner: CommandRunner,
    targets: Sequence[Target] = TARGETS,
) -> list[BuildArtifact]:
    """
    Clean bin/, then build every target concurrently and join on all of them.

    Args:
        settings: Resolved project layout.
        runner: Process runner used for the toolchain invocations.
        targets: Targets to build, defaults to the full catalog.

    Returns:
        One successful BuildArtifact per target, in catalog order.

    Raises:
        ToolchainError: If any build exited nonzero, produced no binary, or
            could not be spawned. failed_targets lists all of them.
    """
    clean_bin_directory(settings)

    logger.info("Starting parallel build", extra={"targets": [t.slug for t in targets]})

    artifacts: list[BuildArtifact] = []
    failures: list[str] = []

    with ThreadPoolExecutor(max_workers=max(len(targets), 1), thread_name_prefix="build") as pool:
        futures = [pool.submit(build_target, target, settings, runner) for target in targets]
        wait(futures)

    for target, future in zip(targets, futures):
        try:
            artifact = future.result()
        except BinshipError as err:
            failures.append(target.slug)
            logger.error("Build could not start", extra={"target": target.slug, "error": str(err)})
            continue
        if artifact.ok:
            artifacts.append(artifact)
        else:
            failures.append(target.slug)

    if failures:
        raise ToolchainError(
            f"Build failed for {len(failures)} of {len(targets)} target(s): {', '.join(failures)}",
            failed_targets=failures,
        )

    logger.info("All targets built", extra={"count": len(artifacts)})
    return artifacts
