# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Platform package synthesizer: turns one built binary into one installable
registry package.

Each package directory is generated from scratch on every run:

    packages/<platform>-<cpu>/
    ├─ bin/go-deploy[.exe]   copy of the built binary, 0755 except on win32
    ├─ index.js              resolves to the absolute path of that binary
    └─ package.json          name, version, os/cpu constraints, metadata

The os/cpu fields use the registry's own vocabulary (win32, x64). That is
what lets the package manager install exactly one of these packages, the one
matching the consumer's host, out of the primary package's
optionalDependencies.

index.js is the seam the thin wrapper in the primary package relies on:
requiring the platform package yields the binary path and nothing else.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from binship.build.orchestrator import BuildArtifact, build_all
from binship.catalog.targets import TARGETS, Target
from binship.config.settings import Settings
from binship.errors import SourceBinaryNotFoundError, ToolchainError
from binship.logging.logger import get_logger
from binship.process.runner import CommandRunner
from binship.release.manifest import PrimaryManifest, write_platform_manifest
from binship.utils.filesystem import atomic_write, make_executable

_logger: logging.Logger = get_logger(__name__)

ENTRY_POINT_FILE = "index.js"
BINARY_SUBDIR = "bin"


@dataclass(frozen=True)
class PlatformPackage:
    """A synthesized package directory and what went into it."""

    target: Target
    name: str
    directory: Path
    binary_path: Path
    manifest: dict[str, Any]


def package_name(target: Target, settings: Settings) -> str:
    return f"{settings.config.package_scope}-{target.slug}"


def package_directory(target: Target, settings: Settings) -> Path:
    return settings.packages_dir / target.slug


def binary_file_name(target: Target, settings: Settings) -> str:
    return f"{settings.config.binary_name}{target.suffix}"


def render_platform_manifest(target: Target, version: str, settings: Settings) -> dict[str, Any]:
    """The generated package.json for one platform package."""
    config = settings.config
    return {
        "name": package_name(target, settings),
        "version": version,
        "description": f"{config.description} ({target.slug})",
        "main": ENTRY_POINT_FILE,
        "os": [target.platform],
        "cpu": [target.cpu],
        "repository": {
            "type": "git",
            "url": config.repository_url,
        },
        "license": config.license,
    }


def render_entry_point(target: Target, settings: Settings) -> str:
    binary = binary_file_name(target, settings)
    return f"module.exports = require.resolve('./{BINARY_SUBDIR}/{binary}');\n"


def synthesize(artifact: BuildArtifact, version: str, settings: Settings) -> PlatformPackage:
    """
    Materialize the package directory for one built target.

    Args:
        artifact: A successful build artifact.
        version: Version to stamp into the generated manifest.
        settings: Resolved project layout.

    Returns:
        The synthesized PlatformPackage.

    Raises:
        ToolchainError: If the artifact is not a successful build.
        SourceBinaryNotFoundError: If the built binary is not on disk.
        OSError: Copy/chmod/write failures, propagated unchanged.
    """
    target = artifact.target
    if not artifact.ok:
        raise ToolchainError(
            f"Refusing to package failed build for {target.slug}",
            failed_targets=[target.slug],
        )

    source = artifact.output_path
    if not source.is_file():
        raise SourceBinaryNotFoundError(f"Source binary not found for {target.slug}: {source}")

    package_dir = package_directory(target, settings)
    if package_dir.exists():
        shutil.rmtree(package_dir)
    (package_dir / BINARY_SUBDIR).mkdir(parents=True)

    binary_path = package_dir / BINARY_SUBDIR / binary_file_name(target, settings)
    shutil.copy2(source, binary_path)

    # The registry does not track an execute bit for Windows binaries.
    if not target.is_windows:
        make_executable(binary_path)

    manifest = render_platform_manifest(target, version, settings)
    write_platform_manifest(package_dir, manifest)
    atomic_write(package_dir / ENTRY_POINT_FILE, render_entry_point(target, settings))

    _logger.info(
        "Platform package created",
        extra={"package": manifest["name"], "version": version, "directory": str(package_dir)},
    )

    return PlatformPackage(
        target=target,
        name=manifest["name"],
        directory=package_dir,
        binary_path=binary_path,
        manifest=manifest,
    )


def synthesize_all(
    artifacts: Sequence[BuildArtifact],
    manifest: PrimaryManifest,
    settings: Settings,
) -> list[PlatformPackage]:
    """Package every artifact with the primary manifest's version, in the given order."""
    version = manifest.version
    return [synthesize(artifact, version, settings) for artifact in artifacts]


def build_and_package(
    settings: Settings,
    runner: CommandRunner,
    manifest: PrimaryManifest,
    targets: Sequence[Target] = TARGETS,
) -> list[PlatformPackage]:
    """
    The full build pipeline: clean-room cross-compile, then package everything.

    Nothing is packaged unless every target built.
    """
    artifacts = build_all(settings, runner, targets)
    packages = synthesize_all(artifacts, manifest, settings)
    _logger.info(
        "Platform packages ready",
        extra={"count": len(packages), "version": manifest.version},
    )
    return packages
