# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Publish sequencing.

The publish order is fixed: the primary package first, then every platform
package in catalog order. It is strictly serial and fail-fast. The first
registry call that fails ends the run, and whatever was already published
stays published. A registry release cannot be taken back, and a re-publish of
the same version is rejected by the registry itself, so the operator has to
look at registry state before retrying (`binship check` helps with the local
side).

Dry runs build the exact same command list and run the exact same sequence;
the only difference is the registry client's own --dry-run flag.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from binship.catalog.targets import TARGETS, Target
from binship.config.settings import Settings
from binship.errors import ProcessSpawnError, PublishError
from binship.logging.logger import get_logger
from binship.packaging.synthesizer import build_and_package, package_directory, package_name
from binship.process.runner import CommandRunner
from binship.release.manifest import MANIFEST_FILE, PrimaryManifest
from binship.release.propagation import apply_version
from binship.release.versioning import DEFAULT_TAG, PublishPlan, make_plan

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class PublishReport:
    """What a completed publish run did."""

    version: str
    dry_run: bool
    tag: str
    published: list[str] = field(default_factory=list)
    command: list[str] = field(default_factory=list)


def publish_command(plan: PublishPlan, settings: Settings) -> list[str]:
    """Registry command line shared by every unit of the run."""
    args = [settings.config.registry_client, "publish"]
    if plan.dry_run:
        args.append("--dry-run")
    if plan.tag != DEFAULT_TAG:
        args.extend(["--tag", plan.tag])
    return args


def _publish_unit(
    unit: str,
    cwd: Path,
    command: list[str],
    runner: CommandRunner,
    published: list[str],
) -> None:
    _logger.info("Publishing", extra={"unit": unit, "cwd": str(cwd), "command": " ".join(command)})
    try:
        result = runner.run(command, cwd=cwd)
    except ProcessSpawnError as err:
        raise PublishError(f"Publish of {unit} could not start: {err}", unit, published) from err

    if not result.ok:
        raise PublishError(
            f"Publish of {unit} failed with exit code {result.exit_code}",
            unit,
            published,
        )

    published.append(unit)
    _logger.info("Published", extra={"unit": unit})


def _check_packages_present(settings: Settings, targets: Sequence[Target]) -> None:
    missing = [
        target.slug
        for target in targets
        if not (package_directory(target, settings) / MANIFEST_FILE).is_file()
    ]
    if missing:
        raise PublishError(
            f"Platform packages missing, run a build first: {', '.join(missing)}",
            unit=missing[0],
        )


def publish(
    plan: PublishPlan,
    manifest: PrimaryManifest,
    settings: Settings,
    runner: CommandRunner,
    targets: Sequence[Target] = TARGETS,
) -> PublishReport:
    """
    Optionally rebuild, then publish the primary package and every platform package.

    Args:
        plan: Version, dry-run flag, tag and skip-build flag for this run.
        manifest: The primary manifest, already carrying plan.version.
        settings: Resolved project layout.
        runner: Process runner for toolchain and registry calls.
        targets: Platforms to publish, in order.

    Returns:
        PublishReport listing the published units in order.

    Raises:
        ToolchainError / SourceBinaryNotFoundError: The build phase failed;
            nothing was published.
        PublishError: A package directory is missing (nothing published) or a
            registry call failed (earlier units stay published).
    """
    if not plan.skip_build:
        _logger.info("Rebuilding platform packages", extra={"version": plan.version})
        build_and_package(settings, runner, manifest, targets)

    _check_packages_present(settings, targets)

    command = publish_command(plan, settings)
    published: list[str] = []

    _logger.info(
        "Starting publish",
        extra={"version": plan.version, "dry_run": plan.dry_run, "tag": plan.tag},
    )

    primary_name = manifest.name or settings.primary_manifest_path.name
    _publish_unit(primary_name, settings.project_dir, command, runner, published)

    for target in targets:
        _publish_unit(
            package_name(target, settings),
            package_directory(target, settings),
            command,
            runner,
            published,
        )

    _logger.info(
        "All packages published",
        extra={"version": plan.version, "count": len(published), "dry_run": plan.dry_run},
    )
    return PublishReport(
        version=plan.version,
        dry_run=plan.dry_run,
        tag=plan.tag,
        published=published,
        command=command,
    )


def release(
    version_arg: str,
    settings: Settings,
    runner: CommandRunner,
    dry_run: bool = False,
    tag: str = DEFAULT_TAG,
    skip_build: bool = False,
    targets: Sequence[Target] = TARGETS,
) -> PublishReport:
    """
    The whole operator flow: resolve version, propagate it, build, publish.

    Version resolution happens before anything is written, so a bad version
    argument leaves the tree untouched. Local version files are updated even
    in a dry run; only the registry side is simulated.
    """
    manifest = PrimaryManifest.load(settings.primary_manifest_path)
    plan = make_plan(version_arg, manifest.version, dry_run=dry_run, tag=tag, skip_build=skip_build)

    _logger.info(
        "Preparing release",
        extra={"from": manifest.version, "to": plan.version, "dry_run": plan.dry_run},
    )

    apply_version(manifest, plan.version, settings, targets)
    return publish(plan, manifest, settings, runner, targets)
