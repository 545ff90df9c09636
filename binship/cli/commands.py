# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the binship CLI.

Each handler takes the parsed argparse namespace and returns an exit code.
Exceptions never escape a handler: configuration problems map to
CONFIG_ERROR, build/filesystem/publish failures to RUNTIME_ERROR and
consistency divergences to VALIDATION_ERROR.

No print() calls. Everything goes through the structured logger.
"""

import argparse
import logging
from pathlib import Path

from binship.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, VALIDATION_ERROR
from binship.config.exceptions import ConfigError
from binship.config.loader import load_or_default
from binship.config.settings import Settings
from binship.errors import (
    BinshipError,
    InvalidVersionError,
    ManifestError,
    PublishError,
    ToolchainError,
    UnknownTargetError,
)
from binship.logging.logger import get_logger, set_log_level
from binship.process.runner import SubprocessRunner

_CONFIGURATION_ERRORS = (ConfigError, UnknownTargetError, InvalidVersionError, ManifestError)


def _load_settings(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Settings | None, logging.Logger]:
    """
    Shared setup for every command: resolve the project, load config, set logging.

    Returns a tuple of (exit_code, settings, logger). If exit_code is not
    SUCCESS, the caller should return it immediately.
    """
    logger = get_logger(f"binship.cli.{command_name}")
    if args.log_level is not None:
        set_log_level(args.log_level)

    project_dir = Path(args.project_dir) if args.project_dir else Path.cwd()
    config_path = Path(args.config) if args.config else None

    try:
        config = load_or_default(project_dir, config_path)
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR, None, logger

    settings = Settings.for_project(project_dir, config)
    set_log_level(args.log_level or config.log_level, settings.log_file)

    logger.debug(
        "Settings resolved",
        extra={"command": command_name, "project_dir": str(settings.project_dir), "config": args.config},
    )
    return SUCCESS, settings, logger


def _exit_code_for(err: Exception, logger: logging.Logger, command_name: str) -> int:
    """Log a failure with whatever structured detail the exception carries."""
    extra: dict[str, object] = {"command": command_name, "error": str(err)}
    if isinstance(err, ToolchainError):
        extra["failed_targets"] = list(err.failed_targets)
    if isinstance(err, PublishError):
        extra["failed_unit"] = err.unit
        extra["already_published"] = list(err.published)

    if isinstance(err, _CONFIGURATION_ERRORS):
        logger.error("Configuration error", extra=extra)
        return CONFIG_ERROR

    logger.error("Command failed", extra=extra)
    return RUNTIME_ERROR


def handle_build(args: argparse.Namespace) -> int:
    """Cross-compile every target and regenerate the platform packages."""
    exit_code, settings, logger = _load_settings(args, "build")
    if exit_code != SUCCESS or settings is None:
        return exit_code

    from binship.packaging.synthesizer import build_and_package
    from binship.release.manifest import PrimaryManifest

    try:
        manifest = PrimaryManifest.load(settings.primary_manifest_path)
        packages = build_and_package(settings, SubprocessRunner(), manifest)
    except (BinshipError, OSError) as err:
        return _exit_code_for(err, logger, "build")

    logger.info(
        "Build complete",
        extra={"version": manifest.version, "packages": [p.name for p in packages]},
    )
    return SUCCESS


def handle_check(args: argparse.Namespace) -> int:
    """Report every version divergence between the primary and platform manifests."""
    exit_code, settings, logger = _load_settings(args, "check")
    if exit_code != SUCCESS or settings is None:
        return exit_code

    from binship.release.consistency import check_consistency
    from binship.release.manifest import PrimaryManifest

    try:
        manifest = PrimaryManifest.load(settings.primary_manifest_path)
        divergences = check_consistency(manifest, settings)
    except BinshipError as err:
        return _exit_code_for(err, logger, "check")

    if divergences:
        logger.error(
            "Versions are inconsistent",
            extra={
                "version": manifest.version,
                "divergences": [d.describe() for d in divergences],
            },
        )
        return VALIDATION_ERROR

    logger.info("All versions consistent", extra={"version": manifest.version})
    return SUCCESS


def handle_bump(args: argparse.Namespace) -> int:
    """Compute a new version and write it into every existing manifest."""
    exit_code, settings, logger = _load_settings(args, "bump")
    if exit_code != SUCCESS or settings is None:
        return exit_code

    from binship.release.manifest import PrimaryManifest
    from binship.release.propagation import apply_version
    from binship.release.versioning import compute_version

    try:
        manifest = PrimaryManifest.load(settings.primary_manifest_path)
        previous = manifest.version
        new_version = compute_version(args.version, previous)
        written = apply_version(manifest, new_version, settings)
    except (BinshipError, OSError) as err:
        return _exit_code_for(err, logger, "bump")

    logger.info(
        "Version bumped",
        extra={"from": previous, "to": new_version, "manifests": [str(p) for p in written]},
    )
    return SUCCESS


def handle_publish(args: argparse.Namespace) -> int:
    """Bump, rebuild and publish the primary and all platform packages."""
    if args.version is None:
        args.parser.print_help()
        return SUCCESS

    exit_code, settings, logger = _load_settings(args, "publish")
    if exit_code != SUCCESS or settings is None:
        return exit_code

    from binship.release.publisher import release

    try:
        report = release(
            args.version,
            settings,
            SubprocessRunner(),
            dry_run=args.dry_run,
            tag=args.tag,
            skip_build=args.no_build,
        )
    except (BinshipError, OSError) as err:
        return _exit_code_for(err, logger, "publish")

    logger.info(
        "Release complete",
        extra={
            "version": report.version,
            "dry_run": report.dry_run,
            "tag": report.tag,
            "published": report.published,
        },
    )
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Log the target catalog, the host target and where its binary would be found."""
    exit_code, settings, logger = _load_settings(args, "info")
    if exit_code != SUCCESS or settings is None:
        return exit_code

    from binship import __version__
    from binship.build.orchestrator import output_path
    from binship.catalog.targets import host_target, list_targets
    from binship.packaging.synthesizer import package_directory, package_name

    for target in list_targets():
        logger.info(
            "Target",
            extra={
                "toolchain": f"{target.os}/{target.arch}",
                "package": package_name(target, settings),
                "build_output": str(output_path(target, settings)),
                "package_dir": str(package_directory(target, settings)),
            },
        )

    try:
        host = host_target()
    except UnknownTargetError as err:
        logger.warning("Host is not a supported target", extra={"error": str(err)})
        host = None

    logger.info(
        "binship information",
        extra={
            "binship_version": __version__,
            "project_dir": str(settings.project_dir),
            "host_target": host.slug if host is not None else None,
            "host_package": package_name(host, settings) if host is not None else None,
        },
    )
    return SUCCESS
