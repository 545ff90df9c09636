# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Version propagation: push one version into every manifest that has one.

Touches the primary manifest (version plus every optionalDependencies
constraint) and the platform manifests that already exist. Missing platform
packages are skipped, not created; creating them is the synthesizer's job.
"""

import logging
from pathlib import Path
from typing import Any, Sequence

from binship.catalog.targets import TARGETS, Target
from binship.config.settings import Settings
from binship.errors import InvalidVersionError
from binship.logging.logger import get_logger
from binship.packaging.synthesizer import package_directory
from binship.release.manifest import (
    MANIFEST_FILE,
    PrimaryManifest,
    read_platform_manifest,
    write_platform_manifest,
)
from binship.release.versioning import is_valid_version

_logger: logging.Logger = get_logger(__name__)


def apply_version(
    manifest: PrimaryManifest,
    new_version: str,
    settings: Settings,
    targets: Sequence[Target] = TARGETS,
) -> list[Path]:
    """
    Write new_version into the primary manifest and every existing platform manifest.

    Every existing platform manifest is read before anything is written, so
    a bad version or an unreadable manifest leaves the tree as it was.

    Args:
        manifest: The loaded primary manifest; updated in place and saved.
        new_version: Strict x.y.z version.
        settings: Resolved project layout.
        targets: Platforms whose manifests to update.

    Returns:
        Paths of every manifest written, primary first.

    Raises:
        InvalidVersionError: If new_version is malformed.
        ManifestError: If an existing platform manifest is unreadable.
    """
    if not is_valid_version(new_version):
        raise InvalidVersionError(f"Invalid version '{new_version}', expected major.minor.patch")

    staged: list[tuple[Target, Path, dict[str, Any]]] = []
    for target in targets:
        package_dir = package_directory(target, settings)
        if not (package_dir / MANIFEST_FILE).is_file():
            _logger.debug("No platform manifest to update", extra={"platform": target.slug})
            continue
        data = read_platform_manifest(package_dir)
        data["version"] = new_version
        staged.append((target, package_dir, data))

    previous = manifest.version
    manifest.set_version(new_version)
    manifest.save()
    written = [manifest.path]

    for target, package_dir, data in staged:
        written.append(write_platform_manifest(package_dir, data))
        _logger.info("Platform version updated", extra={"platform": target.slug, "version": new_version})

    _logger.info(
        "Version propagated",
        extra={"from": previous, "to": new_version, "manifests": len(written)},
    )
    return written
