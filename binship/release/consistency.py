# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Cross-manifest consistency check.

Read-only. Recomputes what every manifest should say given the primary
version and reports each place where disk disagrees. Nothing is fixed here;
the operator re-runs propagation (`binship bump`) or a build deliberately.

This is also the recovery tool after an interrupted build or publish: it
shows which packages are missing or lagging before anyone retries.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from binship.catalog.targets import TARGETS, Target
from binship.config.settings import Settings
from binship.errors import ManifestError
from binship.logging.logger import get_logger
from binship.packaging.synthesizer import package_directory, package_name
from binship.release.manifest import MANIFEST_FILE, PrimaryManifest, constraint_for, read_platform_manifest

_logger: logging.Logger = get_logger(__name__)


class DivergenceKind(Enum):
    VERSION_MISMATCH = "version_mismatch"
    MISSING_PACKAGE = "missing_package"
    CONSTRAINT_MISMATCH = "constraint_mismatch"
    MISSING_CONSTRAINT = "missing_constraint"


@dataclass(frozen=True)
class Divergence:
    """One mismatch between expected and actual state. actual is None when absent."""

    kind: DivergenceKind
    entity: str
    expected: str
    actual: Optional[str]

    def describe(self) -> str:
        actual = "<absent>" if self.actual is None else self.actual
        return f"{self.entity}: {self.kind.value} (expected {self.expected}, found {actual})"


def check_consistency(
    manifest: PrimaryManifest,
    settings: Settings,
    targets: Sequence[Target] = TARGETS,
) -> list[Divergence]:
    """
    Compare every platform manifest and optional-dependency constraint with the primary version.

    Args:
        manifest: The primary manifest (source of truth).
        settings: Resolved project layout.
        targets: Platforms expected to have a package.

    Returns:
        All divergences found, platform packages first (catalog order), then
        constraints. An empty list means everything agrees.
    """
    version = manifest.version
    expected_constraint = constraint_for(version)
    divergences: list[Divergence] = []

    for target in targets:
        package_dir = package_directory(target, settings)
        if not (package_dir / MANIFEST_FILE).is_file():
            divergences.append(Divergence(DivergenceKind.MISSING_PACKAGE, target.slug, version, None))
            continue
        try:
            actual = read_platform_manifest(package_dir).get("version")
        except ManifestError as err:
            _logger.warning("Unreadable platform manifest", extra={"platform": target.slug, "error": str(err)})
            actual = None
        actual_str = None if actual is None else str(actual)
        if actual_str != version:
            divergences.append(Divergence(DivergenceKind.VERSION_MISMATCH, target.slug, version, actual_str))

    deps = manifest.optional_dependencies
    for dep, constraint in deps.items():
        if constraint != expected_constraint:
            divergences.append(
                Divergence(DivergenceKind.CONSTRAINT_MISMATCH, dep, expected_constraint, str(constraint))
            )

    for target in targets:
        name = package_name(target, settings)
        if name not in deps:
            divergences.append(Divergence(DivergenceKind.MISSING_CONSTRAINT, name, expected_constraint, None))

    for divergence in divergences:
        _logger.warning(
            "Divergence",
            extra={
                "kind": divergence.kind.value,
                "entity": divergence.entity,
                "expected": divergence.expected,
                "actual": divergence.actual,
            },
        )

    _logger.info(
        "Consistency check finished",
        extra={"version": version, "divergences": len(divergences)},
    )
    return divergences
