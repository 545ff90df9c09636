# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the read-only consistency check.
"""

import json
import shutil

import pytest

from binship.catalog.targets import TARGETS
from binship.config.settings import Settings
from binship.packaging.synthesizer import build_and_package, package_directory, package_name
from binship.release.consistency import Divergence, DivergenceKind, check_consistency
from binship.release.manifest import PrimaryManifest


@pytest.fixture()
def synthesized(settings: Settings, fake_runner) -> PrimaryManifest:  # type: ignore[no-untyped-def]
    manifest = PrimaryManifest.load(settings.primary_manifest_path)
    build_and_package(settings, fake_runner, manifest)
    return manifest


def _set_platform_version(settings: Settings, index: int, version: str) -> None:
    path = package_directory(TARGETS[index], settings) / "package.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    data["version"] = version
    path.write_text(json.dumps(data), encoding="utf-8")


def test_fresh_package_set_has_no_divergences(settings: Settings, synthesized: PrimaryManifest) -> None:
    """A freshly built tree is consistent."""
    assert check_consistency(synthesized, settings) == []


def test_hand_edited_platform_version_is_one_divergence(
    settings: Settings, synthesized: PrimaryManifest
) -> None:
    """One edited platform version is reported once."""
    _set_platform_version(settings, 3, "1.2.2")

    divergences = check_consistency(synthesized, settings)

    assert divergences == [
        Divergence(DivergenceKind.VERSION_MISMATCH, "linux-arm64", "1.2.3", "1.2.2")
    ]


def test_missing_package_is_distinct_from_mismatch(settings: Settings, synthesized: PrimaryManifest) -> None:
    """A missing package is MISSING_PACKAGE, not a version mismatch."""
    shutil.rmtree(package_directory(TARGETS[0], settings))

    divergences = check_consistency(synthesized, settings)

    assert divergences == [Divergence(DivergenceKind.MISSING_PACKAGE, "darwin-x64", "1.2.3", None)]


def test_constraint_mismatch(settings: Settings, synthesized: PrimaryManifest) -> None:
    """A stale ^version constraint is reported."""
    path = settings.primary_manifest_path
    data = json.loads(path.read_text(encoding="utf-8"))
    name = package_name(TARGETS[1], settings)
    data["optionalDependencies"][name] = "^1.0.0"
    path.write_text(json.dumps(data), encoding="utf-8")

    divergences = check_consistency(PrimaryManifest.load(path), settings)

    assert divergences == [Divergence(DivergenceKind.CONSTRAINT_MISMATCH, name, "^1.2.3", "^1.0.0")]


def test_platform_absent_from_optional_dependencies(settings: Settings, synthesized: PrimaryManifest) -> None:
    """Test that a catalog package missing from optionalDependencies is reported."""
    path = settings.primary_manifest_path
    data = json.loads(path.read_text(encoding="utf-8"))
    name = package_name(TARGETS[4], settings)
    del data["optionalDependencies"][name]
    path.write_text(json.dumps(data), encoding="utf-8")

    divergences = check_consistency(PrimaryManifest.load(path), settings)

    assert divergences == [Divergence(DivergenceKind.MISSING_CONSTRAINT, name, "^1.2.3", None)]


def test_check_does_not_mutate_anything(settings: Settings, synthesized: PrimaryManifest) -> None:
    """The check is read-only."""
    _set_platform_version(settings, 0, "0.0.1")
    platform_path = package_directory(TARGETS[0], settings) / "package.json"
    before_primary = settings.primary_manifest_path.read_text(encoding="utf-8")
    before_platform = platform_path.read_text(encoding="utf-8")

    check_consistency(synthesized, settings)

    assert settings.primary_manifest_path.read_text(encoding="utf-8") == before_primary
    assert platform_path.read_text(encoding="utf-8") == before_platform


def test_nothing_built_reports_every_package_missing(settings: Settings) -> None:
    """An unbuilt project reports every package missing."""
    manifest = PrimaryManifest.load(settings.primary_manifest_path)

    divergences = check_consistency(manifest, settings)

    assert [d.kind for d in divergences] == [DivergenceKind.MISSING_PACKAGE] * len(TARGETS)
    assert [d.entity for d in divergences] == [t.slug for t in TARGETS]


def test_describe_is_readable() -> None:
    """describe() names entity, kind, expected and found."""
    divergence = Divergence(DivergenceKind.MISSING_PACKAGE, "win32-x64", "1.0.0", None)
    assert divergence.describe() == "win32-x64: missing_package (expected 1.0.0, found <absent>)"
